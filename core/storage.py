"""
Key-value backends for persisted state.

All stores keep one JSON-encoded string per logical key (history, settings,
custom presets). Backends only get/set/remove strings; they know nothing about
what is stored under each key.
"""
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional, Union
import asyncio
import json

from core.errors import StorageError
from utils.file_ops import load_json_file, write_json_file
from utils.logging import get_logger

logger = get_logger(__name__)


class KeyValueBackend(ABC):
    """Interface for the string key-value store the app persists into."""

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """Return the value stored under key, or None if absent."""
        pass

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous value."""
        pass

    @abstractmethod
    async def remove(self, key: str) -> None:
        """Remove key. Removing an absent key is not an error."""
        pass


class InMemoryBackend(KeyValueBackend):
    """Process-local backend, used for tests and throwaway sessions."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = value

    async def remove(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileBackend(KeyValueBackend):
    """
    Backend persisting every key into a single JSON object on disk.

    The whole file is rewritten atomically on each change. There is no
    cross-process locking; a single writer per data file is assumed.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path).expanduser()

    def _load(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = load_json_file(self.path)
        except (OSError, json.JSONDecodeError) as e:
            raise StorageError(f"Failed to read storage file {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise StorageError(f"Storage file {self.path} does not contain a JSON object")
        return data

    def _save(self, data: Dict[str, str]) -> None:
        try:
            write_json_file(self.path, data)
        except (OSError, TypeError) as e:
            raise StorageError(f"Failed to write storage file {self.path}: {e}") from e

    async def get(self, key: str) -> Optional[str]:
        data = await asyncio.to_thread(self._load)
        return data.get(key)

    async def set(self, key: str, value: str) -> None:
        data = await asyncio.to_thread(self._load)
        data[key] = value
        await asyncio.to_thread(self._save, data)
        logger.debug(f"Wrote key '{key}' to {self.path}")

    async def remove(self, key: str) -> None:
        data = await asyncio.to_thread(self._load)
        if key in data:
            del data[key]
            await asyncio.to_thread(self._save, data)
            logger.debug(f"Removed key '{key}' from {self.path}")
