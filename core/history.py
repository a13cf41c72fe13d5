from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional
import json

from config.constants import APP_VERSION, MAX_HISTORY_ITEMS_LIMIT, STORAGE_KEYS
from core.errors import StorageError
from core.storage import KeyValueBackend
from utils.helpers import generate_id
from utils.logging import get_logger
from utils.timestamps import now_ms, to_iso

logger = get_logger(__name__)


@dataclass
class HistoryItem:
    id: str
    timestamp: int
    preset_id: str
    input: str
    output: str
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "timestamp": self.timestamp,
            "presetId": self.preset_id,
            "input": self.input,
            "output": self.output,
            "metadata": dict(self.metadata),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'HistoryItem':
        return cls(
            id=str(data["id"]),
            timestamp=int(data["timestamp"]),
            preset_id=str(data["presetId"]),
            input=str(data["input"]),
            output=str(data["output"]),
            metadata=dict(data.get("metadata") or {}),
        )


class HistoryStore:
    """Newest-first log of enhancements, capped at a configurable size."""

    def __init__(
        self,
        backend: KeyValueBackend,
        max_items: int = 50,
        clock: Callable[[], int] = now_ms,
        key: str = STORAGE_KEYS["history"]
    ):
        self.backend = backend
        self.max_items = max(1, min(max_items, MAX_HISTORY_ITEMS_LIMIT))
        self._clock = clock
        self.key = key

    async def _read(self) -> List[HistoryItem]:
        raw = await self.backend.get(self.key)
        if not raw:
            return []
        return [HistoryItem.from_dict(entry) for entry in json.loads(raw)]

    async def _write(self, items: List[HistoryItem]) -> None:
        payload = json.dumps([item.to_dict() for item in items], ensure_ascii=False)
        await self.backend.set(self.key, payload)

    async def save(
        self,
        preset_id: str,
        input: str,
        output: str,
        metadata: Optional[Dict[str, Any]] = None
    ) -> str:
        """Record an enhancement and return the new history id."""
        try:
            item = HistoryItem(
                id=generate_id("hist"),
                timestamp=self._clock(),
                preset_id=preset_id,
                input=input,
                output=output,
                metadata=dict(metadata or {}),
            )
            items = await self._read()
            await self._write([item] + items[:self.max_items - 1])
            logger.debug(f"Saved history item '{item.id}' for preset '{preset_id}'")
            return item.id
        except Exception as e:
            raise StorageError(f"Failed to save to history: {e}") from e

    async def list(self, limit: Optional[int] = None) -> List[HistoryItem]:
        try:
            items = await self._read()
        except Exception as e:
            raise StorageError(f"Failed to load history: {e}") from e
        return items[:limit] if limit else items

    async def get(self, item_id: str) -> Optional[HistoryItem]:
        return next((item for item in await self.list() if item.id == item_id), None)

    async def delete(self, item_id: str) -> None:
        try:
            items = await self._read()
            await self._write([item for item in items if item.id != item_id])
        except Exception as e:
            raise StorageError(f"Failed to delete history item: {e}") from e

    async def clear(self) -> None:
        try:
            await self.backend.remove(self.key)
        except Exception as e:
            raise StorageError(f"Failed to clear history: {e}") from e

    @staticmethod
    def export_item(item: HistoryItem) -> str:
        """Serialise a history entry for sharing outside the app."""
        export_data = {
            "id": item.id,
            "timestamp": item.timestamp,
            "created": to_iso(item.timestamp),
            "preset": item.preset_id,
            "original": item.input,
            "enhanced": item.output,
            "metadata": {**item.metadata, "version": APP_VERSION},
        }
        return json.dumps(export_data, indent=2, ensure_ascii=False)
