from typing import Any, Dict, Optional
import json

from config.constants import STORAGE_KEYS
from core.errors import StorageError
from core.storage import KeyValueBackend


class SettingsStore:
    """Persisted user settings, kept as one JSON object and merged on update."""

    LAST_SELECTED_PRESET = "lastSelectedPresetId"

    def __init__(self, backend: KeyValueBackend, key: str = STORAGE_KEYS["settings"]):
        self.backend = backend
        self.key = key

    async def get(self) -> Dict[str, Any]:
        try:
            raw = await self.backend.get(self.key)
            settings = json.loads(raw) if raw else {}
            if not isinstance(settings, dict):
                raise ValueError("stored settings are not a JSON object")
            return settings
        except Exception as e:
            raise StorageError(f"Failed to load settings: {e}") from e

    async def update(self, changes: Dict[str, Any]) -> Dict[str, Any]:
        """Shallow-merge changes into the stored settings and return the result."""
        try:
            settings = {**await self.get(), **changes}
            await self.backend.set(self.key, json.dumps(settings, ensure_ascii=False))
            return settings
        except Exception as e:
            raise StorageError(f"Failed to update settings: {e}") from e

    async def get_last_selected_preset_id(self) -> Optional[str]:
        return (await self.get()).get(self.LAST_SELECTED_PRESET)

    async def set_last_selected_preset_id(self, preset_id: str) -> None:
        await self.update({self.LAST_SELECTED_PRESET: preset_id})
