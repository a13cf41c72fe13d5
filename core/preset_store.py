"""
Persistence for user-defined presets.

The whole collection lives under a single key of the key-value backend and
every operation is a read-modify-write of that key. There are no locks: the
host is expected to run one mutating command at a time.
"""
from dataclasses import dataclass, field, replace
from typing import Any, Callable, List, Mapping, Optional, Set
import json

from config.constants import EXPORT_VERSION, MAX_CUSTOM_PRESETS, STORAGE_KEYS
from config.settings import ValidationLimits
from core.errors import StorageError, ValidationError
from core.prompts.models import Preset, parse_timestamp
from core.prompts.validation import validate_preset
from core.storage import KeyValueBackend
from utils.helpers import generate_id
from utils.logging import get_logger
from utils.timestamps import iso_now, now_ms

logger = get_logger(__name__)


@dataclass
class ImportResult:
    """Outcome of a bulk import; one error message per skipped item."""

    imported: int = 0
    skipped: int = 0
    errors: List[str] = field(default_factory=list)
    presets: List[Preset] = field(default_factory=list)


class PresetStore:
    """
    CRUD, import and export for custom presets.

    The collection is capped at ``max_presets`` entries. When a write would
    exceed the cap the most recently updated presets are kept and the rest are
    dropped silently.
    """

    def __init__(
        self,
        backend: KeyValueBackend,
        max_presets: int = MAX_CUSTOM_PRESETS,
        limits: Optional[ValidationLimits] = None,
        clock: Callable[[], int] = now_ms,
        key: str = STORAGE_KEYS["custom_presets"]
    ):
        """
        Args:
            backend: Key-value backend holding the JSON-encoded collection
            max_presets: Maximum number of custom presets retained
            limits: Validation ceilings applied before anything is persisted
            clock: Returns the current time in epoch milliseconds
            key: Backend key for the collection
        """
        self.backend = backend
        self.max_presets = max_presets
        self.limits = limits
        self._clock = clock
        self.key = key

    async def _read(self) -> List[Preset]:
        raw = await self.backend.get(self.key)
        if not raw:
            return []
        documents = json.loads(raw)
        if not isinstance(documents, list):
            raise ValueError("stored custom presets are not a JSON array")
        return [Preset.from_dict(document) for document in documents]

    async def _write(self, presets: List[Preset], written_id: Optional[str] = None) -> List[Preset]:
        presets = self._enforce_limit(presets, written_id)
        payload = json.dumps([preset.to_dict() for preset in presets], ensure_ascii=False)
        await self.backend.set(self.key, payload)
        return presets

    def _enforce_limit(self, presets: List[Preset], written_id: Optional[str] = None) -> List[Preset]:
        """
        Drop the least recently updated presets above ``max_presets``.

        The preset just written always survives. Remaining ties on
        ``updated_at`` go to the entry later in the list. Survivors keep
        their stored order.
        """
        if len(presets) <= self.max_presets:
            return presets

        ranked = sorted(
            enumerate(presets),
            key=lambda entry: (entry[1].id == written_id, entry[1].updated_at or 0, entry[0]),
            reverse=True
        )
        kept_positions = sorted(position for position, _ in ranked[:self.max_presets])
        retained = [presets[position] for position in kept_positions]

        kept_ids = {p.id for p in retained}
        evicted = [p.id for p in presets if p.id not in kept_ids]
        logger.info(f"Custom preset limit of {self.max_presets} reached; evicted {', '.join(evicted)}")
        return retained

    def _new_id(self, taken: Set[str]) -> str:
        preset_id = generate_id("preset")
        while preset_id in taken:
            preset_id = generate_id("preset")
        return preset_id

    async def list(self) -> List[Preset]:
        """Return all custom presets in stored order (empty if nothing is stored)."""
        try:
            return await self._read()
        except Exception as e:
            raise StorageError(f"Failed to load custom presets: {e}") from e

    async def get(self, preset_id: str) -> Optional[Preset]:
        for preset in await self.list():
            if preset.id == preset_id:
                return preset
        return None

    async def upsert(self, preset: Preset) -> Preset:
        """
        Insert or replace a custom preset by id.

        Args:
            preset: The preset to store; ``is_built_in`` is forced to False

        Returns:
            The stored preset with timestamps applied

        Raises:
            ValidationError: If the preset fails validation or has no id
            StorageError: If the backend cannot be read or written
        """
        if not preset.id or not preset.id.strip():
            raise ValidationError("Invalid preset: id is required", field="id")
        result = validate_preset(preset, self.limits)
        if not result.valid:
            raise ValidationError(f"Invalid preset: {'; '.join(result.errors)}", errors=result.errors)

        try:
            presets = await self._read()
            now = self._clock()
            index = next((i for i, p in enumerate(presets) if p.id == preset.id), None)

            if index is not None:
                created_at = presets[index].created_at or preset.created_at or now
            else:
                created_at = preset.created_at or now

            to_save = replace(preset, is_built_in=False, created_at=created_at, updated_at=now)
            if index is not None:
                presets[index] = to_save
            else:
                presets.append(to_save)

            await self._write(presets, written_id=to_save.id)
            logger.debug(f"Saved custom preset '{to_save.id}'")
            return to_save
        except Exception as e:
            raise StorageError(f"Failed to save custom preset: {e}") from e

    async def delete(self, preset_id: str) -> None:
        """Remove a custom preset; deleting an unknown id is a no-op."""
        try:
            presets = await self._read()
            remaining = [p for p in presets if p.id != preset_id]
            if len(remaining) != len(presets):
                await self._write(remaining)
                logger.debug(f"Deleted custom preset '{preset_id}'")
        except Exception as e:
            raise StorageError(f"Failed to delete custom preset: {e}") from e

    async def clear(self) -> None:
        """Remove the entire custom preset collection."""
        try:
            await self.backend.remove(self.key)
            logger.info("Cleared all custom presets")
        except Exception as e:
            raise StorageError(f"Failed to clear custom presets: {e}") from e

    async def export_one(self, preset_id: str) -> str:
        """Serialise one custom preset to pretty-printed JSON."""
        try:
            preset = next((p for p in await self._read() if p.id == preset_id), None)
            if preset is None:
                raise StorageError(f"Preset not found: {preset_id}")
            if not preset.name.strip() or not preset.system_prompt.strip():
                raise StorageError("Invalid preset: missing name or systemPrompt")
            return json.dumps(preset.to_dict(), indent=2, ensure_ascii=False)
        except Exception as e:
            raise StorageError(f"Failed to export custom preset: {e}") from e

    async def export_all(self) -> str:
        """Serialise every custom preset into the bulk export envelope."""
        try:
            presets = await self._read()
            if not presets:
                raise StorageError("No custom presets to export")

            for preset in presets:
                if not preset.name.strip() or not preset.system_prompt.strip():
                    raise StorageError(f"Invalid preset found: {preset.id or 'unknown'}")

            export_data = {
                "exportedAt": iso_now(),
                "version": EXPORT_VERSION,
                "presetsCount": len(presets),
                "presets": [preset.to_dict() for preset in presets],
            }
            return json.dumps(export_data, indent=2, ensure_ascii=False)
        except Exception as e:
            raise StorageError(f"Failed to export all custom presets: {e}") from e

    async def import_one(self, json_text: str, overwrite: bool = False) -> Preset:
        """
        Import a single preset from its JSON form.

        Args:
            json_text: A preset document in the wire format
            overwrite: Replace an existing entry with the same id instead of
                minting a new id for the incoming preset

        Returns:
            The stored preset
        """
        try:
            document = json.loads(json_text)
        except (TypeError, ValueError) as e:
            raise StorageError(f"Failed to import custom preset: invalid JSON: {e}") from e
        return await self.import_document(document, overwrite=overwrite)

    async def import_document(self, document: Any, overwrite: bool = False) -> Preset:
        """Import an already-parsed preset document. See ``import_one``."""
        try:
            if not isinstance(document, Mapping):
                raise ValidationError("Invalid preset: expected a JSON object")

            result = validate_preset(document, self.limits)
            if not result.valid:
                raise ValidationError(f"Invalid preset: {'; '.join(result.errors)}", errors=result.errors)

            presets = await self._read()
            taken = {p.id for p in presets}

            preset_id = str(document.get("id") or "").strip() or self._new_id(taken)
            if preset_id in taken and not overwrite:
                preset_id = self._new_id(taken)

            existing = next((p for p in presets if p.id == preset_id), None)
            now = self._clock()
            created_at = parse_timestamp(document.get("createdAt"))
            if created_at is None:
                created_at = existing.created_at if existing and existing.created_at else now

            to_save = Preset.from_dict({
                **document,
                "id": preset_id,
                "isBuiltIn": False,
                "createdAt": created_at,
                "updatedAt": now,
            })

            if existing is not None:
                presets = [to_save if p.id == preset_id else p for p in presets]
            else:
                presets.append(to_save)

            await self._write(presets, written_id=to_save.id)
            logger.info(f"Imported preset '{to_save.name}' as '{to_save.id}'")
            return to_save
        except Exception as e:
            raise StorageError(f"Failed to import custom preset: {e}") from e

    async def import_many(self, json_text: str, overwrite: bool = False, merge: bool = True) -> ImportResult:
        """
        Import every preset from a bulk export.

        Items are imported one at a time; a failing item is recorded in
        ``errors`` and skipped without aborting the rest.

        Args:
            json_text: A bulk export document with a top-level ``presets`` array
            overwrite: Passed through to each single-preset import
            merge: When False (and ``overwrite`` is False) the existing
                collection is cleared before importing

        Returns:
            ImportResult with imported/skipped counts and per-item errors
        """
        try:
            parsed = json.loads(json_text)
        except (TypeError, ValueError) as e:
            raise StorageError(f"Failed to import presets: invalid JSON: {e}") from e

        if not isinstance(parsed, dict) or not isinstance(parsed.get("presets"), list):
            raise StorageError("Failed to import presets: Invalid export format: missing presets array")

        if not merge and not overwrite:
            logger.warning("Replacing all custom presets with the imported collection")
            await self.clear()

        result = ImportResult()
        for position, document in enumerate(parsed["presets"], start=1):
            try:
                result.presets.append(await self.import_document(document, overwrite=overwrite))
                result.imported += 1
            except StorageError as e:
                name = document.get("name") if isinstance(document, Mapping) else None
                result.errors.append(f'Failed to import preset "{name or "unknown"}" (item {position}): {e}')
                result.skipped += 1

        logger.info(f"Bulk import finished: {result.imported} imported, {result.skipped} skipped")
        return result
