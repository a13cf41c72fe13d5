"""
Import and export of presets as portable JSON.

The store does the actual writes; this layer adds what an interactive flow
needs around it: parsing untrusted text, previewing what would be imported,
detecting clashes with presets already in the catalog, and applying the
caller's chosen resolution.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional
import json

from core.errors import ValidationError
from core.preset_store import ImportResult, PresetStore
from core.prompts.models import Preset
from core.prompts.registry import PresetCatalog
from core.prompts.validation import validate_preset
from utils.logging import get_logger

logger = get_logger(__name__)


class ConflictPolicy(Enum):
    RENAME = "rename"  # import under a freshly minted id
    OVERWRITE = "overwrite"  # replace the clashing preset


@dataclass
class ImportConflict:
    document: Mapping[str, Any]
    existing: Preset
    reason: str  # "id" or "name"

    def describe(self) -> str:
        what = "the same ID" if self.reason == "id" else "the same name"
        return f'A preset with {what} already exists: "{self.existing.name}"'


@dataclass
class ImportPreview:
    """What an import would do, computed without writing anything."""

    kind: str  # "single" or "bulk"
    documents: List[Any] = field(default_factory=list)
    conflicts: List[ImportConflict] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    @property
    def has_conflicts(self) -> bool:
        return bool(self.conflicts)


class PresetTransfer:
    """Import/export orchestration over the catalog and the preset store."""

    def __init__(self, catalog: PresetCatalog, store: Optional[PresetStore] = None):
        self.catalog = catalog
        self.store = store or catalog.store

    @staticmethod
    def parse_document(text: str) -> Any:
        """Parse untrusted JSON into a plain document; nothing is trusted yet."""
        if not text or not text.strip():
            raise ValidationError("Please provide preset JSON content")
        try:
            return json.loads(text)
        except ValueError as e:
            raise ValidationError(f"Invalid JSON: {e}") from e

    @staticmethod
    def is_bulk(document: Any) -> bool:
        return isinstance(document, dict) and isinstance(document.get("presets"), list)

    async def find_conflict(self, document: Any) -> Optional[ImportConflict]:
        """
        Look for a catalog preset clashing with the candidate.

        An id match wins over a name match. Built-ins take part, so importing
        a preset with a built-in's id or name is reported too.
        """
        if not isinstance(document, Mapping):
            return None

        doc_id = str(document.get("id") or "").strip()
        name = str(document.get("name") or "").strip()
        presets = await self.catalog.get_all()

        if doc_id:
            for preset in presets:
                if preset.id == doc_id:
                    return ImportConflict(document, preset, "id")
        if name:
            for preset in presets:
                if preset.name == name:
                    return ImportConflict(document, preset, "name")
        return None

    async def preview(self, text: str) -> ImportPreview:
        document = self.parse_document(text)
        bulk = self.is_bulk(document)
        preview = ImportPreview(
            kind="bulk" if bulk else "single",
            documents=list(document["presets"]) if bulk else [document],
        )

        for position, candidate in enumerate(preview.documents, start=1):
            result = validate_preset(candidate, self.store.limits)
            if not result.valid:
                prefix = f"Item {position}: " if bulk else ""
                preview.errors.append(prefix + "; ".join(result.errors))
                continue
            conflict = await self.find_conflict(candidate)
            if conflict is not None:
                preview.conflicts.append(conflict)

        return preview

    async def _resolve(self, document: Any, policy: ConflictPolicy) -> Any:
        conflict = await self.find_conflict(document)
        if conflict is None:
            return document

        if policy is ConflictPolicy.OVERWRITE:
            logger.info(f"Overwriting preset '{conflict.existing.id}' ({conflict.reason} conflict)")
            return {**document, "id": conflict.existing.id}

        if conflict.reason == "id":
            # Dropping the id makes the store mint a fresh one
            return {key: value for key, value in document.items() if key != "id"}
        return document

    async def import_text(
        self,
        text: str,
        policy: ConflictPolicy = ConflictPolicy.RENAME,
        replace_all: bool = False,
        confirmed: bool = False
    ) -> ImportResult:
        """
        Import a single preset or a bulk export.

        Args:
            text: JSON in either the single-preset or the bulk export format
            policy: How to resolve clashes with existing presets
            replace_all: Discard every existing custom preset first (bulk only)
            confirmed: Must be True whenever ``replace_all`` is requested

        Returns:
            ImportResult with the stored presets and any per-item errors

        Raises:
            ValidationError: On unparseable JSON or an unconfirmed replace-all
            StorageError: If a single preset cannot be imported, or the bulk
                envelope itself is malformed
        """
        document = self.parse_document(text)

        if not self.is_bulk(document):
            if replace_all:
                raise ValidationError("Replacing all presets requires a bulk export file")
            resolved = await self._resolve(document, policy)
            preset = await self.store.import_document(
                resolved, overwrite=policy is ConflictPolicy.OVERWRITE
            )
            return ImportResult(imported=1, presets=[preset])

        if replace_all:
            if not confirmed:
                raise ValidationError(
                    "Replacing all custom presets discards every preset not in the file; confirm to continue"
                )
            logger.warning("Replace-all import confirmed by caller")
            return await self.store.import_many(text, overwrite=False, merge=False)

        resolved_documents = []
        for candidate in document["presets"]:
            if validate_preset(candidate, self.store.limits).valid:
                candidate = await self._resolve(candidate, policy)
            resolved_documents.append(candidate)

        envelope: Dict[str, Any] = {**document, "presets": resolved_documents}
        return await self.store.import_many(
            json.dumps(envelope),
            overwrite=policy is ConflictPolicy.OVERWRITE,
            merge=True,
        )

    async def export_preset(self, preset_id: str) -> str:
        """
        Export any preset as JSON.

        Custom presets go through the store. A built-in is exported as a
        starting point for a new custom preset: blank id, not built-in.
        """
        preset = await self.catalog.get_by_id(preset_id)
        if preset is not None and preset.is_built_in:
            data = preset.to_dict()
            data["id"] = ""
            data["isBuiltIn"] = False
            return json.dumps(data, indent=2, ensure_ascii=False)
        return await self.store.export_one(preset_id)

    async def export_all(self) -> str:
        return await self.store.export_all()
