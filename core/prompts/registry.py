"""
PresetCatalog: the merged view of built-in and custom presets.

Two lookup orders are kept on purpose. ``get_all`` lists built-ins first and
lets a custom preset take over the slot of a built-in with the same id;
``get_by_id`` consults the custom collection first and only then falls back to
the built-ins. Both give the custom preset precedence, but callers must not
assume a single traversal order.
"""
from dataclasses import replace
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional

from core.prompts.defaults import BUILT_IN_PRESETS, PREVIEW_INPUTS
from core.prompts.models import Preset
from core.prompts.template import render
from utils.helpers import generate_id
from utils.logging import get_logger

if TYPE_CHECKING:
    from core.preset_store import PresetStore

logger = get_logger(__name__)


class PresetCatalog:
    """
    Central catalog of presets.

    The catalog never raises errors of its own; failures from the store
    propagate unchanged.
    """

    def __init__(self, store: "PresetStore", built_ins: Mapping[str, Preset] = BUILT_IN_PRESETS):
        """
        Args:
            store: Store holding the custom presets
            built_ins: Read-only mapping of id to built-in preset
        """
        self.store = store
        self._built_ins = built_ins

    def is_built_in_id(self, preset_id: str) -> bool:
        return preset_id in self._built_ins

    async def get_all(self) -> List[Preset]:
        """
        List every preset, one entry per id.

        Built-ins come first in their fixed order, followed by custom presets.
        A custom preset sharing an id with a built-in replaces it in place.
        """
        merged: Dict[str, Preset] = {}
        for preset in self._built_ins.values():
            merged[preset.id] = preset
        for preset in await self.store.list():
            merged[preset.id] = preset
        return list(merged.values())

    async def get_by_id(self, preset_id: str) -> Optional[Preset]:
        """Find a preset by id, checking custom presets before built-ins."""
        custom = await self.store.get(preset_id)
        if custom is not None:
            return custom
        return self._built_ins.get(preset_id)

    async def find_by_name(self, name: str) -> Optional[Preset]:
        wanted = name.strip().lower()
        for preset in await self.get_all():
            if preset.name.strip().lower() == wanted:
                return preset
        return None

    async def save_custom_preset(self, preset: Preset) -> Preset:
        """Persist a user preset, assigning an id when it has none."""
        if not preset.id:
            preset = replace(preset, id=generate_id("preset"))
        return await self.store.upsert(replace(preset, is_built_in=False))

    async def update_preset(self, preset_id: str, **changes: Any) -> Optional[Preset]:
        """
        Apply field changes to an existing preset and store the result.

        Editing a custom preset replaces it in place and keeps its
        ``created_at``. Editing a built-in stores a custom override under the
        built-in's id, leaving the built-in itself untouched.

        Args:
            preset_id: Id of the preset to edit
            **changes: Preset fields to replace, e.g. ``name`` or ``tags``

        Returns:
            The stored preset, or None if no preset has that id
        """
        current = await self.get_by_id(preset_id)
        if current is None:
            return None

        saved = await self.store.upsert(replace(current, **changes))
        logger.info(f"Updated preset '{preset_id}'")
        return saved

    async def delete_custom_preset(self, preset_id: str) -> None:
        await self.store.delete(preset_id)

    async def duplicate_preset(self, preset_id: str) -> Optional[Preset]:
        """Copy any preset (built-in or custom) into a new custom preset."""
        source = await self.get_by_id(preset_id)
        if source is None:
            return None

        copy = replace(
            source,
            id=generate_id("preset"),
            name=f"{source.name} (Copy)",
            is_built_in=False,
            created_at=None,
            updated_at=None,
        )
        saved = await self.store.upsert(copy)
        logger.info(f"Duplicated preset '{preset_id}' as '{saved.id}'")
        return saved

    def render_preset(self, preset: Preset, inputs: Optional[Mapping[str, Any]] = None) -> str:
        return render(preset.system_prompt, inputs)

    def preview_preset(self, preset: Preset) -> str:
        """Render a preset with sample values, for live feedback while editing."""
        if not preset.system_prompt:
            return ""
        return render(preset.system_prompt, PREVIEW_INPUTS)
