"""
Unit tests for the merged built-in and custom preset catalog.
"""

import pytest

from config.constants import STORAGE_KEYS
from core.errors import StorageError, ValidationError
from core.preset_store import PresetStore
from core.prompts.defaults import BUILT_IN_PRESETS
from core.prompts.registry import PresetCatalog
from core.storage import InMemoryBackend
from conftest import make_preset


async def test_built_ins_only(catalog):
    presets = await catalog.get_all()
    assert [p.id for p in presets] == list(BUILT_IN_PRESETS)
    assert all(p.is_built_in for p in presets)


async def test_custom_presets_follow_built_ins(catalog):
    await catalog.save_custom_preset(make_preset("mine", name="Mine"))
    presets = await catalog.get_all()

    assert [p.id for p in presets] == ["general", "images", "code", "mine"]


async def test_custom_preset_overrides_built_in_in_place(catalog):
    await catalog.save_custom_preset(make_preset("general", name="My General"))
    presets = await catalog.get_all()

    assert [p.id for p in presets] == ["general", "images", "code"]
    assert presets[0].name == "My General"
    assert presets[0].is_built_in is False


async def test_get_by_id_prefers_custom(catalog):
    assert (await catalog.get_by_id("code")).is_built_in

    await catalog.save_custom_preset(make_preset("code", name="My Code"))
    assert (await catalog.get_by_id("code")).name == "My Code"


async def test_get_by_id_unknown(catalog):
    assert await catalog.get_by_id("does-not-exist") is None


async def test_built_ins_are_never_persisted(backend, catalog):
    await catalog.get_all()
    assert await catalog.store.list() == []


def test_is_built_in_id(catalog):
    assert catalog.is_built_in_id("images")
    assert not catalog.is_built_in_id("mine")


def test_built_in_presets_are_read_only():
    with pytest.raises(TypeError):
        BUILT_IN_PRESETS["general"] = make_preset("general")


async def test_save_custom_preset_assigns_id(catalog):
    saved = await catalog.save_custom_preset(make_preset(""))
    assert saved.id.startswith("preset_")
    assert await catalog.get_by_id(saved.id) == saved


async def test_delete_custom_preset_restores_built_in(catalog):
    await catalog.save_custom_preset(make_preset("general", name="Override"))
    await catalog.delete_custom_preset("general")

    assert (await catalog.get_by_id("general")).name == "General Enhancement"


async def test_duplicate_built_in(catalog):
    copy = await catalog.duplicate_preset("images")

    assert copy.id != "images"
    assert copy.name == "Image Generation (Copy)"
    assert copy.is_built_in is False
    assert copy.system_prompt == BUILT_IN_PRESETS["images"].system_prompt
    assert await catalog.store.get(copy.id) == copy


async def test_duplicate_unknown(catalog):
    assert await catalog.duplicate_preset("nope") is None


async def test_find_by_name_is_case_insensitive(catalog):
    await catalog.save_custom_preset(make_preset("mine", name="Email Polisher"))
    assert (await catalog.find_by_name("email polisher")).id == "mine"
    assert (await catalog.find_by_name("  code & technical ")).id == "code"
    assert await catalog.find_by_name("Unknown") is None


def test_render_preset(catalog):
    preset = make_preset("p", system_prompt="Tone {{style|plain}}: {{input}}")
    assert catalog.render_preset(preset, {"input": "hi"}) == "Tone plain: hi"


def test_preview_preset_uses_sample_values(catalog):
    preview = catalog.preview_preset(BUILT_IN_PRESETS["general"])
    assert "Sample input text" in preview
    assert "{{" not in preview


async def test_update_preset_keeps_created_at(catalog):
    saved = await catalog.save_custom_preset(make_preset("mine", name="Mine", tags=("a",)))
    updated = await catalog.update_preset("mine", name="Renamed", tags=("b", "c"))

    assert updated.created_at == saved.created_at
    assert updated.updated_at > saved.updated_at
    assert updated.system_prompt == saved.system_prompt
    assert [(p.id, p.name, p.tags) for p in await catalog.store.list()] == [("mine", "Renamed", ("b", "c"))]


async def test_update_built_in_stores_override(catalog):
    updated = await catalog.update_preset("images", description="Mine now")

    assert updated.is_built_in is False
    assert updated.name == BUILT_IN_PRESETS["images"].name
    assert (await catalog.get_by_id("images")).description == "Mine now"
    assert BUILT_IN_PRESETS["images"].description != "Mine now"


async def test_update_unknown_preset(catalog):
    assert await catalog.update_preset("missing", name="X") is None
    assert await catalog.store.list() == []


async def test_update_rejects_invalid_changes(catalog):
    await catalog.save_custom_preset(make_preset("mine"))

    with pytest.raises(ValidationError):
        await catalog.update_preset("mine", system_prompt="no placeholder")
    assert (await catalog.get_by_id("mine")).system_prompt == "Improve this:\n\n{{input}}"


async def test_store_failures_propagate_unchanged():
    corrupt = PresetCatalog(PresetStore(InMemoryBackend({STORAGE_KEYS["custom_presets"]: "{not json"})))

    with pytest.raises(StorageError) as exc_info:
        await corrupt.get_all()
    assert exc_info.value.message.startswith("Failed to load custom presets")

    with pytest.raises(StorageError):
        await corrupt.get_by_id("general")
