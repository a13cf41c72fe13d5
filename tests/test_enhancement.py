"""
Tests for the clipboard-to-clipboard enhancement flow.
"""

import pytest

from config.settings import AppConfig
from core.errors import ClipboardError, NetworkError, ValidationError
from pipelines.enhancement import EnhancementPipeline
from conftest import FakeClipboard, FakeLLMBackend, make_preset


@pytest.fixture
def app_config():
    app_config = AppConfig()
    app_config.ui.auto_paste = False
    app_config.ui.save_to_history = True
    app_config.ollama.model = "llama3.2:3b"
    return app_config


def make_pipeline(catalog, history, settings, app_config, clipboard=None, backend=None):
    return EnhancementPipeline(
        catalog,
        backend or FakeLLMBackend(),
        clipboard=clipboard or FakeClipboard("  Write about dogs  "),
        history=history,
        settings=settings,
        app_config=app_config,
    )


async def test_enhance_from_clipboard(catalog, history, settings, app_config):
    clipboard = FakeClipboard("  Write about dogs  ")
    backend = FakeLLMBackend(reply="# Objective\nDogs")
    pipeline = make_pipeline(catalog, history, settings, app_config, clipboard, backend)

    result = await pipeline.enhance()

    assert result.input == "Write about dogs"
    assert result.output == "# Objective\nDogs"
    assert result.preset.id == "general"
    assert result.metadata["provider"] == "Fake"
    assert result.metadata["model"] == "llama3.2:3b"
    assert backend.prompts[0].endswith("Write about dogs")
    assert clipboard.text == "# Objective\nDogs"
    assert clipboard.pasted == []


async def test_input_is_normalised_before_sending(catalog, history, settings, app_config):
    clipboard = FakeClipboard("\r\nFirst line\r\n\r\n\r\n\r\nSecond line  ")
    backend = FakeLLMBackend()
    pipeline = make_pipeline(catalog, history, settings, app_config, clipboard, backend)

    result = await pipeline.enhance()

    assert result.input == "First line\n\nSecond line"
    assert backend.prompts[0].endswith("First line\n\nSecond line")
    assert (await history.list())[0].input == "First line\n\nSecond line"


async def test_enhance_records_history_and_last_preset(catalog, history, settings, app_config):
    pipeline = make_pipeline(catalog, history, settings, app_config)
    result = await pipeline.enhance(preset_id="code")

    items = await history.list()
    assert len(items) == 1
    assert items[0].id == result.history_id
    assert items[0].preset_id == "code"
    assert items[0].input == "Write about dogs"
    assert set(items[0].metadata) == {"provider", "model", "processingTime"}
    assert await settings.get_last_selected_preset_id() == "code"


async def test_history_disabled(catalog, history, settings, app_config):
    app_config.ui.save_to_history = False
    result = await make_pipeline(catalog, history, settings, app_config).enhance()

    assert result.history_id is None
    assert await history.list() == []


async def test_last_selected_preset_is_reused(catalog, history, settings, app_config):
    await settings.set_last_selected_preset_id("images")
    result = await make_pipeline(catalog, history, settings, app_config).enhance()
    assert result.preset.id == "images"


async def test_stale_last_selected_preset_falls_back(catalog, history, settings, app_config):
    await settings.set_last_selected_preset_id("deleted-preset")
    result = await make_pipeline(catalog, history, settings, app_config).enhance()
    assert result.preset.id == "general"


async def test_unknown_explicit_preset(catalog, history, settings, app_config):
    with pytest.raises(ValidationError):
        await make_pipeline(catalog, history, settings, app_config).enhance(preset_id="nope")


async def test_custom_preset_and_variables(catalog, history, settings, app_config):
    await catalog.save_custom_preset(make_preset("tone", system_prompt="Tone {{tone|calm}}: {{input}}"))
    backend = FakeLLMBackend()
    pipeline = make_pipeline(catalog, history, settings, app_config, backend=backend)

    await pipeline.enhance(text="hello there", preset_id="tone", variables={"tone": "urgent"})
    assert backend.prompts == ["Tone urgent: hello there"]


async def test_paste(catalog, history, settings, app_config):
    clipboard = FakeClipboard("Write about dogs")
    pipeline = make_pipeline(catalog, history, settings, app_config, clipboard)

    await pipeline.enhance(paste=True)
    assert clipboard.pasted == ["Enhanced prompt"]


async def test_auto_paste_setting(catalog, history, settings, app_config):
    app_config.ui.auto_paste = True
    clipboard = FakeClipboard("Write about dogs")

    await make_pipeline(catalog, history, settings, app_config, clipboard).enhance()
    assert clipboard.pasted == ["Enhanced prompt"]


async def test_empty_clipboard(catalog, history, settings, app_config):
    pipeline = make_pipeline(catalog, history, settings, app_config, FakeClipboard("   "))
    with pytest.raises(ClipboardError):
        await pipeline.enhance()


async def test_too_short_text(catalog, history, settings, app_config):
    backend = FakeLLMBackend()
    pipeline = make_pipeline(catalog, history, settings, app_config, backend=backend)

    with pytest.raises(ValidationError) as exc_info:
        await pipeline.enhance(text="hi")
    assert exc_info.value.message == "Prompt must be at least 3 characters long."
    assert backend.prompts == []


async def test_provider_failure_leaves_state_untouched(catalog, history, settings, app_config):
    clipboard = FakeClipboard("Write about dogs")
    backend = FakeLLMBackend(error=NetworkError("Cannot connect to Ollama. Make sure Ollama is running."))
    pipeline = make_pipeline(catalog, history, settings, app_config, clipboard, backend)

    with pytest.raises(NetworkError):
        await pipeline.enhance(preset_id="code")

    assert len(backend.prompts) == 1
    assert await history.list() == []
    assert await settings.get_last_selected_preset_id() is None
    assert clipboard.text == "Write about dogs"
