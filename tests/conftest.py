import os
from typing import Any, List, Mapping, Optional

import pytest

# Keep test runs from writing log files into the working tree
os.environ.setdefault("PROMPTIFY_LOG_DIR", os.path.join(os.path.dirname(__file__), ".logs"))

from core.history import HistoryStore
from core.llm_backends.base import LLMBackend
from core.preset_store import PresetStore
from core.prompts.models import Preset
from core.prompts.registry import PresetCatalog
from core.settings_store import SettingsStore
from core.storage import InMemoryBackend


class StepClock:
    """Deterministic epoch-ms clock advancing by a fixed step on each call."""

    def __init__(self, start: int = 1_000, step: int = 1_000):
        self.now = start - step
        self.step = step

    def __call__(self) -> int:
        self.now += self.step
        return self.now


class FakeClipboard:
    """In-memory stand-in for ClipboardService."""

    def __init__(self, text: str = ""):
        self.text = text
        self.pasted: List[str] = []

    def read_text(self) -> str:
        return self.text

    def read_prompt(self) -> str:
        from config.constants import ERROR_MESSAGES
        from core.errors import ClipboardError

        if not self.text.strip():
            raise ClipboardError(ERROR_MESSAGES["clipboard_empty"])
        return self.text.strip()

    def copy(self, text: str) -> None:
        self.text = text

    def paste(self, text: str) -> None:
        self.copy(text)
        self.pasted.append(text)


class FakeLLMBackend(LLMBackend):
    """Records rendered prompts and answers with a fixed reply."""

    def __init__(self, reply: str = "Enhanced prompt", error: Optional[Exception] = None):
        self.reply = reply
        self.error = error
        self.prompts: List[str] = []

    @property
    def name(self) -> str:
        return "Fake"

    def enhance(self, prompt: str, preset: Preset, variables: Optional[Mapping[str, Any]] = None) -> str:
        self.prompts.append(self.format_prompt(prompt, preset, variables))
        if self.error is not None:
            raise self.error
        return self.reply

    def is_available(self) -> bool:
        return True


def make_preset(preset_id: str = "custom-1", name: str = "Custom", **kwargs) -> Preset:
    kwargs.setdefault("system_prompt", "Improve this:\n\n{{input}}")
    return Preset(id=preset_id, name=name, **kwargs)


@pytest.fixture
def backend():
    return InMemoryBackend()


@pytest.fixture
def clock():
    return StepClock()


@pytest.fixture
def store(backend, clock):
    return PresetStore(backend, clock=clock)


@pytest.fixture
def catalog(store):
    return PresetCatalog(store)


@pytest.fixture
def history(backend, clock):
    return HistoryStore(backend, clock=clock)


@pytest.fixture
def settings(backend):
    return SettingsStore(backend)
