from abc import ABC, abstractmethod
from typing import Any, List, Mapping, Optional

from core.prompts.models import Preset
from core.prompts.template import render


class LLMBackend(ABC):
    """Interface for the model provider that rewrites raw input with a preset."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the provider name recorded in history metadata"""
        pass

    @abstractmethod
    def enhance(self, prompt: str, preset: Preset, variables: Optional[Mapping[str, Any]] = None) -> str:
        """Send the rendered preset and return the complete model output"""
        pass

    @abstractmethod
    def is_available(self) -> bool:
        """Return True if the provider answers at all"""
        pass

    def list_models(self) -> List[str]:
        return []

    def format_prompt(self, prompt: str, preset: Preset, variables: Optional[Mapping[str, Any]] = None) -> str:
        """Render the preset template around the user's text."""
        inputs = dict(variables or {})
        inputs["input"] = prompt
        return render(preset.system_prompt, inputs)
