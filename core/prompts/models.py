"""
Preset data model and its JSON wire format.

Presets are immutable values; the stores derive updated copies with
``dataclasses.replace`` instead of mutating entries in place.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple


@dataclass(frozen=True)
class PresetExample:
    """An input/output pair documenting what a preset produces. Never executed."""

    input: str
    expected_output: str
    description: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "input": self.input,
            "expectedOutput": self.expected_output,
            "description": self.description,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'PresetExample':
        return cls(
            input=str(data.get("input", "")),
            expected_output=str(data.get("expectedOutput", "")),
            description=str(data.get("description", "")),
        )


@dataclass(frozen=True)
class Preset:
    """
    A named template plus metadata controlling how raw input becomes a prompt.

    Attributes:
        id: Unique identifier within the merged catalog
        name: Display name
        system_prompt: Template string; must contain the ``{{input}}`` placeholder
        description: Human-readable purpose
        tags: Categorisation tags (order irrelevant)
        is_built_in: True only for the fixed presets shipped with the app
        examples: Documentation-only input/output pairs
        created_at: Epoch milliseconds when first stored
        updated_at: Epoch milliseconds of the last write
    """

    id: str
    name: str
    system_prompt: str
    description: str = ""
    tags: Tuple[str, ...] = ()
    is_built_in: bool = False
    examples: Tuple[PresetExample, ...] = ()
    created_at: Optional[int] = None
    updated_at: Optional[int] = None

    @property
    def template(self) -> str:
        return self.system_prompt

    def to_dict(self) -> Dict[str, Any]:
        """Convert the preset to its JSON wire form."""
        data: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "systemPrompt": self.system_prompt,
            "tags": list(self.tags),
            "isBuiltIn": self.is_built_in,
            "examples": [example.to_dict() for example in self.examples],
        }
        if self.created_at is not None:
            data["createdAt"] = self.created_at
        if self.updated_at is not None:
            data["updatedAt"] = self.updated_at
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'Preset':
        """
        Create a preset from a wire/stored document.

        Callers importing untrusted input must run the document through
        ``validate_preset`` first; this only converts shapes.

        Raises:
            KeyError: If ``id``, ``name`` or the template is missing
        """
        template = data["systemPrompt"] if "systemPrompt" in data else data["template"]
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            system_prompt=str(template),
            description=str(data.get("description") or ""),
            tags=tuple(str(tag) for tag in (data.get("tags") or [])),
            is_built_in=bool(data.get("isBuiltIn", False)),
            examples=tuple(PresetExample.from_dict(e) for e in (data.get("examples") or [])),
            created_at=parse_timestamp(data.get("createdAt")),
            updated_at=parse_timestamp(data.get("updatedAt")),
        )

    def __str__(self) -> str:
        return f"Preset({self.id}, name={self.name!r})"


def parse_timestamp(value: Any) -> Optional[int]:
    """Epoch-millisecond timestamp from a wire value; empty values become None."""
    if value is None or value == "":
        return None
    return int(value)


@dataclass
class ValidationResult:
    """Outcome of a preset validation: every violated rule, in check order."""

    valid: bool
    errors: List[str] = field(default_factory=list)


@dataclass
class PromptCheck:
    """Outcome of a single-value check such as the user prompt or a URL."""

    is_valid: bool
    error: Optional[str] = None
