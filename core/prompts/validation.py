"""
Structural checks for presets and user prompts.

None of these functions raise: they return a ValidationResult (every
violated rule, in a fixed order) or a PromptCheck (first failure only).
"""
from typing import Any, List, Mapping, Optional, Union
import re

from config.settings import ValidationLimits
from config.constants import ERROR_MESSAGES
from core.prompts.models import Preset, PromptCheck, ValidationResult
from core.prompts.template import INPUT_PLACEHOLDER

DEFAULT_LIMITS = ValidationLimits()


def _field(candidate: Union[Preset, Mapping[str, Any]], name: str, wire_name: str) -> Any:
    if isinstance(candidate, Preset):
        return getattr(candidate, name)
    return candidate.get(wire_name)


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def validate_preset(
    candidate: Union[Preset, Mapping[str, Any], None],
    limits: Optional[ValidationLimits] = None
) -> ValidationResult:
    """
    Validate a candidate preset, accumulating every violation.

    Args:
        candidate: A Preset, a loosely-typed wire document, or None
        limits: Length and count ceilings (defaults apply when omitted)

    Returns:
        ValidationResult whose ``valid`` is True iff ``errors`` is empty
    """
    limits = limits or DEFAULT_LIMITS

    if candidate is None:
        return ValidationResult(valid=False, errors=["preset is required"])
    if not isinstance(candidate, (Preset, Mapping)):
        return ValidationResult(valid=False, errors=["preset must be a JSON object"])

    errors: List[str] = []

    name = _text(_field(candidate, "name", "name"))
    if isinstance(candidate, Preset):
        template = candidate.system_prompt
    else:
        raw_template = candidate.get("systemPrompt")
        template = _text(raw_template if raw_template is not None else candidate.get("template"))
    description = _text(_field(candidate, "description", "description"))
    tags = _field(candidate, "tags", "tags")

    if not name.strip():
        errors.append("name is required")
    if not template.strip():
        errors.append("systemPrompt is required")

    # The bare token is mandatory; a {{input|default}} form does not count
    if template.strip() and INPUT_PLACEHOLDER not in template:
        errors.append(f"systemPrompt must contain {INPUT_PLACEHOLDER} placeholder to receive user input")

    if len(name.strip()) > limits.max_name_length:
        errors.append(f"name must be {limits.max_name_length} characters or less")
    if len(template.strip()) > limits.max_prompt_length:
        errors.append(f"systemPrompt must be {limits.max_prompt_length} characters or less")
    if len(description) > limits.max_description_length:
        errors.append(f"description must be {limits.max_description_length} characters or less")

    if tags is not None:
        if isinstance(tags, str) or not isinstance(tags, (list, tuple, set, frozenset)):
            errors.append("tags must be a list of strings")
        else:
            if len(tags) > limits.max_tags:
                errors.append(f"a maximum of {limits.max_tags} tags is allowed")
            for tag in tags:
                if len(_text(tag)) > limits.max_tag_length:
                    errors.append(f'tag "{tag}" is too long (max {limits.max_tag_length} characters)')

    return ValidationResult(valid=len(errors) == 0, errors=errors)


def validate_prompt(prompt: Optional[str], limits: Optional[ValidationLimits] = None) -> PromptCheck:
    """Check the raw user text before it is sent for enhancement."""
    limits = limits or DEFAULT_LIMITS

    if not prompt or not prompt.strip():
        return PromptCheck(is_valid=False, error=ERROR_MESSAGES["clipboard_empty"])

    trimmed = prompt.strip()
    if len(trimmed) < limits.min_prompt_length:
        return PromptCheck(
            is_valid=False,
            error=f"Prompt must be at least {limits.min_prompt_length} characters long."
        )
    if len(trimmed) > limits.max_prompt_length:
        return PromptCheck(
            is_valid=False,
            error=f"Prompt cannot exceed {limits.max_prompt_length} characters."
        )

    return PromptCheck(is_valid=True)


def sanitize_input(text: str) -> str:
    """Trim, normalise line endings and cap blank-line runs at one."""
    text = text.strip().replace("\r\n", "\n").replace("\r", "\n")
    return re.sub(r"\n{3,}", "\n\n", text)
