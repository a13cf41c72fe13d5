"""
Placeholder rendering for preset templates.

Templates use ``{{ key }}`` and ``{{ key | default }}`` tokens. Whitespace
around the key and default is insignificant; anything that does not match the
grammar is left as literal text. Rendering never raises.
"""
from typing import Any, List, Mapping, Optional
import re

INPUT_KEY = "input"
INPUT_PLACEHOLDER = "{{input}}"
FALLBACK_SEPARATOR = "\n\nUser input: "

# Key: any run of characters other than "}" and "|"; default: anything but "}"
PLACEHOLDER_PATTERN = re.compile(r"\{\{([^}|]*)(?:\|([^}]*))?\}\}")


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def extract_placeholder_names(template: Optional[str]) -> List[str]:
    """
    Return the distinct placeholder keys in order of first appearance.

    Uses the same grammar as ``render`` so editors can show live feedback.
    """
    names: List[str] = []
    for match in PLACEHOLDER_PATTERN.finditer(template or ""):
        key = match.group(1).strip()
        if key and key not in names:
            names.append(key)
    return names


def has_input_placeholder(template: Optional[str]) -> bool:
    """True if any token in the template resolves the ``input`` key."""
    return INPUT_KEY in extract_placeholder_names(template)


def render(template: Optional[str], inputs: Optional[Mapping[str, Any]] = None) -> str:
    """
    Substitute placeholders in a template.

    Args:
        template: Template text; ``None`` renders as an empty string
        inputs: Values keyed by placeholder name (str, int, float or bool)

    Returns:
        The rendered text. If ``inputs["input"]`` is non-empty and the template
        has no ``input`` token, the raw input is appended after a
        ``User input:`` marker so it is never silently dropped.
    """
    template = template or ""
    inputs = inputs or {}

    def _substitute(match: "re.Match[str]") -> str:
        key = match.group(1).strip()
        if not key:
            return match.group(0)

        value = inputs.get(key)
        if value is not None:
            return _stringify(value)
        if match.group(2) is not None:
            # Defaults are inserted verbatim, never expanded again
            return match.group(2).strip()
        return ""

    rendered = PLACEHOLDER_PATTERN.sub(_substitute, template)

    raw_input = inputs.get(INPUT_KEY)
    if raw_input is not None and _stringify(raw_input) and not has_input_placeholder(template):
        return rendered + FALLBACK_SEPARATOR + _stringify(raw_input)

    return rendered
