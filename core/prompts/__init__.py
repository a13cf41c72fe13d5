"""
Preset template system for Promptify.

This package holds everything that defines what a preset is and how it turns
raw input into a prompt.

The main components are:
- Preset: Immutable preset value with its JSON wire format
- render / extract_placeholder_names: The placeholder substitution language
- validate_preset: Structural checks run before anything is persisted
- BUILT_IN_PRESETS: The fixed presets shipped with the application
- PresetCatalog: Merged view of built-in and custom presets

Example usage:
    from core.prompts import render, BUILT_IN_PRESETS

    # Render a template with inputs
    prompt = render("Hello {{name|World}}", {})

    # Render a built-in preset around user input
    prompt = render(BUILT_IN_PRESETS["code"].template, {"input": "Help me with React"})
"""

from core.prompts.models import Preset, PresetExample, ValidationResult, PromptCheck
from core.prompts.template import render, extract_placeholder_names, has_input_placeholder
from core.prompts.validation import validate_preset, validate_prompt, sanitize_input
from core.prompts.defaults import BUILT_IN_PRESETS
from core.prompts.registry import PresetCatalog

__all__ = [
    'Preset',
    'PresetExample',
    'ValidationResult',
    'PromptCheck',
    'render',
    'extract_placeholder_names',
    'has_input_placeholder',
    'validate_preset',
    'validate_prompt',
    'sanitize_input',
    'BUILT_IN_PRESETS',
    'PresetCatalog',
]
