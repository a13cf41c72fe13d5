"""
Utilities for loading test fixtures for the preset, config and provider tests.
"""

import json
from pathlib import Path
from typing import Dict, Any

import yaml

# Constants for test fixtures
FIXTURES_DIR = Path(__file__).parent
INPUT_DIR = FIXTURES_DIR / "input"
RESPONSES_DIR = FIXTURES_DIR / "responses"

def load_preset_text(name: str) -> str:
    """Load a preset or bulk export document as raw JSON text."""
    file_path = INPUT_DIR / "presets" / f"{name}.json"
    with open(file_path, "r") as f:
        return f.read()

def load_preset_document(name: str) -> Dict[str, Any]:
    """Load a preset or bulk export document as parsed JSON."""
    return json.loads(load_preset_text(name))

def config_path(name: str) -> Path:
    """Path of a YAML config fixture, for code that opens the file itself."""
    return INPUT_DIR / "config" / f"{name}.yaml"

def load_config(name: str) -> Dict[str, Any]:
    """Load a test config file by name."""
    with open(config_path(name), "r") as f:
        return yaml.safe_load(f)

def load_ollama_response(name: str) -> Dict[str, Any]:
    """Load a canned Ollama API response body."""
    file_path = RESPONSES_DIR / "ollama" / f"{name}.json"
    with open(file_path, "r") as f:
        return json.load(f)
