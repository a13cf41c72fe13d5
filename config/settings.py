from dataclasses import dataclass, field, fields, is_dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import urlparse
import os
import re

import yaml
from dotenv import load_dotenv

from config.constants import PROVIDERS, MAX_CUSTOM_PRESETS

# Load environment variables at module import
load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class OllamaConfig:
    url: str = "http://localhost:11434"
    model: str = "llama3.2:3b"
    timeout: float = 30.0  # seconds


@dataclass
class UIConfig:
    auto_paste: bool = False
    save_to_history: bool = True
    max_history_items: int = 50


@dataclass
class ValidationLimits:
    min_prompt_length: int = 3
    max_prompt_length: int = 10000
    max_name_length: int = 100
    max_description_length: int = 500
    max_tags: int = 10
    max_tag_length: int = 30


@dataclass
class StorageConfig:
    data_dir: str = str(Path.home() / ".promptify")
    file_name: str = "storage.json"
    max_custom_presets: int = MAX_CUSTOM_PRESETS

    @property
    def data_file(self) -> Path:
        return Path(self.data_dir).expanduser() / self.file_name


@dataclass
class AppConfig:
    provider: str = "ollama"
    ollama: OllamaConfig = field(default_factory=OllamaConfig)
    ui: UIConfig = field(default_factory=UIConfig)
    validation: ValidationLimits = field(default_factory=ValidationLimits)
    storage: StorageConfig = field(default_factory=StorageConfig)

    def __post_init__(self):
        self._load_env_vars()

    def _load_env_vars(self):
        self.provider = os.getenv("PROMPTIFY_PROVIDER", self.provider)
        self.ollama.url = os.getenv("OLLAMA_URL", self.ollama.url)
        self.ollama.model = os.getenv("OLLAMA_MODEL", self.ollama.model)
        self.ollama.timeout = float(os.getenv("OLLAMA_TIMEOUT", self.ollama.timeout))
        self.ui.auto_paste = _env_bool("PROMPTIFY_AUTO_PASTE", self.ui.auto_paste)
        self.ui.save_to_history = _env_bool("PROMPTIFY_SAVE_TO_HISTORY", self.ui.save_to_history)
        self.ui.max_history_items = int(os.getenv("PROMPTIFY_MAX_HISTORY_ITEMS", self.ui.max_history_items))
        self.storage.data_dir = os.getenv("PROMPTIFY_DATA_DIR", self.storage.data_dir)

    @classmethod
    def from_yaml(cls, yaml_path: str) -> "AppConfig":
        """
        Build a config from a YAML file layered over the defaults.

        Sections mirror the dataclass fields, e.g.::

            provider: ollama
            ollama:
              model: mistral
            ui:
              auto_paste: true

        Environment variables still win over values from the file.
        """
        with open(yaml_path, "r") as f:
            data = yaml.safe_load(f) or {}

        config = cls()
        _apply_overrides(config, data)
        config._load_env_vars()
        return config


def _apply_overrides(target: Any, data: Dict[str, Any]) -> None:
    known = {f.name for f in fields(target)}
    for key, value in data.items():
        if key not in known:
            raise ValueError(f"Unknown configuration key: {key}")
        current = getattr(target, key)
        if is_dataclass(current):
            if not isinstance(value, dict):
                raise ValueError(f"Configuration section '{key}' must be a mapping")
            _apply_overrides(current, value)
        else:
            setattr(target, key, value)


MODEL_NAME_RE = re.compile(r"^[a-zA-Z0-9.:\-_/]+$")


def validate_url(url: Optional[str], label: str = "URL") -> Optional[str]:
    """Return an error message for a missing or non-HTTP(S) URL, else None."""
    if not url or not url.strip():
        return f"{label} is required"
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        return f"Invalid {label} format"
    return None


def validate_model_name(model_name: Optional[str], label: str = "Model name") -> Optional[str]:
    if not model_name or not model_name.strip():
        return f"{label} is required"
    if not MODEL_NAME_RE.match(model_name):
        return f"Invalid {label} format"
    return None


def validate_config(config: AppConfig) -> Tuple[bool, List[str]]:
    errors: List[str] = []

    if not config.provider or config.provider not in PROVIDERS:
        errors.append("Invalid provider selected")

    if config.provider == "ollama":
        for error in (
            validate_url(config.ollama.url, "Ollama URL"),
            validate_model_name(config.ollama.model, "Ollama model"),
        ):
            if error:
                errors.append(error)

    if config.ollama.timeout <= 0:
        errors.append("Ollama timeout must be positive")

    return len(errors) == 0, errors


def load_config(config_path: Optional[str] = None) -> AppConfig:
    """Load the app config, honouring PROMPTIFY_CONFIG when no path is given."""
    config_path = config_path or os.getenv("PROMPTIFY_CONFIG")
    if config_path:
        return AppConfig.from_yaml(config_path)
    return AppConfig()


config = load_config()
