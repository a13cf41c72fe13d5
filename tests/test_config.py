"""
Tests for configuration loading and validation.
"""

import pytest

from config.settings import AppConfig, load_config, validate_config
from tests.fixtures.fixtures import config_path, load_config as load_config_fixture


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "PROMPTIFY_PROVIDER", "OLLAMA_URL", "OLLAMA_MODEL", "OLLAMA_TIMEOUT",
        "PROMPTIFY_AUTO_PASTE", "PROMPTIFY_SAVE_TO_HISTORY", "PROMPTIFY_MAX_HISTORY_ITEMS",
        "PROMPTIFY_DATA_DIR", "PROMPTIFY_CONFIG",
    ):
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    config = AppConfig()

    assert config.provider == "ollama"
    assert config.ollama.url == "http://localhost:11434"
    assert config.ollama.model == "llama3.2:3b"
    assert config.ollama.timeout == 30.0
    assert config.ui.auto_paste is False
    assert config.ui.save_to_history is True
    assert config.ui.max_history_items == 50
    assert config.storage.max_custom_presets == 20
    assert validate_config(config) == (True, [])


def test_environment_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("OLLAMA_MODEL", "qwen2.5:7b")
    monkeypatch.setenv("OLLAMA_TIMEOUT", "5")
    monkeypatch.setenv("PROMPTIFY_AUTO_PASTE", "yes")
    monkeypatch.setenv("PROMPTIFY_DATA_DIR", str(tmp_path))

    config = AppConfig()
    assert config.ollama.model == "qwen2.5:7b"
    assert config.ollama.timeout == 5.0
    assert config.ui.auto_paste is True
    assert config.storage.data_file == tmp_path / "storage.json"


def test_yaml_overlay():
    raw = load_config_fixture("override")
    config = AppConfig.from_yaml(str(config_path("override")))

    assert config.ollama.url == raw["ollama"]["url"]
    assert config.ollama.model == "mistral:7b"
    assert config.ollama.timeout == 60
    assert config.ui.auto_paste is True
    assert config.ui.max_history_items == 25
    # untouched sections keep their defaults
    assert config.ui.save_to_history is True
    assert config.validation.max_tags == 10


def test_environment_wins_over_yaml(monkeypatch):
    monkeypatch.setenv("OLLAMA_MODEL", "from-env")
    config = AppConfig.from_yaml(str(config_path("override")))
    assert config.ollama.model == "from-env"


def test_unknown_yaml_key_is_rejected():
    with pytest.raises(ValueError) as exc_info:
        AppConfig.from_yaml(str(config_path("unknown_key")))
    assert "temperature" in str(exc_info.value)


def test_load_config_honours_env_path(monkeypatch):
    monkeypatch.setenv("PROMPTIFY_CONFIG", str(config_path("override")))
    assert load_config().ollama.model == "mistral:7b"


def test_validate_config_errors():
    config = AppConfig()
    config.provider = "openai"
    assert validate_config(config) == (False, ["Invalid provider selected"])

    config = AppConfig()
    config.ollama.url = "localhost"
    config.ollama.model = ""
    config.ollama.timeout = 0
    is_valid, errors = validate_config(config)

    assert not is_valid
    assert errors == [
        "Invalid Ollama URL format",
        "Ollama model is required",
        "Ollama timeout must be positive",
    ]


@pytest.mark.parametrize("url, model, expected", [
    ("http://localhost:11434", "library/mistral:7b-instruct", []),
    ("https://ollama.example.com", "llama3.2:3b", []),
    ("", "llama3.2:3b", ["Ollama URL is required"]),
    ("ftp://localhost:11434", "llama3.2:3b", ["Invalid Ollama URL format"]),
    ("http://localhost:11434", "bad model", ["Invalid Ollama model format"]),
])
def test_validate_config_checks_url_and_model(url: str, model: str, expected):
    config = AppConfig()
    config.ollama.url = url
    config.ollama.model = model

    assert validate_config(config) == (not expected, expected)
