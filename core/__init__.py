from .errors import (
    PromptifyError,
    ClipboardError,
    ProviderError,
    NetworkError,
    ValidationError,
    StorageError,
    get_error_message,
    format_user_message,
)
from .prompts import Preset, PresetCatalog, BUILT_IN_PRESETS, render, validate_preset
from .preset_store import PresetStore, ImportResult
from .storage import KeyValueBackend, InMemoryBackend, JsonFileBackend
from .history import HistoryStore, HistoryItem
from .settings_store import SettingsStore

__all__ = [
    'PromptifyError',
    'ClipboardError',
    'ProviderError',
    'NetworkError',
    'ValidationError',
    'StorageError',
    'get_error_message',
    'format_user_message',
    'Preset',
    'PresetCatalog',
    'BUILT_IN_PRESETS',
    'render',
    'validate_preset',
    'PresetStore',
    'ImportResult',
    'KeyValueBackend',
    'InMemoryBackend',
    'JsonFileBackend',
    'HistoryStore',
    'HistoryItem',
    'SettingsStore',
]
