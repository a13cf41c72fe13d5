from .settings import (
    config,
    load_config,
    validate_config,
    AppConfig,
    OllamaConfig,
    UIConfig,
    ValidationLimits,
    StorageConfig,
)
from .constants import APP_NAME, APP_VERSION, STORAGE_KEYS, ERROR_MESSAGES, SUCCESS_MESSAGES

__all__ = [
    'config',
    'load_config',
    'validate_config',
    'AppConfig',
    'OllamaConfig',
    'UIConfig',
    'ValidationLimits',
    'StorageConfig',
    'APP_NAME',
    'APP_VERSION',
    'STORAGE_KEYS',
    'ERROR_MESSAGES',
    'SUCCESS_MESSAGES',
]
