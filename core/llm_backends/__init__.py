import logging
from typing import Optional

from config.settings import AppConfig, config as default_config
from core.llm_backends.base import LLMBackend
from core.llm_backends.ollama_backend import OllamaBackend

logger = logging.getLogger(__name__)


def create_llm_backend(app_config: Optional[AppConfig] = None, **kwargs) -> LLMBackend:
    """
    Factory function to create the LLM backend selected in configuration.

    Args:
        app_config: Application config (module default if omitted)
        **kwargs: Additional arguments to pass to the backend constructor

    Returns:
        An instance of the requested backend

    Raises:
        ValueError: If the configured provider is not supported
    """
    app_config = app_config or default_config

    if app_config.provider == "ollama":
        logger.debug(f"Using Ollama backend at {app_config.ollama.url}")
        return OllamaBackend(app_config.ollama, **kwargs)

    raise ValueError(f"Unsupported LLM backend type: {app_config.provider}")


__all__ = ["LLMBackend", "OllamaBackend", "create_llm_backend"]
