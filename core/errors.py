"""
Error taxonomy for Promptify.

Validation and rendering never raise; they return structured results. The
stores wrap any underlying failure into a StorageError, the model backend
raises ProviderError or NetworkError, and the clipboard raises
ClipboardError. Every error carries a single human-readable message.
"""
from typing import List, Optional


class PromptifyError(Exception):
    """Base class for all application errors."""

    code = "APP_ERROR"

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code


class ClipboardError(PromptifyError):
    """Clipboard is empty or could not be read/written."""

    code = "CLIPBOARD_ERROR"


class ProviderError(PromptifyError):
    """Model backend is unreachable or returned a malformed response."""

    code = "PROVIDER_ERROR"

    def __init__(self, message: str, provider: Optional[str] = None):
        super().__init__(message)
        self.provider = provider


class NetworkError(PromptifyError):
    """Transport-level failure talking to the model backend."""

    code = "NETWORK_ERROR"

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class ValidationError(PromptifyError, ValueError):
    """A preset or prompt failed structural checks."""

    code = "VALIDATION_ERROR"

    def __init__(self, message: str, field: Optional[str] = None, errors: Optional[List[str]] = None):
        super().__init__(message)
        self.field = field
        self.errors = list(errors) if errors else [message]


class StorageError(PromptifyError):
    """Backend read/write/parse failure."""

    code = "STORAGE_ERROR"


def get_error_message(error: BaseException) -> str:
    if isinstance(error, PromptifyError):
        return error.message
    return str(error) or error.__class__.__name__


def format_user_message(error: BaseException) -> str:
    """Turn any failure into the one message shown to the user, with hints where useful."""
    message = get_error_message(error)

    if isinstance(error, ProviderError):
        return (
            f"{message}\n\nTips:\n"
            "- Make sure Ollama is running: `ollama serve`\n"
            "- Check your model is available: `ollama list`"
        )
    if isinstance(error, NetworkError):
        return f"{message}\n\nPlease check your network connection and Ollama configuration."

    return message
