import sys

import pyperclip

from config.constants import ERROR_MESSAGES
from core.errors import ClipboardError
from utils.logging import get_logger

logger = get_logger(__name__)

PASTE_CHORD = "command+v" if sys.platform == "darwin" else "ctrl+v"


class ClipboardService:
    """System clipboard access through pyperclip."""

    def read_text(self) -> str:
        try:
            return pyperclip.paste() or ""
        except pyperclip.PyperclipException as e:
            raise ClipboardError(f"Failed to read clipboard: {e}") from e

    def read_prompt(self) -> str:
        """Return the trimmed clipboard text, refusing an empty clipboard."""
        text = self.read_text().strip()
        if not text:
            raise ClipboardError(ERROR_MESSAGES["clipboard_empty"])
        return text

    def copy(self, text: str) -> None:
        try:
            pyperclip.copy(text)
        except pyperclip.PyperclipException as e:
            raise ClipboardError(f"Failed to write clipboard: {e}") from e

    def paste(self, text: str) -> None:
        """Copy text and send the paste shortcut to the focused application."""
        self.copy(text)

        try:
            import keyboard
            keyboard.send(PASTE_CHORD)
        except Exception as e:
            raise ClipboardError(f"Copied to clipboard but could not paste: {e}") from e

        logger.debug("Sent paste shortcut to active application")
