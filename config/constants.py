APP_NAME = "Promptify"
APP_VERSION = "1.0.0"

# Version stamped into bulk preset exports
EXPORT_VERSION = "1.0.0"

# Storage keys
STORAGE_KEYS = {
    "history": "promptify.history",
    "settings": "promptify.settings",
    "custom_presets": "promptify.presets.custom",
}

# Hard limits that configuration cannot raise
MAX_HISTORY_ITEMS_LIMIT = 100
MAX_CUSTOM_PRESETS = 20

PROVIDERS = ("ollama",)
DEFAULT_PRESET_ID = "general"

ERROR_MESSAGES = {
    "clipboard_empty": "No text found in clipboard. Copy some text and try again.",
    "provider_unavailable": "AI provider is not available. Please check your settings.",
    "network_error": "Network error occurred. Please check your connection.",
    "storage_error": "Failed to save data. Please try again.",
    "ollama_not_running": "Ollama is not running. Please start Ollama with: ollama serve",
    "model_not_found": "Model not found. Please check your model name in preferences.",
}

SUCCESS_MESSAGES = {
    "copied_to_clipboard": "Copied to clipboard",
    "pasted_successfully": "Pasted successfully",
    "saved_to_history": "Saved to history",
    "deleted_from_history": "Deleted from history",
    "history_cleared": "History cleared",
    "preset_saved": "Preset saved successfully",
    "preset_deleted": "Preset deleted successfully",
}
