from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional
import asyncio
import time

from config import config as default_config, AppConfig
from config.constants import DEFAULT_PRESET_ID
from core.clipboard import ClipboardService
from core.errors import ValidationError
from core.history import HistoryStore
from core.llm_backends import LLMBackend
from core.prompts.models import Preset
from core.prompts.registry import PresetCatalog
from core.prompts.validation import sanitize_input, validate_prompt
from core.settings_store import SettingsStore
from utils import get_logger
from utils.timestamps import now_ms


@dataclass
class EnhancementResult:
    input: str
    output: str
    preset: Preset
    metadata: Dict[str, Any] = field(default_factory=dict)
    history_id: Optional[str] = None


class EnhancementPipeline:
    """Clipboard text in, enhanced prompt out, recorded in history."""

    def __init__(
        self,
        catalog: PresetCatalog,
        backend: LLMBackend,
        clipboard: Optional[ClipboardService] = None,
        history: Optional[HistoryStore] = None,
        settings: Optional[SettingsStore] = None,
        app_config: Optional[AppConfig] = None
    ):
        self.catalog = catalog
        self.backend = backend
        self.clipboard = clipboard or ClipboardService()
        self.history = history
        self.settings = settings
        self.config = app_config or default_config

        self.logger = get_logger(__name__)

    async def resolve_preset(self, preset_id: Optional[str] = None) -> Preset:
        """
        Pick the preset to use.

        An explicit id wins, then the last preset the user selected, then the
        default preset. An explicit id that does not exist is an error; a stale
        remembered id silently falls through to the default.
        """
        if preset_id:
            preset = await self.catalog.get_by_id(preset_id)
            if preset is None:
                raise ValidationError(f"Preset not found: {preset_id}", field="preset")
            return preset

        if self.settings is not None:
            last_id = await self.settings.get_last_selected_preset_id()
            if last_id:
                preset = await self.catalog.get_by_id(last_id)
                if preset is not None:
                    return preset

        return await self.catalog.get_by_id(DEFAULT_PRESET_ID)

    async def enhance(
        self,
        text: Optional[str] = None,
        preset_id: Optional[str] = None,
        variables: Optional[Mapping[str, Any]] = None,
        paste: Optional[bool] = None
    ) -> EnhancementResult:
        """
        Run one enhancement.

        Args:
            text: Text to enhance; read from the clipboard when omitted
            preset_id: Preset to apply (see ``resolve_preset``)
            variables: Extra placeholder values for the template
            paste: Paste the result into the active app instead of only
                copying it; defaults to the ``ui.auto_paste`` setting

        Returns:
            EnhancementResult with the output and timing metadata
        """
        # Step 1: Input
        if text is None:
            text = self.clipboard.read_prompt()
        check = validate_prompt(text, self.config.validation)
        if not check.is_valid:
            raise ValidationError(check.error, field="input")
        text = sanitize_input(text)

        # Step 2: Preset
        preset = await self.resolve_preset(preset_id)
        self.logger.info(f"Enhancing {len(text)} characters with preset '{preset.id}'")

        # Step 3: Model call, off the event loop
        start_time = time.monotonic()
        try:
            output = await asyncio.to_thread(self.backend.enhance, text, preset, variables)
        except Exception as e:
            self.logger.error(f"Enhancement failed: {str(e)}")
            raise
        processing_time = int((time.monotonic() - start_time) * 1000)

        metadata = {
            "provider": self.backend.name,
            "model": self.config.ollama.model,
            "processingTime": processing_time,
            "timestamp": now_ms(),
        }
        result = EnhancementResult(input=text, output=output, preset=preset, metadata=metadata)

        # Step 4: Bookkeeping
        if self.history is not None and self.config.ui.save_to_history:
            result.history_id = await self.history.save(
                preset.id,
                text,
                output,
                {key: metadata[key] for key in ("provider", "model", "processingTime")},
            )
        if self.settings is not None:
            await self.settings.set_last_selected_preset_id(preset.id)

        # Step 5: Deliver
        should_paste = self.config.ui.auto_paste if paste is None else paste
        if should_paste:
            self.clipboard.paste(output)
        else:
            self.clipboard.copy(output)

        self.logger.info(f"Enhancement complete in {processing_time}ms")
        return result
