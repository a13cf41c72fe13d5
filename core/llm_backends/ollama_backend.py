import logging
from typing import Any, Dict, List, Mapping, Optional

import requests

from config.settings import OllamaConfig
from core.errors import NetworkError, ProviderError
from core.llm_backends.base import LLMBackend
from core.prompts.models import Preset

logger = logging.getLogger(__name__)

# Health checks should fail fast even when generation is allowed to take long
AVAILABILITY_TIMEOUT = 5.0


class OllamaBackend(LLMBackend):
    """
    Backend for a local (or remote) Ollama server.

    Uses the non-streaming chat endpoint: a call either returns the complete
    output or fails. Requests are bounded by the configured timeout and are
    never retried.
    """

    def __init__(self, config: Optional[OllamaConfig] = None, session: Optional[requests.Session] = None):
        """
        Initialize the Ollama backend.

        Args:
            config: Server URL, model name and timeout (defaults if omitted)
            session: Optional requests session, mainly for tests
        """
        self.config = config or OllamaConfig()
        self.session = session or requests.Session()

    @property
    def name(self) -> str:
        return "Ollama"

    def _url(self, path: str) -> str:
        return f"{self.config.url.rstrip('/')}{path}"

    def enhance(self, prompt: str, preset: Preset, variables: Optional[Mapping[str, Any]] = None) -> str:
        """
        Enhance the user's prompt with a preset.

        Args:
            prompt: Raw user text
            preset: Preset whose template wraps the text
            variables: Extra placeholder values besides ``input``

        Returns:
            The model output, stripped of surrounding whitespace

        Raises:
            ProviderError: If Ollama answers with an error or a malformed body
            NetworkError: If Ollama cannot be reached or the request times out
        """
        request_body: Dict[str, Any] = {
            "model": self.config.model,
            "messages": [
                {
                    "role": "user",
                    "content": self.format_prompt(prompt, preset, variables),
                }
            ],
            "stream": False,
        }

        logger.info(f"Calling Ollama model {self.config.model} with preset '{preset.id}'")

        try:
            response = self.session.post(
                self._url("/api/chat"),
                json=request_body,
                timeout=self.config.timeout,
            )
        except requests.exceptions.Timeout as e:
            raise NetworkError(f"Ollama did not respond within {self.config.timeout:g} seconds") from e
        except requests.exceptions.ConnectionError as e:
            raise NetworkError("Cannot connect to Ollama. Make sure Ollama is running.") from e
        except requests.exceptions.RequestException as e:
            raise NetworkError(f"Ollama request failed: {e}") from e

        if not response.ok:
            raise ProviderError(
                f"Ollama request failed: {response.status_code} {response.reason}",
                provider="ollama"
            )

        try:
            data = response.json()
        except ValueError as e:
            raise ProviderError("Invalid response from Ollama", provider="ollama") from e

        message = data.get("message") if isinstance(data, dict) else None
        content = message.get("content") if isinstance(message, dict) else None
        if not content:
            raise ProviderError("Invalid response from Ollama", provider="ollama")

        return content.strip()

    def is_available(self) -> bool:
        try:
            response = self.session.get(self._url("/api/version"), timeout=AVAILABILITY_TIMEOUT)
            return response.ok
        except requests.exceptions.RequestException as e:
            logger.debug(f"Ollama availability check failed: {e}")
            return False

    def list_models(self) -> List[str]:
        try:
            response = self.session.get(self._url("/api/tags"), timeout=AVAILABILITY_TIMEOUT)
            if not response.ok:
                return []
            data = response.json()
        except (requests.exceptions.RequestException, ValueError) as e:
            logger.debug(f"Could not list Ollama models: {e}")
            return []

        return [model["name"] for model in data.get("models") or [] if "name" in model]
