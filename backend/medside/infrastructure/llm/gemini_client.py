"""
Gemini Vision Model

Google Gemini adapter using the generateContent REST endpoint.
"""

from typing import Any, Dict, Optional
import logging

import requests

from .http_base import HttpVisionModel
from ...domain.value_objects.canonical_image import CanonicalImage
from ...domain.exceptions import ConfigurationError, ProviderError


logger = logging.getLogger(__name__)

GEMINI_BASE_URL = "https://generativelanguage.googleapis.com"


class GeminiVisionModel(HttpVisionModel):
    """
    Vision model backed by Google Gemini.

    One generateContent request per analysis: the prompt as a text part
    and the image as an inline_data part.

    Attributes:
        model: Gemini model name (e.g. "gemini-2.5-flash")
        temperature: Sampling temperature
        max_tokens: Maximum output tokens
    """

    provider = "gemini"

    def __init__(
        self,
        api_key: Optional[str],
        model: str = "gemini-2.5-flash",
        temperature: float = 0.2,
        max_tokens: int = 2048,
        base_url: Optional[str] = None,
        timeout: float = 30.0,
        session: Optional[requests.Session] = None
    ):
        """
        Initialize the Gemini adapter.

        Args:
            api_key: Gemini API key
            model: Model name
            temperature: Creativity (0.0-1.0)
            max_tokens: Maximum response length
            base_url: API URL override (proxies, tests)
            timeout: Request timeout in seconds

        Raises:
            ConfigurationError: If no API key is given
        """
        if not api_key:
            raise ConfigurationError(
                "Gemini API key not provided. Set MEDSIDE_API_KEY or GEMINI_API_KEY.",
                missing=["api_key"]
            )

        super().__init__(base_url or GEMINI_BASE_URL, timeout=timeout, session=session)
        self._api_key = api_key
        self._model = model
        self._temperature = temperature
        self._max_tokens = max_tokens

    @property
    def model_name(self) -> str:
        return self._model

    def generate(self, prompt: str, image: CanonicalImage) -> str:
        payload = {
            "contents": [{
                "parts": [
                    {"text": prompt},
                    {"inline_data": {"mime_type": image.mime_type, "data": image.base64_string}},
                ]
            }],
            "generationConfig": {
                "temperature": self._temperature,
                "maxOutputTokens": self._max_tokens,
            },
        }

        self.logger.info(f"Calling Gemini with model {self._model}...")
        body = self._post(
            f"/v1beta/models/{self._model}:generateContent",
            payload,
            headers={"x-goog-api-key": self._api_key},
        )
        return self._extract_text(body)

    def _extract_text(self, body: Dict[str, Any]) -> str:
        """Concatenate the text parts of the first candidate."""
        candidates = body.get("candidates") or []
        if not candidates:
            block_reason = (body.get("promptFeedback") or {}).get("blockReason")
            raise ProviderError(
                "Vision model returned no answer",
                provider=self.provider,
                provider_message=f"blocked: {block_reason}" if block_reason else "no candidates",
            )

        parts = (candidates[0].get("content") or {}).get("parts") or []
        text = "".join(part.get("text", "") for part in parts)
        if not text.strip():
            finish_reason = candidates[0].get("finishReason")
            raise ProviderError(
                "Vision model returned an empty response",
                provider=self.provider,
                provider_message=f"finishReason: {finish_reason}" if finish_reason else None,
            )
        return text
