"""
Ollama Vision Model

Local vision model served by Ollama (llava, llama3.2-vision, qwen2.5vl...).
"""

from typing import Optional
import logging

import requests

from .http_base import HttpVisionModel
from ...domain.value_objects.canonical_image import CanonicalImage
from ...domain.exceptions import ProviderError


logger = logging.getLogger(__name__)

OLLAMA_BASE_URL = "http://localhost:11434"


class OllamaVisionModel(HttpVisionModel):
    """
    Vision model using a local Ollama server.

    Recommended models for 6GB VRAM:
    - llava:7b
    - qwen2.5vl:3b
    - gemma3:4b
    """

    provider = "ollama"

    def __init__(
        self,
        base_url: Optional[str] = None,
        model: str = "llava:7b",
        temperature: float = 0.2,
        max_tokens: int = 2048,
        timeout: float = 30.0,
        session: Optional[requests.Session] = None
    ):
        """
        Initialize Ollama vision model.

        Args:
            base_url: Ollama API URL
            model: Model name
            temperature: Creativity (0.0-1.0)
            max_tokens: Maximum response length
            timeout: Request timeout in seconds
        """
        super().__init__(base_url or OLLAMA_BASE_URL, timeout=timeout, session=session)
        self._model = model
        self._temperature = temperature
        self._max_tokens = max_tokens

    @property
    def model_name(self) -> str:
        return self._model

    def generate(self, prompt: str, image: CanonicalImage) -> str:
        payload = {
            "model": self._model,
            "prompt": prompt,
            "images": [image.base64_string],
            "stream": False,
            "options": {
                "temperature": self._temperature,
                "num_predict": self._max_tokens,
            },
        }

        self.logger.info(f"Calling Ollama with model {self._model}...")
        body = self._post("/api/generate", payload)

        if body.get("error"):
            raise ProviderError(provider=self.provider, provider_message=str(body["error"]))
        return body.get("response", "")
