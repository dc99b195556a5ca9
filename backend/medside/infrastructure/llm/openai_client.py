"""
OpenAI Vision Model

GPT-4o family adapter using chat completions with an inline image.
"""

from typing import Optional
import logging

from ...domain.ports.vision_model import VisionModelPort
from ...domain.value_objects.canonical_image import CanonicalImage
from ...domain.exceptions import (
    AnalysisTimeoutError,
    ConfigurationError,
    ProviderError,
    TransportError,
)


logger = logging.getLogger(__name__)


class OpenAIVisionModel(VisionModelPort):
    """
    Vision model using OpenAI chat completions.

    The image travels as a data URL inside an image_url content part.
    The SDK's own retries are disabled; retrying is the AnalysisClient's call.
    """

    provider = "openai"

    def __init__(
        self,
        api_key: Optional[str],
        model: str = "gpt-4o-mini",
        temperature: float = 0.2,
        max_tokens: int = 2048,
        base_url: Optional[str] = None,
        timeout: float = 30.0,
        client=None
    ):
        """
        Initialize OpenAI vision model.

        Args:
            api_key: OpenAI API key
            model: GPT model name
            temperature: Response temperature
            max_tokens: Maximum response tokens
            base_url: API URL override (Azure/proxy)
            timeout: Request timeout in seconds
            client: Pre-built OpenAI client (tests)
        """
        if not api_key and client is None:
            raise ConfigurationError(
                "OpenAI API key not provided. Set MEDSIDE_API_KEY or OPENAI_API_KEY.",
                missing=["api_key"]
            )

        self._api_key = api_key
        self._model = model
        self._temperature = temperature
        self._max_tokens = max_tokens
        self._base_url = base_url
        self._timeout = timeout
        self._client = client

        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def _initialize(self) -> None:
        """Lazy initialization of OpenAI client."""
        if self._client is not None:
            return

        from openai import OpenAI

        self._client = OpenAI(
            api_key=self._api_key,
            base_url=self._base_url,
            timeout=self._timeout,
            max_retries=0,
        )
        self.logger.info(f"OpenAI client initialized with model={self._model}")

    @property
    def provider_name(self) -> str:
        return self.provider

    @property
    def model_name(self) -> str:
        return self._model

    @property
    def timeout_seconds(self) -> float:
        return self._timeout

    def generate(self, prompt: str, image: CanonicalImage) -> str:
        import openai

        self._initialize()

        try:
            response = self._client.chat.completions.create(
                model=self._model,
                messages=[{
                    "role": "user",
                    "content": [
                        {"type": "text", "text": prompt},
                        {"type": "image_url", "image_url": {"url": image.data_url}},
                    ],
                }],
                temperature=self._temperature,
                max_tokens=self._max_tokens,
            )
        # APITimeoutError subclasses APIConnectionError
        except openai.APITimeoutError:
            self.logger.error(f"OpenAI request timed out after {self._timeout}s")
            raise AnalysisTimeoutError(self._timeout, details={"provider": self.provider})
        except openai.APIConnectionError as e:
            self.logger.error(f"OpenAI connection failed: {e}")
            raise TransportError(provider=self.provider, details={"reason": str(e)})
        except openai.APIStatusError as e:
            self.logger.error(f"OpenAI returned HTTP {e.status_code}")
            raise ProviderError(
                status_code=e.status_code,
                provider=self.provider,
                provider_message=str(e),
            )

        if not response.choices:
            raise ProviderError("Vision model returned no answer", provider=self.provider)
        return response.choices[0].message.content or ""
