"""
Analysis Client

Owns the call to the external vision model: bounded wait, error
classification and the (opt-in) retry policy.
"""

from typing import Dict, Optional
import asyncio
import inspect
import logging

from ..prompt_builder import PromptBuilder
from ...config.settings import VisionModelConfig
from ...domain.ports.vision_model import VisionModelPort
from ...domain.value_objects.analysis_request import AnalysisRequest
from ...domain.value_objects.canonical_image import CanonicalImage
from ...domain.exceptions import (
    AnalysisCallError,
    AnalysisTimeoutError,
    ConfigurationError,
    ProviderError,
    TransportError,
)


logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0

# Only failures that say nothing about the provider's willingness to answer
RETRYABLE_ERRORS = (TransportError, AnalysisTimeoutError)


class AnalysisClient:
    """
    Single logical call to the vision model per analysis.

    Blocking provider adapters run on a worker thread; the wait for them
    is bounded by `timeout_seconds`. A timed-out call is not cancelled on
    the provider side: the adapter's own transport timeout ends it.

    By default nothing is retried, so a transient failure or an exhausted
    quota surfaces to the caller immediately. `retry_count` opts in to
    retrying transport failures and timeouts only.

    Usage:
        client = AnalysisClient(GeminiVisionModel(api_key=key))
        text = await client.analyze(AnalysisRequest(image, "v1"))
    """

    def __init__(
        self,
        model: VisionModelPort,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        retry_count: int = 0,
        retry_delay_seconds: float = 1.0
    ):
        """
        Initialize the client.

        Args:
            model: Provider adapter (credentials already injected)
            timeout_seconds: Bounded wait for one provider response
            retry_count: Extra attempts for transport/timeout failures
            retry_delay_seconds: Pause between attempts
        """
        if timeout_seconds <= 0:
            raise ConfigurationError(f"timeout_seconds must be positive, got {timeout_seconds}")
        if retry_count < 0:
            raise ConfigurationError(f"retry_count cannot be negative, got {retry_count}")

        self._model = model
        self.timeout_seconds = timeout_seconds
        self.retry_count = retry_count
        self.retry_delay_seconds = retry_delay_seconds
        self._prompt_builders: Dict[str, PromptBuilder] = {}

        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    @property
    def model(self) -> VisionModelPort:
        return self._model

    def prompt_for(self, version: str) -> str:
        """Instruction text for a prompt version."""
        if version not in self._prompt_builders:
            self._prompt_builders[version] = PromptBuilder(version)
        return self._prompt_builders[version].build()

    async def analyze(self, request: AnalysisRequest) -> str:
        """
        Send the prompt and image, return the raw response text.

        Args:
            request: Image plus the prompt version to use

        Returns:
            Raw model text

        Raises:
            TransportError: Network/connectivity failure
            ProviderError: Non-success response from the provider
            AnalysisTimeoutError: No response within the bounded wait
        """
        prompt = self.prompt_for(request.prompt_version)
        attempts = 1 + self.retry_count

        attempt = 1
        while True:
            try:
                return await self._call_once(prompt, request.image)
            except RETRYABLE_ERRORS as e:
                if attempt >= attempts:
                    raise
                self.logger.warning(
                    f"Attempt {attempt}/{attempts} failed ({e.__class__.__name__}), "
                    f"retrying in {self.retry_delay_seconds}s"
                )
            await asyncio.sleep(self.retry_delay_seconds)
            attempt += 1

    async def _call_once(self, prompt: str, image: CanonicalImage) -> str:
        provider = self._model.provider_name
        self.logger.info(f"Calling {provider} model {self._model.model_name} with {image}")

        if inspect.iscoroutinefunction(self._model.generate):
            call = self._model.generate(prompt, image)
        else:
            call = asyncio.to_thread(self._model.generate, prompt, image)

        try:
            text = await asyncio.wait_for(call, timeout=self.timeout_seconds)
        except asyncio.TimeoutError:
            self.logger.error(f"{provider} did not respond within {self.timeout_seconds}s")
            raise AnalysisTimeoutError(self.timeout_seconds, details={"provider": provider})
        except (AnalysisCallError, ConfigurationError):
            raise
        except Exception as e:
            # Adapters classify their own failures; anything else is a provider-side defect
            self.logger.exception(f"Unclassified error from {provider} adapter")
            raise ProviderError(provider=provider, provider_message=str(e))

        if not isinstance(text, str) or not text.strip():
            raise ProviderError("Vision model returned an empty response", provider=provider)

        self.logger.info(f"Received {len(text)} characters from {provider}")
        return text


def create_analysis_client(model: VisionModelPort, config: Optional[VisionModelConfig] = None) -> AnalysisClient:
    """
    Build an AnalysisClient from configuration.

    Args:
        model: Provider adapter
        config: Vision model configuration (timeout and retry settings)
    """
    if config is None:
        return AnalysisClient(model)
    return AnalysisClient(
        model,
        timeout_seconds=config.timeout_seconds,
        retry_count=config.retry_count,
        retry_delay_seconds=config.retry_delay_seconds,
    )
