"""
Vision Model Port

Abstract interface for vision-capable language model providers.
"""

from abc import ABC, abstractmethod

from ..value_objects.canonical_image import CanonicalImage


class VisionModelPort(ABC):
    """
    Port (interface) for a remote text+image in, text out capability.

    Implementations make exactly one provider call per `generate` and
    translate provider failures into the domain taxonomy:
    - TransportError: network/connectivity failure
    - ProviderError: non-success response (quota, auth, blocked output)
    - AnalysisTimeoutError: the provider did not answer in time

    Implementations may use:
    - Google Gemini
    - OpenAI GPT-4o family
    - Local models served by Ollama

    Credentials are passed to the adapter's constructor by the caller.
    """

    @abstractmethod
    def generate(self, prompt: str, image: CanonicalImage) -> str:
        """
        Send the instruction text and image, return the model's free text.

        Args:
            prompt: Fixed instruction text
            image: Image to analyze

        Returns:
            Raw response text

        Raises:
            AnalysisCallError: If the call fails
        """
        pass

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Short provider identifier (e.g. "gemini")."""
        pass

    @property
    @abstractmethod
    def model_name(self) -> str:
        """Get the name of the model."""
        pass

    @property
    def timeout_seconds(self) -> float:
        """Per-request timeout the adapter applies to its own transport."""
        return 30.0
