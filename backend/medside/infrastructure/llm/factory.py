"""
Vision Model Factory

Factory for creating vision model adapter instances.
Supports cloud (Gemini, OpenAI) and local (Ollama) models.
"""

from typing import Optional, Dict, Any
from enum import Enum

from ...config.settings import VisionModelConfig, DEFAULT_MODELS
from ...domain.ports.vision_model import VisionModelPort
from ...domain.exceptions import ConfigurationError
from .dummy_client import DummyVisionModel


class VisionModelType(Enum):
    """Available vision model implementations."""

    GEMINI = "gemini"
    OPENAI = "openai"
    OLLAMA = "ollama"
    DUMMY = "dummy"


# Accepted spellings for provider names coming from env/CLI
_ALIASES = {
    "google": VisionModelType.GEMINI,
    "gpt": VisionModelType.OPENAI,
    "gpt-4o": VisionModelType.OPENAI,
    "local": VisionModelType.OLLAMA,
    "test": VisionModelType.DUMMY,
}


class VisionModelFactory:
    """
    Factory for creating vision model instances.

    Usage:
        # Cloud model (Gemini)
        model = VisionModelFactory.create(
            VisionModelType.GEMINI,
            api_key="your-api-key"
        )

        # Local model (Ollama)
        model = VisionModelFactory.create(
            VisionModelType.OLLAMA,
            model="llava:7b"
        )
    """

    @staticmethod
    def parse_type(name: str) -> VisionModelType:
        """
        Map a provider name to a VisionModelType.

        Raises:
            ConfigurationError: If the name is unknown
        """
        key = (name or "").strip().lower()
        try:
            return VisionModelType(key)
        except ValueError:
            if key in _ALIASES:
                return _ALIASES[key]
            known = ", ".join(t.value for t in VisionModelType)
            raise ConfigurationError(f"Unknown vision model provider '{name}' (known: {known})")

    @staticmethod
    def create(
        model_type: VisionModelType,
        **kwargs
    ) -> VisionModelPort:
        """
        Create a vision model instance.

        Args:
            model_type: Type of model to create
            **kwargs: Configuration options
                For Gemini/OpenAI:
                - api_key: API key for the service (required)
                For Ollama:
                - base_url: Ollama API URL (default: http://localhost:11434)
                Common:
                - model: Model name
                - temperature: Response temperature
                - max_tokens: Maximum response length
                - timeout: Request timeout in seconds

        Returns:
            VisionModelPort implementation

        Raises:
            ConfigurationError: If a required credential is missing
        """
        model = kwargs.get("model") or DEFAULT_MODELS[model_type.value]
        common = {
            "temperature": kwargs.get("temperature", 0.2),
            "max_tokens": kwargs.get("max_tokens", 2048),
            "timeout": kwargs.get("timeout", 30.0),
        }

        if model_type == VisionModelType.GEMINI:
            from .gemini_client import GeminiVisionModel

            return GeminiVisionModel(
                api_key=kwargs.get("api_key"),
                model=model,
                base_url=kwargs.get("base_url"),
                **common
            )

        elif model_type == VisionModelType.OPENAI:
            from .openai_client import OpenAIVisionModel

            return OpenAIVisionModel(
                api_key=kwargs.get("api_key"),
                model=model,
                base_url=kwargs.get("base_url"),
                **common
            )

        elif model_type == VisionModelType.OLLAMA:
            from .ollama_client import OllamaVisionModel

            return OllamaVisionModel(
                base_url=kwargs.get("base_url"),
                model=model,
                **common
            )

        elif model_type == VisionModelType.DUMMY:
            return DummyVisionModel(response_text=kwargs.get("response_text"))

        else:
            raise ConfigurationError(f"Unknown vision model type: {model_type}")

    @staticmethod
    def create_from_config(config: VisionModelConfig) -> VisionModelPort:
        """Create a model from the vision section of AppConfig."""
        model_type = VisionModelFactory.parse_type(config.provider)
        return VisionModelFactory.create(
            model_type,
            api_key=config.api_key,
            model=config.model,
            base_url=config.base_url,
            temperature=config.temperature,
            max_tokens=config.max_tokens,
            timeout=config.timeout_seconds,
        )

    @staticmethod
    def create_from_dict(config: Dict[str, Any]) -> VisionModelPort:
        """Create a model from a plain dictionary ({"provider": ..., ...})."""
        options = dict(config)
        model_type = VisionModelFactory.parse_type(options.pop("provider", "dummy"))
        return VisionModelFactory.create(model_type, **options)
