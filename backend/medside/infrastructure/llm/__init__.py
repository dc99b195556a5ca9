"""
Vision Model Adapters

Implementations of VisionModelPort for analyzing medicine images.
Supports cloud (Gemini, OpenAI) and local (Ollama) models.
"""

from .gemini_client import GeminiVisionModel
from .openai_client import OpenAIVisionModel
from .ollama_client import OllamaVisionModel
from .dummy_client import DummyVisionModel, DUMMY_RESPONSE
from .factory import VisionModelFactory, VisionModelType

__all__ = [
    "GeminiVisionModel",
    "OpenAIVisionModel",
    "OllamaVisionModel",
    "DummyVisionModel",
    "DUMMY_RESPONSE",
    "VisionModelFactory",
    "VisionModelType",
]
