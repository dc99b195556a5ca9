"""
Infrastructure Layer

Adapters for external vision model providers.
"""

from .llm import VisionModelFactory, VisionModelType

__all__ = [
    "VisionModelFactory",
    "VisionModelType",
]
