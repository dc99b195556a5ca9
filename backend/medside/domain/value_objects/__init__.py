"""
Value Objects

Immutable objects defined by their attributes.
"""

from .canonical_image import CanonicalImage, ALLOWED_MIME_TYPES, JPEG, PNG, GIF
from .analysis_request import AnalysisRequest

__all__ = [
    "CanonicalImage",
    "ALLOWED_MIME_TYPES",
    "JPEG",
    "PNG",
    "GIF",
    "AnalysisRequest",
]
