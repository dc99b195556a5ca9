"""
Cross-Cutting Concerns

Utilities and services that span across multiple layers.
"""

from .logging import setup_logging, get_logger, ScanLogger
from .validation import resolve_declared_type, validate_image_bytes, normalize_mime_type
from .error_handling import ErrorHandler, user_message_for
from .safety import DisclaimerInjector

__all__ = [
    "setup_logging",
    "get_logger",
    "ScanLogger",
    "resolve_declared_type",
    "validate_image_bytes",
    "normalize_mime_type",
    "ErrorHandler",
    "user_message_for",
    "DisclaimerInjector",
]
