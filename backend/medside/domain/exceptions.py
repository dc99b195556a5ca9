"""
Domain Exceptions

Custom exceptions for the medicine scan domain.
Organized by the stage that raises them: input, provider call, configuration.
"""

from enum import Enum
from typing import Optional, Dict, Any


class ErrorKind(Enum):
    """Classification of hard failures surfaced to the user."""

    # Input stage (user retries the input)
    UNREADABLE_FILE = "unreadable_file"
    UNSUPPORTED_FORMAT = "unsupported_format"

    # Call stage (user retries the whole flow)
    TRANSPORT = "transport"
    PROVIDER = "provider"
    TIMEOUT = "timeout"

    @property
    def is_input_stage(self) -> bool:
        return self in (ErrorKind.UNREADABLE_FILE, ErrorKind.UNSUPPORTED_FORMAT)


class DomainException(Exception):
    """
    Base exception for all domain-level errors.

    Attributes:
        message: Human-readable error message
        details: Additional error details
        is_recoverable: Whether the operation can be retried
    """

    kind: Optional[ErrorKind] = None

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        is_recoverable: bool = True
    ):
        super().__init__(message)
        self.message = message
        self.details = details or {}
        self.is_recoverable = is_recoverable

    def __str__(self) -> str:
        return f"{self.__class__.__name__}: {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for serialization."""
        return {
            "type": self.__class__.__name__,
            "kind": self.kind.value if self.kind else None,
            "message": self.message,
            "details": self.details,
            "is_recoverable": self.is_recoverable,
        }


# =============================================================================
# Input Exceptions
# =============================================================================

class InputError(DomainException):
    """Base exception for image input errors."""
    pass


class UnreadableFileError(InputError):
    """The capture frame or uploaded file could not be read."""

    kind = ErrorKind.UNREADABLE_FILE

    def __init__(
        self,
        message: str = "Image could not be read",
        filename: Optional[str] = None,
        **kwargs
    ):
        super().__init__(message, **kwargs)
        if filename:
            self.details["filename"] = filename


class UnsupportedFormatError(InputError):
    """The uploaded file's declared type is outside the allow-set."""

    kind = ErrorKind.UNSUPPORTED_FORMAT

    def __init__(
        self,
        declared_type: Optional[str],
        supported: Optional[list] = None,
        **kwargs
    ):
        message = f"Unsupported image format: {declared_type or 'unknown'}"
        super().__init__(message, **kwargs)
        self.declared_type = declared_type
        self.details["declared_type"] = declared_type
        if supported:
            self.details["supported"] = supported


# =============================================================================
# Vision Model Call Exceptions
# =============================================================================

class AnalysisCallError(DomainException):
    """Base exception for failures of the vision model call."""
    pass


class TransportError(AnalysisCallError):
    """Network or connectivity failure while reaching the provider."""

    kind = ErrorKind.TRANSPORT

    def __init__(
        self,
        message: str = "Could not reach the vision model provider",
        provider: Optional[str] = None,
        **kwargs
    ):
        super().__init__(message, **kwargs)
        if provider:
            self.details["provider"] = provider


class ProviderError(AnalysisCallError):
    """The provider answered with a non-success response."""

    kind = ErrorKind.PROVIDER

    def __init__(
        self,
        message: str = "Vision model provider returned an error",
        status_code: Optional[int] = None,
        provider: Optional[str] = None,
        provider_message: Optional[str] = None,
        **kwargs
    ):
        super().__init__(message, **kwargs)
        self.status_code = status_code
        if status_code is not None:
            self.details["status_code"] = status_code
        if provider:
            self.details["provider"] = provider
        if provider_message:
            self.details["provider_message"] = provider_message[:500]


class AnalysisTimeoutError(AnalysisCallError):
    """No provider response arrived within the bounded wait."""

    kind = ErrorKind.TIMEOUT

    def __init__(
        self,
        timeout_seconds: float,
        message: Optional[str] = None,
        **kwargs
    ):
        message = message or f"Vision model did not respond within {timeout_seconds} seconds"
        super().__init__(message, **kwargs)
        self.timeout_seconds = timeout_seconds
        self.details["timeout_seconds"] = timeout_seconds


# =============================================================================
# Configuration / Programming Exceptions
# =============================================================================

class ConfigurationError(DomainException):
    """The application or a provider adapter is not properly configured."""

    def __init__(
        self,
        message: str = "Application is not properly configured",
        missing: Optional[list] = None,
        **kwargs
    ):
        super().__init__(message, is_recoverable=False, **kwargs)
        if missing:
            self.details["missing"] = missing


class UnknownPromptVersionError(DomainException):
    """No section contract is registered for the requested prompt version."""

    def __init__(self, version: str, known: Optional[list] = None, **kwargs):
        super().__init__(f"Unknown prompt version: {version}", is_recoverable=False, **kwargs)
        self.details["version"] = version
        if known:
            self.details["known_versions"] = known


class InvalidInputError(DomainException):
    """Invalid input provided to a function or method."""

    def __init__(
        self,
        field: str,
        reason: str,
        **kwargs
    ):
        message = f"Invalid input for '{field}': {reason}"
        super().__init__(message, is_recoverable=False, **kwargs)
        self.details["field"] = field
        self.details["reason"] = reason
