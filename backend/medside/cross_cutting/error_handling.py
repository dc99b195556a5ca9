"""
Error Handling

Centralized error handling utilities.
"""

from typing import Optional
import logging
import traceback

from ..domain.exceptions import DomainException, ErrorKind


logger = logging.getLogger(__name__)


# One message per error kind; provider text is never shown to the user.
USER_MESSAGES = {
    ErrorKind.UNREADABLE_FILE: "Error reading file. Please try again.",
    ErrorKind.UNSUPPORTED_FORMAT: "Unsupported image format. Please use a JPG, PNG or GIF image.",
    ErrorKind.TRANSPORT: "Could not reach the analysis service. Check your connection and try again.",
    ErrorKind.PROVIDER: "The analysis service could not process this image. Please try again later.",
    ErrorKind.TIMEOUT: "The analysis took too long. Please try again.",
}

GENERIC_MESSAGE = "Error processing image. Please try again."


def user_message_for(kind: Optional[ErrorKind]) -> str:
    """Get the user-facing message for an error kind."""
    if kind is None:
        return GENERIC_MESSAGE
    return USER_MESSAGES.get(kind, GENERIC_MESSAGE)


class ErrorHandler:
    """
    Context manager for error handling.

    Only DomainException subclasses are captured when `suppress` is set;
    anything else is logged and propagates.

    Usage:
        with ErrorHandler(logger, context="upload", suppress=True) as handler:
            # do something risky
        if handler.has_error:
            show(handler.user_message)
    """

    def __init__(
        self,
        logger: logging.Logger,
        context: str = "",
        suppress: bool = False
    ):
        """
        Initialize error handler.

        Args:
            logger: Logger for error messages
            context: Context string for error messages
            suppress: Whether to suppress domain exceptions
        """
        self.logger = logger
        self.context = context
        self.suppress = suppress
        self.error: Optional[Exception] = None
        self.error_message: Optional[str] = None

    def __enter__(self) -> "ErrorHandler":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        if exc_val is None:
            return False

        self.error = exc_val
        self.error_message = str(exc_val)

        prefix = f"[{self.context}] " if self.context else ""
        if isinstance(exc_val, DomainException):
            self.logger.warning(f"{prefix}{exc_val}")
            if exc_val.details:
                self.logger.debug(f"Details: {exc_val.details}")
            return self.suppress

        self.logger.error(f"{prefix}unexpected error: {exc_val}")
        self.logger.debug(traceback.format_exc())
        return False

    @property
    def has_error(self) -> bool:
        """Check if an error occurred."""
        return self.error is not None

    @property
    def error_kind(self) -> Optional[ErrorKind]:
        """Error kind of the captured exception, if it has one."""
        if isinstance(self.error, DomainException):
            return self.error.kind
        return None

    @property
    def user_message(self) -> Optional[str]:
        """User-facing message for the captured error."""
        if self.error is None:
            return None
        return user_message_for(self.error_kind)

    @property
    def is_recoverable(self) -> bool:
        """Check if the error is recoverable."""
        if self.error is None:
            return True
        if isinstance(self.error, DomainException):
            return self.error.is_recoverable
        return False
