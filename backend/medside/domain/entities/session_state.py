"""
Session State

Tagged state of an analysis session, as observed by the presentation layer.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Dict, Any

from .medicine_analysis import MedicineAnalysis
from ..exceptions import ErrorKind


class SessionStatus(Enum):
    """Tag of the session state variant."""

    IDLE = "idle"
    CAPTURING_PREVIEW = "capturing_preview"
    ANALYZING = "analyzing"
    READY = "ready"
    FAILED = "failed"


@dataclass(frozen=True)
class SessionState:
    """
    One value of the session state variant.

    Only READY carries an analysis and only FAILED carries an error kind.
    Use the named constructors instead of building instances directly.
    """

    status: SessionStatus
    analysis: Optional[MedicineAnalysis] = None
    error_kind: Optional[ErrorKind] = None

    def __post_init__(self) -> None:
        if (self.status == SessionStatus.READY) != (self.analysis is not None):
            raise ValueError("analysis is required for READY and only for READY")
        if (self.status == SessionStatus.FAILED) != (self.error_kind is not None):
            raise ValueError("error_kind is required for FAILED and only for FAILED")

    @classmethod
    def idle(cls) -> "SessionState":
        return cls(SessionStatus.IDLE)

    @classmethod
    def capturing_preview(cls) -> "SessionState":
        return cls(SessionStatus.CAPTURING_PREVIEW)

    @classmethod
    def analyzing(cls) -> "SessionState":
        return cls(SessionStatus.ANALYZING)

    @classmethod
    def ready(cls, analysis: MedicineAnalysis) -> "SessionState":
        return cls(SessionStatus.READY, analysis=analysis)

    @classmethod
    def failed(cls, error_kind: ErrorKind) -> "SessionState":
        return cls(SessionStatus.FAILED, error_kind=error_kind)

    @property
    def is_analyzing(self) -> bool:
        return self.status == SessionStatus.ANALYZING

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "status": self.status.value,
            "analysis": self.analysis.to_dict() if self.analysis else None,
            "error_kind": self.error_kind.value if self.error_kind else None,
        }

    def __str__(self) -> str:
        if self.error_kind:
            return f"{self.status.value}({self.error_kind.value})"
        return self.status.value
