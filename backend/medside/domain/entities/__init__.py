"""
Domain Entities

Core business entities of the medicine scan domain.
"""

from .medicine_analysis import MedicineAnalysis, clamp_rating
from .session_state import SessionState, SessionStatus

__all__ = [
    "MedicineAnalysis",
    "clamp_rating",
    "SessionState",
    "SessionStatus",
]
