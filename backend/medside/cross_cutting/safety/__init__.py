"""
Safety Module

Medical disclaimers.
"""

from .disclaimers import DisclaimerInjector, MEDICAL_DISCLAIMER, SHORT_DISCLAIMER

__all__ = [
    "DisclaimerInjector",
    "MEDICAL_DISCLAIMER",
    "SHORT_DISCLAIMER",
]
