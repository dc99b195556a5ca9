"""
Ports (Interfaces)

Abstract interfaces defining the contracts for infrastructure adapters.
Following Hexagonal Architecture / Ports & Adapters pattern.
"""

from .vision_model import VisionModelPort

__all__ = [
    "VisionModelPort",
]
