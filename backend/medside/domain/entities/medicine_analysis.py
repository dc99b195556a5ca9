"""
Medicine Analysis Entity

Structured safety/usage analysis of a scanned medicine package.
"""

from dataclasses import dataclass, field
from typing import List, Dict, Any


MIN_RATING = 0.0
MAX_RATING = 10.0


def clamp_rating(value: float) -> float:
    """Clamp a safety rating into the [0, 10] range."""
    return max(MIN_RATING, min(MAX_RATING, float(value)))


@dataclass
class MedicineAnalysis:
    """
    Domain entity holding one complete analysis result.

    Created by the response parser from raw model text and replaced
    wholesale on every new analysis.

    Attributes:
        name: Medicine name and active ingredients
        rating: Safety rating, always within [0, 10]
        side_effects: Side effects, in the order the model listed them
        recommendations: Usage guidelines, contraindications and warnings
        studies: Recent clinical studies
        user_stories: Patient experiences
        alternatives: Alternative medicines
        price_range: Estimated price range
        availability: Prescription status and availability

        degraded: True when one or more fields could not be extracted
        missing_fields: Names of fields that fell back to defaults
        prompt_version: Section contract the text was parsed against
    """

    name: str = ""
    rating: float = 0.0
    side_effects: List[str] = field(default_factory=list)
    recommendations: str = ""
    studies: List[str] = field(default_factory=list)
    user_stories: List[str] = field(default_factory=list)
    alternatives: List[str] = field(default_factory=list)
    price_range: str = ""
    availability: str = ""

    degraded: bool = False
    missing_fields: List[str] = field(default_factory=list)
    prompt_version: str = "v1"

    def __post_init__(self) -> None:
        self.rating = clamp_rating(self.rating)
        # Sequence fields are never absent
        for name in ("side_effects", "studies", "user_stories", "alternatives", "missing_fields"):
            if getattr(self, name) is None:
                setattr(self, name, [])

    @property
    def is_complete(self) -> bool:
        """Check if every field was extracted."""
        return not self.degraded

    @property
    def rating_label(self) -> str:
        """Rating formatted the way the result card shows it."""
        return f"{self.rating:g}/10"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "name": self.name,
            "rating": self.rating,
            "side_effects": list(self.side_effects),
            "recommendations": self.recommendations,
            "studies": list(self.studies),
            "user_stories": list(self.user_stories),
            "alternatives": list(self.alternatives),
            "price_range": self.price_range,
            "availability": self.availability,
            "degraded": self.degraded,
            "missing_fields": list(self.missing_fields),
            "prompt_version": self.prompt_version,
        }

    def __str__(self) -> str:
        name = self.name or "Unknown medicine"
        return f"{name} ({self.rating_label})"
