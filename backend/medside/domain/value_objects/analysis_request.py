"""
Analysis Request Value Object
"""

from dataclasses import dataclass

from .canonical_image import CanonicalImage


@dataclass(frozen=True)
class AnalysisRequest:
    """
    One call's worth of input for the vision model.

    Attributes:
        image: Image to analyze
        prompt_version: Section contract version the prompt was built from
    """

    image: CanonicalImage
    prompt_version: str

    def __str__(self) -> str:
        return f"AnalysisRequest({self.image}, prompt={self.prompt_version})"
