"""
Dummy Vision Model

Offline stand-in that answers every image with a fixed, well-formed analysis.
"""

from typing import Optional

from ...domain.ports.vision_model import VisionModelPort
from ...domain.value_objects.canonical_image import CanonicalImage


DUMMY_RESPONSE = """1. Medicine Name: Ibuprofen 400 mg (ibuprofen)
2. Safety Rating: 7/10
3. Side Effects:
- Stomach upset and heartburn
- Nausea
- Dizziness
- Rare: gastrointestinal bleeding
4. Recent Studies:
- 2021 meta-analysis: short-term use shows a low rate of serious adverse events
- 2019 cohort study: higher cardiovascular risk at high daily doses
5. Recommendations: Take with food at the lowest effective dose. Avoid with kidney disease, stomach ulcers or late pregnancy.
6. User Stories:
- "Works quickly for my headaches, but I always take it after a meal."
- "Helped with back pain; mild heartburn when I forgot to eat first."
7. Alternatives:
- Paracetamol (acetaminophen)
- Naproxen
8. Price Range: $5 - $15 for a pack of 20 tablets
9. Availability: Over the counter in most countries; higher strengths need a prescription
"""


class DummyVisionModel(VisionModelPort):
    """
    Dummy vision model for testing and offline demos.
    """

    provider = "dummy"

    def __init__(self, response_text: Optional[str] = None):
        self._response_text = response_text or DUMMY_RESPONSE
        self.calls = 0

    def generate(self, prompt: str, image: CanonicalImage) -> str:
        self.calls += 1
        return self._response_text

    @property
    def provider_name(self) -> str:
        return self.provider

    @property
    def model_name(self) -> str:
        return "dummy"
