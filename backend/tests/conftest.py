"""Shared test fixtures and fakes."""

import asyncio
import logging
from io import BytesIO
from typing import List, Optional

import pytest
from PIL import Image

from medside.application.services.analysis_client import AnalysisClient
from medside.application.services.image_source import ImageSource
from medside.application.services.scan_service import ScanService
from medside.domain.ports.vision_model import VisionModelPort
from medside.domain.value_objects.canonical_image import CanonicalImage
from medside.infrastructure.llm.dummy_client import DUMMY_RESPONSE
from medside.cross_cutting.logging import ROOT_LOGGER_NAME


# =============================================================================
# Image Fixtures
# =============================================================================


def make_image_bytes(fmt: str, size=(32, 24), color=(200, 30, 30)) -> bytes:
    """Encode a small solid-color image with Pillow."""
    buffer = BytesIO()
    mode = "P" if fmt == "GIF" else "RGB"
    Image.new("RGB", size, color).convert(mode).save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def jpeg_bytes() -> bytes:
    return make_image_bytes("JPEG")


@pytest.fixture
def png_bytes() -> bytes:
    return make_image_bytes("PNG")


@pytest.fixture
def gif_bytes() -> bytes:
    return make_image_bytes("GIF")


@pytest.fixture
def bmp_bytes() -> bytes:
    return make_image_bytes("BMP")


@pytest.fixture
def jpeg_image(jpeg_bytes: bytes) -> CanonicalImage:
    return CanonicalImage(data=jpeg_bytes)


# =============================================================================
# Model Text Fixtures
# =============================================================================


WELL_FORMED_RESPONSE = DUMMY_RESPONSE

MARKDOWN_RESPONSE = """Here is the analysis of the medicine in the photo.

## 1. **Medicine Name**: Amoxicillin 500 mg capsules
**Safety Rating:** 8.5/10
### Side Effects
* Diarrhea
* Nausea
* Skin rash
**Recent Studies:**
1. 2020 review of amoxicillin in otitis media
2. 2022 study on resistance patterns
**Recommendations:** Finish the full course. Not for people allergic to penicillin.
**User Stories:**
- "Cleared my sinus infection in a week."
**Alternatives:**
- Azithromycin
- Cefuroxime
**Price Range:** $4 - $12
**Availability:** Prescription only
---
This is not medical advice.
"""


@pytest.fixture
def well_formed_response() -> str:
    return WELL_FORMED_RESPONSE


@pytest.fixture
def markdown_response() -> str:
    return MARKDOWN_RESPONSE


# =============================================================================
# Vision Model Fakes
# =============================================================================


class FakeVisionModel(VisionModelPort):
    """Blocking fake that records calls and returns or raises on demand."""

    def __init__(self, response: str = WELL_FORMED_RESPONSE, error: Optional[Exception] = None):
        self.response = response
        self.error = error
        self.calls: List[tuple] = []

    def generate(self, prompt: str, image: CanonicalImage) -> str:
        self.calls.append((prompt, image))
        if self.error is not None:
            raise self.error
        return self.response

    @property
    def provider_name(self) -> str:
        return "fake"

    @property
    def model_name(self) -> str:
        return "fake-vision"


class GatedVisionModel(VisionModelPort):
    """Async fake that blocks until `release` is set."""

    def __init__(self, response: str = WELL_FORMED_RESPONSE):
        self.response = response
        self.release = asyncio.Event()
        self.started = asyncio.Event()
        self.calls = 0

    async def generate(self, prompt: str, image: CanonicalImage) -> str:
        self.calls += 1
        self.started.set()
        await self.release.wait()
        return self.response

    @property
    def provider_name(self) -> str:
        return "gated"

    @property
    def model_name(self) -> str:
        return "gated-vision"


class ScriptedVisionModel(VisionModelPort):
    """Async fake that replays a script of responses and exceptions."""

    def __init__(self, script: list):
        self.script = list(script)
        self.calls = 0

    async def generate(self, prompt: str, image: CanonicalImage) -> str:
        self.calls += 1
        step = self.script.pop(0)
        if isinstance(step, Exception):
            raise step
        return step

    @property
    def provider_name(self) -> str:
        return "scripted"

    @property
    def model_name(self) -> str:
        return "scripted-vision"


@pytest.fixture
def fake_model() -> FakeVisionModel:
    return FakeVisionModel()


@pytest.fixture
def scan_service(fake_model: FakeVisionModel) -> ScanService:
    return ScanService(AnalysisClient(fake_model, timeout_seconds=5.0), image_source=ImageSource())


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers installed by setup_logging so they never outlive a test's streams."""
    yield
    logging.getLogger(ROOT_LOGGER_NAME).handlers = []
