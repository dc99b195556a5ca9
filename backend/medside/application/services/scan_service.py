"""
Scan Service

High-level application service for medicine image analysis.
"""

from typing import Iterable, Optional, Union
import logging
import uuid

from .analysis_client import AnalysisClient
from .image_source import ImageSource, FileHandle
from ..response_parser import ResponseParser
from ...cross_cutting.logging import ScanLogger
from ...domain.entities.medicine_analysis import MedicineAnalysis
from ...domain.sections import get_contract, CURRENT_PROMPT_VERSION
from ...domain.value_objects.analysis_request import AnalysisRequest
from ...domain.value_objects.canonical_image import CanonicalImage


logger = logging.getLogger(__name__)


class ScanService:
    """
    Application service for analyzing medicine package images.

    Composes the prompt contract, the analysis client and the response
    parser for one canonical image. It keeps no state between scans and
    is shared by the interactive session and the HTTP relay.

    Usage:
        service = ScanService(client)

        # From a canonical image
        analysis = await service.analyze(image)

        # From raw input
        analysis = await service.analyze_capture(jpeg_bytes)
        analysis = await service.analyze_upload([uploaded_file])
    """

    def __init__(
        self,
        client: AnalysisClient,
        parser: Optional[ResponseParser] = None,
        image_source: Optional[ImageSource] = None,
        prompt_version: str = CURRENT_PROMPT_VERSION
    ):
        """
        Initialize the service.

        Args:
            client: Configured analysis client
            parser: Response parser (default: new ResponseParser)
            image_source: Input normalizer (default: new ImageSource)
            prompt_version: Section contract used for every request
        """
        get_contract(prompt_version)

        self.client = client
        self.parser = parser or ResponseParser(default_version=prompt_version)
        self.image_source = image_source or ImageSource()
        self.prompt_version = prompt_version
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    async def analyze(self, image: CanonicalImage) -> MedicineAnalysis:
        """
        Analyze one canonical image.

        Args:
            image: Image to analyze

        Returns:
            MedicineAnalysis (possibly degraded)

        Raises:
            AnalysisCallError: If the provider call fails
        """
        scan_log = ScanLogger(str(uuid.uuid4()))
        request = AnalysisRequest(image=image, prompt_version=self.prompt_version)
        self.logger.info(f"Starting medicine analysis: {request}")

        scan_log.stage_start("call")
        try:
            raw_text = await self.client.analyze(request)
        except Exception as e:
            scan_log.stage_error("call", e)
            raise
        scan_log.stage_end("call")

        scan_log.stage_start("parse")
        analysis = self.parser.parse(raw_text, request.prompt_version)
        scan_log.stage_end("parse")

        if analysis.degraded:
            self.logger.warning(f"Analysis incomplete, missing: {analysis.missing_fields}")
        else:
            self.logger.info(f"Analysis successful: {analysis}")
        scan_log.logger.info(f"Scan finished in {scan_log.total_ms:.0f}ms")

        return analysis

    async def analyze_capture(self, frame: Union[bytes, str]) -> MedicineAnalysis:
        """
        Analyze a camera frame (JPEG bytes or data URL).

        Raises:
            UnreadableFileError: If the frame cannot be read
            AnalysisCallError: If the provider call fails
        """
        image = self.image_source.from_capture(frame)
        return await self.analyze(image)

    async def analyze_upload(self, files: Iterable[FileHandle]) -> MedicineAnalysis:
        """
        Analyze the first file of an upload.

        Raises:
            UnsupportedFormatError: Declared type outside the allow-set
            UnreadableFileError: If the file cannot be read
            AnalysisCallError: If the provider call fails
        """
        image = self.image_source.from_uploads(files)
        return await self.analyze(image)
