"""
Scan Router - Medicine Image Analysis Endpoints

Thin HTTP relay over ScanService:
1. Normalize the uploaded file or camera frame
2. Send it with the fixed prompt to the configured vision model
3. Return the parsed analysis (possibly degraded) with a disclaimer
"""

import logging
import time
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from .application.services.scan_service import ScanService
from .cross_cutting.error_handling import user_message_for
from .cross_cutting.safety.disclaimers import DisclaimerInjector
from .domain.exceptions import DomainException, ErrorKind


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/scan", tags=["Scan"])

_disclaimers = DisclaimerInjector()

# Input-stage errors are the client's to fix; call-stage errors are upstream failures
STATUS_BY_KIND = {
    ErrorKind.UNREADABLE_FILE: 400,
    ErrorKind.UNSUPPORTED_FORMAT: 415,
    ErrorKind.TRANSPORT: 502,
    ErrorKind.PROVIDER: 502,
    ErrorKind.TIMEOUT: 504,
}


class CaptureRequest(BaseModel):
    """Request model for a camera frame (raw base64 or JPEG data URL)."""
    image_base64: str


class ScanResponse(BaseModel):
    """Response model for a scan."""
    success: bool
    analysis: Optional[Dict[str, Any]] = None
    degraded: bool = False
    missing_fields: List[str] = []
    error_kind: Optional[str] = None
    error: Optional[str] = None
    disclaimer: str = _disclaimers.get_short_disclaimer()
    processing_time_ms: Optional[float] = None


class PromptResponse(BaseModel):
    version: str
    prompt: str


def get_scan_service(request: Request) -> ScanService:
    """Dependency: the ScanService installed by create_app."""
    service = getattr(request.app.state, "scan_service", None)
    if service is None:
        raise HTTPException(status_code=503, detail="Scan service is not configured")
    return service


def _elapsed_ms(start_time: float) -> float:
    return (time.perf_counter() - start_time) * 1000


def _error_response(error: DomainException, start_time: float) -> JSONResponse:
    status_code = STATUS_BY_KIND.get(error.kind, 500)
    body = ScanResponse(
        success=False,
        error_kind=error.kind.value if error.kind else None,
        error=user_message_for(error.kind),
        processing_time_ms=_elapsed_ms(start_time),
    )
    return JSONResponse(status_code=status_code, content=body.model_dump())


def _success_response(analysis, start_time: float) -> ScanResponse:
    return ScanResponse(
        success=True,
        analysis=analysis.to_dict(),
        degraded=analysis.degraded,
        missing_fields=list(analysis.missing_fields),
        processing_time_ms=_elapsed_ms(start_time),
    )


@router.post("/upload", response_model=ScanResponse)
async def scan_upload(
    files: List[UploadFile] = File(...),
    service: ScanService = Depends(get_scan_service)
):
    """
    Analyze an uploaded medicine image. Only the first file is used.
    """
    start_time = time.perf_counter()

    try:
        analysis = await service.analyze_upload(files)
    except DomainException as e:
        logger.warning(f"Upload scan failed: {e}")
        return _error_response(e, start_time)

    return _success_response(analysis, start_time)


@router.post("/capture", response_model=ScanResponse)
async def scan_capture(
    request: CaptureRequest,
    service: ScanService = Depends(get_scan_service)
):
    """
    Analyze a camera frame sent as base64 or a JPEG data URL.
    """
    start_time = time.perf_counter()

    try:
        analysis = await service.analyze_capture(request.image_base64)
    except DomainException as e:
        logger.warning(f"Capture scan failed: {e}")
        return _error_response(e, start_time)

    return _success_response(analysis, start_time)


@router.get("/prompt", response_model=PromptResponse)
async def scan_prompt(service: ScanService = Depends(get_scan_service)):
    """Show the instruction text sent with every image."""
    return PromptResponse(
        version=service.prompt_version,
        prompt=service.client.prompt_for(service.prompt_version),
    )


@router.get("/health")
async def scan_health(service: ScanService = Depends(get_scan_service)):
    """Check which vision model the service is wired to."""
    model = service.client.model
    return {
        "status": "healthy",
        "provider": model.provider_name,
        "model": model.model_name,
        "prompt_version": service.prompt_version,
        "timeout_seconds": service.client.timeout_seconds,
    }
