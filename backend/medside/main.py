"""
MedSide - FastAPI Backend

Medicine package scanner API: photo -> vision model -> structured analysis.

Run with:
    uvicorn medside.main:create_app --factory
"""

from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .application.services.analysis_client import create_analysis_client
from .application.services.image_source import ImageSource
from .application.services.scan_service import ScanService
from .config.settings import AppConfig, get_default_config
from .cross_cutting.logging import get_logger, setup_logging
from .infrastructure.llm.factory import VisionModelFactory
from .scan_router import router as scan_router


logger = get_logger(__name__)


def build_scan_service(config: AppConfig) -> ScanService:
    """
    Wire the vision model, analysis client and image source from config.

    Raises:
        ConfigurationError: Unknown provider or missing API key
    """
    model = VisionModelFactory.create_from_config(config.vision)
    client = create_analysis_client(model, config.vision)
    logger.info(f"Vision model: {model.provider_name}/{model.model_name}")
    return ScanService(client, image_source=ImageSource(config.upload))


def create_app(config: Optional[AppConfig] = None, service: Optional[ScanService] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        config: Application configuration (default: from environment)
        service: Pre-built ScanService (default: built from config)
    """
    config = config or get_default_config()
    setup_logging(config.logging.level, config.logging.log_file, config.logging.format)

    if service is None:
        service = build_scan_service(config)

    app = FastAPI(
        title="MedSide Scan API",
        description="Medicine package scanner - photo to structured analysis",
        version=__version__,
    )
    app.state.config = config
    app.state.scan_service = service

    # allow_credentials must stay False while origins may be "*"
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.server.cors_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(scan_router)

    @app.get("/")
    async def root():
        return {"message": "MedSide Scan API", "status": "active", "provider": config.vision.provider}

    @app.get("/health")
    async def health_check():
        return {"status": "healthy"}

    return app


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(create_app(), host="0.0.0.0", port=8000)
