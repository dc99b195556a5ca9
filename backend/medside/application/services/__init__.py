"""
Application Services

High-level services that coordinate domain operations.
"""

from .image_source import ImageSource, UploadedFile
from .analysis_client import AnalysisClient, create_analysis_client
from .scan_service import ScanService

__all__ = [
    "ImageSource",
    "UploadedFile",
    "AnalysisClient",
    "create_analysis_client",
    "ScanService",
]
