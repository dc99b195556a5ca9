"""
Application Layer

Prompt building, response parsing, application services and the
interactive analysis session.
"""

from .prompt_builder import PromptBuilder
from .response_parser import ResponseParser
from .services import ImageSource, UploadedFile, AnalysisClient, ScanService, create_analysis_client
from .session import AnalysisSession, VALID_TABS

__all__ = [
    "PromptBuilder",
    "ResponseParser",
    "ImageSource",
    "UploadedFile",
    "AnalysisClient",
    "ScanService",
    "create_analysis_client",
    "AnalysisSession",
    "VALID_TABS",
]
