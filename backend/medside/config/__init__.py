"""
Configuration Module

Application settings and configuration management.
"""

from .settings import (
    AppConfig,
    VisionModelConfig,
    UploadConfig,
    LoggingConfig,
    ServerConfig,
    DEFAULT_MODELS,
    get_default_config,
)

__all__ = [
    "AppConfig",
    "VisionModelConfig",
    "UploadConfig",
    "LoggingConfig",
    "ServerConfig",
    "DEFAULT_MODELS",
    "get_default_config",
]
