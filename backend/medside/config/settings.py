"""
Application Configuration

Settings and configuration management for the medicine scanner.
"""

from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List
from pathlib import Path
import os

from dotenv import load_dotenv


DEFAULT_MODELS = {
    "gemini": "gemini-2.5-flash",
    "openai": "gpt-4o-mini",
    "ollama": "llava:7b",
    "dummy": "dummy",
}


@dataclass
class VisionModelConfig:
    """Vision model provider configuration."""

    provider: str = "gemini"  # gemini, openai, ollama, dummy
    model: Optional[str] = None  # Defaults per provider
    api_key: Optional[str] = field(default=None, repr=False)
    base_url: Optional[str] = None  # Ollama / proxy URL
    temperature: float = 0.2
    max_tokens: int = 2048
    timeout_seconds: float = 30.0
    retry_count: int = 0  # No automatic retry unless opted in
    retry_delay_seconds: float = 1.0

    @property
    def resolved_model(self) -> str:
        return self.model or DEFAULT_MODELS.get(self.provider, DEFAULT_MODELS["gemini"])


@dataclass
class UploadConfig:
    """Image input configuration."""

    max_file_size_bytes: int = 10 * 1024 * 1024
    verify_images: bool = True


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "INFO"
    log_file: Optional[str] = None
    format: str = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


@dataclass
class ServerConfig:
    """HTTP relay configuration."""

    cors_origins: List[str] = field(default_factory=lambda: ["*"])


@dataclass
class AppConfig:
    """
    Main application configuration.

    Aggregates all component configurations.
    """

    vision: VisionModelConfig = field(default_factory=VisionModelConfig)
    upload: UploadConfig = field(default_factory=UploadConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    server: ServerConfig = field(default_factory=ServerConfig)

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> "AppConfig":
        """
        Create configuration from environment variables.

        A .env file is loaded first (without overriding real environment).

        Environment variables:
            MEDSIDE_PROVIDER: gemini/openai/ollama/dummy
            MEDSIDE_MODEL: Model name
            MEDSIDE_API_KEY: Provider credential (falls back to GEMINI_API_KEY / OPENAI_API_KEY)
            MEDSIDE_BASE_URL: Provider base URL override
            MEDSIDE_TIMEOUT: Request timeout in seconds
            MEDSIDE_RETRY_COUNT: Opt-in retries for transport/timeout failures
            MEDSIDE_MAX_UPLOAD_MB: Upload size limit
            MEDSIDE_LOG_LEVEL: Logging level
            MEDSIDE_LOG_FILE: Optional log file
            MEDSIDE_CORS_ORIGINS: Comma-separated allowed origins
        """
        if env_file:
            load_dotenv(dotenv_path=Path(env_file))
        else:
            load_dotenv()

        config = cls()

        # Vision model
        if provider := os.getenv("MEDSIDE_PROVIDER"):
            config.vision.provider = provider.strip().lower()
        if model := os.getenv("MEDSIDE_MODEL"):
            config.vision.model = model
        if api_key := os.getenv("MEDSIDE_API_KEY"):
            config.vision.api_key = api_key
        elif config.vision.provider == "gemini" and (api_key := os.getenv("GEMINI_API_KEY")):
            config.vision.api_key = api_key
        elif config.vision.provider == "openai" and (api_key := os.getenv("OPENAI_API_KEY")):
            config.vision.api_key = api_key
        if base_url := os.getenv("MEDSIDE_BASE_URL"):
            config.vision.base_url = base_url
        if timeout := os.getenv("MEDSIDE_TIMEOUT"):
            config.vision.timeout_seconds = float(timeout)
        if retry_count := os.getenv("MEDSIDE_RETRY_COUNT"):
            config.vision.retry_count = int(retry_count)

        # Upload
        if max_mb := os.getenv("MEDSIDE_MAX_UPLOAD_MB"):
            config.upload.max_file_size_bytes = int(float(max_mb) * 1024 * 1024)

        # Logging
        if log_level := os.getenv("MEDSIDE_LOG_LEVEL"):
            config.logging.level = log_level.upper()
        if log_file := os.getenv("MEDSIDE_LOG_FILE"):
            config.logging.log_file = log_file

        # Server
        if origins := os.getenv("MEDSIDE_CORS_ORIGINS"):
            config.server.cors_origins = [o.strip() for o in origins.split(",") if o.strip()]

        return config

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AppConfig":
        """Create configuration from dictionary."""
        config = cls()

        for section in ("vision", "upload", "logging", "server"):
            if section in data:
                target = getattr(config, section)
                for key, value in data[section].items():
                    if hasattr(target, key):
                        setattr(target, key, value)

        return config

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary. The API key is never included."""
        return {
            "vision": {
                "provider": self.vision.provider,
                "model": self.vision.resolved_model,
                "base_url": self.vision.base_url,
                "temperature": self.vision.temperature,
                "max_tokens": self.vision.max_tokens,
                "timeout_seconds": self.vision.timeout_seconds,
                "retry_count": self.vision.retry_count,
                "retry_delay_seconds": self.vision.retry_delay_seconds,
                "has_api_key": bool(self.vision.api_key),
            },
            "upload": {
                "max_file_size_bytes": self.upload.max_file_size_bytes,
                "verify_images": self.upload.verify_images,
            },
            "logging": {
                "level": self.logging.level,
                "log_file": self.logging.log_file,
            },
            "server": {
                "cors_origins": list(self.server.cors_origins),
            },
        }


def get_default_config() -> AppConfig:
    """Get default application configuration."""
    return AppConfig.from_env()
