"""
Logging Configuration

Structured logging for the medicine scanner.
"""

import logging
import sys
from typing import Optional, Union, Dict, TextIO
from datetime import datetime


ROOT_LOGGER_NAME = "medside"


def setup_logging(
    level: Union[int, str] = logging.INFO,
    log_file: Optional[str] = None,
    format_string: Optional[str] = None,
    stream: Optional[TextIO] = None
) -> None:
    """
    Configure logging for the application.

    Args:
        level: Logging level, as int or name (default: INFO)
        log_file: Optional file path for log output
        format_string: Custom format string
        stream: Console stream (default: stdout)
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    if format_string is None:
        format_string = (
            "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
        )

    formatter = logging.Formatter(format_string)

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(level)

    # Clear existing handlers
    root_logger.handlers = []

    console_handler = logging.StreamHandler(stream or sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for a module.

    Args:
        name: Module name (usually __name__)

    Returns:
        Logger under the package root
    """
    if name == ROOT_LOGGER_NAME or name.startswith(f"{ROOT_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


class ScanLogger:
    """
    Per-scan logger.

    Tags every line with a short scan id and times the scan stages
    (call, parse).
    """

    def __init__(self, scan_id: str):
        self.scan_id = scan_id
        self.logger = logging.getLogger(f"{ROOT_LOGGER_NAME}.scan.{scan_id[:8]}")
        self._stage_start_times: Dict[str, datetime] = {}
        self.durations_ms: Dict[str, float] = {}

    def stage_start(self, stage_name: str) -> None:
        """Log stage start."""
        self._stage_start_times[stage_name] = datetime.now()
        self.logger.debug(f"Stage '{stage_name}' started")

    def stage_end(self, stage_name: str, success: bool = True) -> float:
        """Log stage completion and return its duration in milliseconds."""
        duration = 0.0
        if stage_name in self._stage_start_times:
            delta = datetime.now() - self._stage_start_times.pop(stage_name)
            duration = delta.total_seconds() * 1000
        self.durations_ms[stage_name] = duration

        status = "completed" if success else "failed"
        self.logger.info(f"Stage '{stage_name}' {status} in {duration:.2f}ms")
        return duration

    def stage_error(self, stage_name: str, error: Exception) -> None:
        """Log stage error."""
        self.stage_end(stage_name, success=False)
        self.logger.error(f"Stage '{stage_name}' error: {error}")

    @property
    def total_ms(self) -> float:
        return sum(self.durations_ms.values())
