"""
Logging module for IntentRelay
"""

from .logger import get_logger, setup_logging, StructuredLogger
from .formatters import StructuredFormatter, JSONFormatter, ConsoleFormatter
from .config import LoggingConfig

__all__ = [
    "get_logger",
    "setup_logging",
    "StructuredLogger",
    "StructuredFormatter",
    "JSONFormatter",
    "ConsoleFormatter",
    "LoggingConfig",
]
