"""
Logging handlers for IntentRelay
"""

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import List

from .config import ConsoleLogConfig, FileLogConfig
from .formatters import build_formatter


def _rotating_file(path: Path, options: FileLogConfig, level: int, formatter_type: str) -> RotatingFileHandler:
    handler = RotatingFileHandler(
        path, maxBytes=options.max_file_size, backupCount=options.backup_count
    )
    handler.setLevel(level)
    handler.setFormatter(build_formatter(formatter_type))
    return handler


def build_file_handlers(options: FileLogConfig, level: int, formatter_type: str) -> List[logging.Handler]:
    """app.log and errors.log handlers, whichever are enabled"""
    if not options.enabled:
        return []

    log_dir = Path(options.log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)

    handlers: List[logging.Handler] = []
    if options.app_log_enabled:
        handlers.append(_rotating_file(log_dir / "app.log", options, level, formatter_type))
    if options.error_log_enabled:
        handlers.append(_rotating_file(log_dir / "errors.log", options, logging.ERROR, formatter_type))
    return handlers


def build_console_handler(options: ConsoleLogConfig, formatter_type: str) -> logging.StreamHandler:
    handler = logging.StreamHandler()
    handler.setLevel(getattr(logging, options.level.upper()))
    handler.setFormatter(build_formatter(formatter_type))
    return handler
