"""
Main logging module for IntentRelay
"""

import logging
from typing import Any, Dict, Optional

from .config import LoggingConfig
from .handlers import build_console_handler, build_file_handlers

# Libraries whose INFO chatter drowns out request logs
NOISY_LOGGERS = ("httpx", "redis", "uvicorn.access")


def _render(value: Any) -> str:
    if isinstance(value, str) and " " in value:
        return f'"{value}"'
    return str(value)


class StructuredLogger:
    """
    Standard logger that accepts keyword fields.

    ``logger.info("Stored intent record", link_id="abc", score=0.75)`` renders
    as ``Stored intent record | link_id=abc | score=0.75``. None values are
    dropped. The fields also ride on the record for the JSON formatter.
    """

    def __init__(self, logger: logging.Logger):
        self._logger = logger

    @property
    def name(self) -> str:
        return self._logger.name

    @staticmethod
    def _format_message(message: str, fields: Dict[str, Any]) -> str:
        if not fields:
            return message
        rendered = " | ".join(f"{key}={_render(value)}" for key, value in fields.items())
        return f"{message} | {rendered}"

    def _log(self, level: int, message: str, exc_info: bool = False, **kwargs) -> None:
        if not self._logger.isEnabledFor(level):
            return
        fields = {key: value for key, value in kwargs.items() if value is not None}
        self._logger.log(
            level,
            self._format_message(message, fields),
            exc_info=exc_info,
            extra={"event": message, "fields": fields},
            stacklevel=3,
        )

    def debug(self, message: str, **kwargs):
        self._log(logging.DEBUG, message, **kwargs)

    def info(self, message: str, **kwargs):
        self._log(logging.INFO, message, **kwargs)

    def warning(self, message: str, **kwargs):
        self._log(logging.WARNING, message, **kwargs)

    def error(self, message: str, **kwargs):
        self._log(logging.ERROR, message, **kwargs)

    def critical(self, message: str, **kwargs):
        self._log(logging.CRITICAL, message, **kwargs)

    def exception(self, message: str, **kwargs):
        """Error-level entry with the active exception's traceback"""
        self._log(logging.ERROR, message, exc_info=True, **kwargs)


def setup_logging(config: Optional[LoggingConfig] = None) -> None:
    """Replace the root logger's handlers according to config"""
    config = config or LoggingConfig()
    level = getattr(logging, config.level.upper())

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    root_logger.setLevel(level)

    for handler in build_file_handlers(config.file, level, config.format):
        root_logger.addHandler(handler)

    if config.console.enabled:
        root_logger.addHandler(build_console_handler(config.console, config.format))

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    get_logger(__name__).info(
        "Logging configured", level=config.level, format=config.format
    )


def get_logger(name: str) -> StructuredLogger:
    return StructuredLogger(logging.getLogger(name))
