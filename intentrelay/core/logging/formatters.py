"""
Logging formatters for IntentRelay

StructuredLogger attaches the bare event text as ``record.event`` and its
keyword arguments as ``record.fields``; the JSON formatter emits those as
separate keys while the text formatters print the pre-rendered message.
"""

import json
import logging
from datetime import datetime, timezone


def _timestamp(record: logging.LogRecord) -> str:
    return datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat()


class JSONFormatter(logging.Formatter):
    """One JSON object per line for log shippers"""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": _timestamp(record),
            "level": record.levelname,
            "logger": record.name,
            "message": getattr(record, "event", record.getMessage()),
        }

        fields = getattr(record, "fields", None)
        if fields:
            entry["fields"] = fields

        if record.levelno >= logging.WARNING:
            entry["location"] = f"{record.module}:{record.funcName}:{record.lineno}"

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


class ConsoleFormatter(logging.Formatter):
    """Coloured single-line output for local development"""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, self.RESET)
        moment = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")

        line = f"{color}{moment} {record.levelname:<8}{self.RESET} {record.name}: {record.getMessage()}"
        if record.exc_info:
            line += f"\n{self.formatException(record.exc_info)}"
        return line


class StructuredFormatter(logging.Formatter):
    """Uncoloured key=value lines, suitable for log files"""

    def __init__(self):
        super().__init__(
            fmt="%(asctime)s %(levelname)s %(name)s %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S%z",
        )


FORMATTERS = {
    "console": ConsoleFormatter,
    "json": JSONFormatter,
    "structured": StructuredFormatter,
}


def build_formatter(formatter_type: str) -> logging.Formatter:
    """Map a LOG_FORMAT value to a formatter instance"""
    return FORMATTERS.get(formatter_type, StructuredFormatter)()
