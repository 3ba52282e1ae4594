"""
Request validation exceptions
"""

from typing import Any, Optional

from .base import IntentRelayException


class ValidationError(IntentRelayException):
    """A required input is missing or malformed; mapped to HTTP 400"""

    error_code = "VALIDATION_ERROR"

    def __init__(self, message: str, field: Optional[str] = None, value: Any = None, **kwargs):
        super().__init__(message, details={"field": field, "value": value}, **kwargs)
        self.field = field
