"""
Configuration exceptions
"""

from typing import List, Optional

from .base import IntentRelayException


class ConfigurationError(IntentRelayException):
    error_code = "CONFIG_ERROR"

    def __init__(self, message: str, config_key: Optional[str] = None, **kwargs):
        details = {"config_key": config_key, **kwargs.pop("details", {})}
        super().__init__(message, details=details, **kwargs)
        self.config_key = config_key


class ConfigurationValidationError(ConfigurationError):
    """One or more settings fall outside their allowed range"""

    error_code = "CONFIG_VALIDATION_ERROR"

    def __init__(self, message: str, validation_errors: List[str], **kwargs):
        super().__init__(message, details={"validation_errors": validation_errors}, **kwargs)
        self.validation_errors = validation_errors
