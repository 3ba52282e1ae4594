"""
Redis exceptions
"""

from typing import Any, Dict, Optional

from .base import IntentRelayException


class RedisError(IntentRelayException):
    error_code = "REDIS_ERROR"


class RedisConnectionError(RedisError):
    """Redis is unreachable or a command failed on the connection"""

    error_code = "REDIS_CONNECTION_ERROR"

    def __init__(self, message: str, connection_details: Optional[Dict[str, Any]] = None, **kwargs):
        masked = dict(connection_details or {})
        if masked.get("password"):
            masked["password"] = "***"
        super().__init__(message, details={"connection_details": masked}, **kwargs)


class RedisTimeoutError(RedisError):
    error_code = "REDIS_TIMEOUT_ERROR"

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        timeout: Optional[float] = None,
        **kwargs
    ):
        super().__init__(message, details={"operation": operation, "timeout": timeout}, **kwargs)
        self.operation = operation
