"""
Base exceptions for IntentRelay
"""

from typing import Any, Dict, Optional


class IntentRelayException(Exception):
    """
    Root of the IntentRelay error hierarchy.

    Subclasses set ``error_code`` at class level.
    """

    error_code: Optional[str] = None

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.message = message
        if error_code:
            self.error_code = error_code
        self.details = details or {}
        self.cause = cause

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}" if self.error_code else self.message

    def to_dict(self) -> Dict[str, Any]:
        return {
            "exception_type": type(self).__name__,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
            "cause": str(self.cause) if self.cause else None,
        }


class DataStorageError(IntentRelayException):
    """A read or write against a backing store failed"""

    error_code = "DATA_STORAGE_ERROR"
    data_type = "unknown"

    def __init__(self, message: str, operation: str = "unknown", **kwargs):
        super().__init__(message, **kwargs)
        self.operation = operation

    def to_dict(self) -> Dict[str, Any]:
        return {**super().to_dict(), "operation": self.operation, "data_type": self.data_type}


class IntentStoreError(DataStorageError):
    """The intent record store cannot be read or written"""

    error_code = "INTENT_STORE_ERROR"
    data_type = "intent_record"

    def __init__(
        self,
        message: str,
        operation: str = "unknown",
        key: Optional[str] = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(message, operation=operation, details={"key": key}, cause=cause)
