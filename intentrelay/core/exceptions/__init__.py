"""
Custom exceptions for IntentRelay
"""

from .base import IntentRelayException, DataStorageError, IntentStoreError
from .config import ConfigurationError, ConfigurationValidationError
from .redis import RedisError, RedisConnectionError, RedisTimeoutError
from .validation import ValidationError

__all__ = [
    "IntentRelayException",
    "DataStorageError",
    "IntentStoreError",
    "ConfigurationError",
    "ConfigurationValidationError",
    "RedisError",
    "RedisConnectionError",
    "RedisTimeoutError",
    "ValidationError",
]
