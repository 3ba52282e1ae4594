"""
Redis connection settings, health and metrics models
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from pydantic import BaseModel

from intentrelay.shared.constants.redis import (
    DEFAULT_REDIS_DB,
    DEFAULT_REDIS_PORT,
    DEFAULT_REDIS_TLS,
)


@dataclass(frozen=True)
class RedisConnectionConfig:
    """Where and how to connect; responses are always decoded to str"""

    host: str = "localhost"
    port: int = DEFAULT_REDIS_PORT
    password: Optional[str] = None
    db: int = DEFAULT_REDIS_DB
    tls: bool = DEFAULT_REDIS_TLS
    connect_timeout: float = 5.0
    socket_timeout: float = 5.0
    health_check_interval: int = 30

    @classmethod
    def from_settings(cls, redis_settings) -> "RedisConnectionConfig":
        return cls(
            host=redis_settings.REDIS_HOST,
            port=redis_settings.REDIS_PORT,
            password=redis_settings.REDIS_PASSWORD or None,
            db=redis_settings.REDIS_DB,
            tls=redis_settings.REDIS_TLS,
        )

    def client_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments for redis.asyncio.Redis"""
        kwargs = {
            "host": self.host,
            "port": self.port,
            "password": self.password,
            "db": self.db,
            "decode_responses": True,
            "socket_connect_timeout": self.connect_timeout,
            "socket_timeout": self.socket_timeout,
            "socket_keepalive": True,
            "health_check_interval": self.health_check_interval,
        }
        # Local development servers never speak TLS
        if self.tls and self.host != "localhost":
            kwargs["ssl"] = True
            kwargs["ssl_cert_reqs"] = None
        return kwargs

    def describe(self) -> Dict[str, Any]:
        """Endpoint summary for logs and error details, without credentials"""
        return {"host": self.host, "port": self.port, "db": self.db, "tls": self.tls}


class RedisHealthStatus(BaseModel):
    """Outcome of one probe round trip"""

    is_healthy: bool
    checked_at: str
    response_time_ms: float
    endpoint: Dict[str, Any] = {}
    error_message: Optional[str] = None


class RedisMetrics(BaseModel):
    """Running operation counters for one RedisClient"""

    total_operations: int = 0
    failed_operations: int = 0
    slow_operations: int = 0
    connection_errors: int = 0
    average_response_time_ms: float = 0.0

    @property
    def successful_operations(self) -> int:
        return self.total_operations - self.failed_operations

    def observe(self, elapsed_ms: float, success: bool) -> None:
        self.total_operations += 1
        if not success:
            self.failed_operations += 1
            return
        succeeded = self.successful_operations
        self.average_response_time_ms += (elapsed_ms - self.average_response_time_ms) / succeeded
