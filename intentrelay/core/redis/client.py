"""
Redis client for IntentRelay
"""

import asyncio
import time
from typing import Any, Dict, List, Optional

from redis.asyncio import Redis
from redis.exceptions import TimeoutError as RedisLibTimeoutError

from intentrelay.core.config.settings import settings
from intentrelay.core.exceptions import RedisConnectionError, RedisTimeoutError
from intentrelay.core.logging import get_logger
from .models import RedisConnectionConfig, RedisMetrics

logger = get_logger(__name__)

SLOW_OPERATION_MS = 50


class RedisClient:
    """Thin wrapper over redis.asyncio with lazy connect, metrics and error translation"""

    def __init__(self, config: Optional[RedisConnectionConfig] = None):
        self.config = config or RedisConnectionConfig.from_settings(settings.redis)
        self._client: Optional[Redis] = None
        self._metrics = RedisMetrics()
        self._lock = asyncio.Lock()

    async def connect(self) -> None:
        async with self._lock:
            if self._client is not None:
                return

            endpoint = self.config.describe()
            logger.info("Connecting to Redis", **endpoint)
            client = Redis(**self.config.client_kwargs())

            try:
                await asyncio.wait_for(client.ping(), timeout=self.config.connect_timeout)
            except asyncio.TimeoutError as e:
                self._metrics.connection_errors += 1
                logger.error("Redis ping timed out", **endpoint)
                raise RedisTimeoutError(
                    message=f"Redis did not answer within {self.config.connect_timeout}s",
                    operation="connect",
                    timeout=self.config.connect_timeout,
                    cause=e,
                )
            except Exception as e:
                self._metrics.connection_errors += 1
                logger.error("Redis connection failed", error_type=type(e).__name__, **endpoint)
                raise RedisConnectionError(
                    message=f"Failed to connect to Redis: {e}",
                    connection_details=endpoint,
                    cause=e,
                )

            self._client = client
            logger.info("Redis connected", **endpoint)

    async def disconnect(self) -> None:
        async with self._lock:
            if self._client is None:
                return
            try:
                await self._client.aclose()
                logger.info("Redis connection closed")
            except Exception as e:
                logger.warning("Error closing Redis connection", error=str(e))
            finally:
                self._client = None

    async def get_client(self) -> Redis:
        if self._client is None:
            await self.connect()
        return self._client

    def _observe(self, started: float, success: bool, operation: str) -> None:
        elapsed_ms = (time.perf_counter() - started) * 1000
        self._metrics.observe(elapsed_ms, success)
        if success and elapsed_ms > SLOW_OPERATION_MS:
            self._metrics.slow_operations += 1
            logger.warning(
                "Slow Redis operation", operation=operation, elapsed_ms=round(elapsed_ms, 2)
            )

    def _translate(self, operation: str, error: Exception) -> Exception:
        if isinstance(error, (RedisConnectionError, RedisTimeoutError)):
            return error
        if isinstance(error, RedisLibTimeoutError):
            return RedisTimeoutError(
                message=f"Redis operation '{operation}' timed out",
                operation=operation,
                timeout=self.config.socket_timeout,
                cause=error,
            )
        return RedisConnectionError(
            message=f"Redis operation '{operation}' failed",
            connection_details=self.config.describe(),
            cause=error,
        )

    async def execute_operation(self, operation: str, *args, **kwargs) -> Any:
        """Run one redis.asyncio command by name"""
        started = time.perf_counter()
        try:
            client = await self.get_client()
            result = await getattr(client, operation)(*args, **kwargs)
        except Exception as e:
            self._observe(started, False, operation)
            raise self._translate(operation, e) from e
        self._observe(started, True, operation)
        return result

    async def set(self, key: str, value: Any, ex: Optional[int] = None) -> bool:
        """Set a key, optionally expiring after ex seconds"""
        return await self.execute_operation("set", key, value, ex=ex)

    async def get(self, key: str) -> Any:
        return await self.execute_operation("get", key)

    async def delete(self, *keys) -> int:
        return await self.execute_operation("delete", *keys)

    async def expire(self, key: str, seconds: int) -> bool:
        return await self.execute_operation("expire", key, seconds)

    async def incr(self, key: str) -> int:
        return await self.execute_operation("incr", key)

    async def mget(self, keys: List[str]) -> List[Optional[str]]:
        """Values for keys in one round trip, None where a key is missing"""
        return await self.execute_operation("mget", keys)

    async def zadd(self, key: str, mapping: Dict[str, float]) -> int:
        return await self.execute_operation("zadd", key, mapping)

    async def zrem(self, key: str, *members) -> int:
        return await self.execute_operation("zrem", key, *members)

    async def zremrangebyscore(self, key: str, min_score: Any, max_score: Any) -> int:
        return await self.execute_operation("zremrangebyscore", key, min_score, max_score)

    async def zrevrange(self, key: str, start: int, end: int) -> List[str]:
        """Members from highest to lowest score, end inclusive"""
        return await self.execute_operation("zrevrange", key, start, end)

    async def scan_keys(self, pattern: str, count: int = 500) -> List[str]:
        """Collect keys matching a glob pattern with SCAN instead of KEYS"""
        started = time.perf_counter()
        try:
            client = await self.get_client()
            keys = [key async for key in client.scan_iter(match=pattern, count=count)]
        except Exception as e:
            self._observe(started, False, "scan")
            raise self._translate("scan", e) from e
        self._observe(started, True, "scan")
        return keys

    def get_metrics(self) -> RedisMetrics:
        return self._metrics


# Global Redis client instance
_redis_client: Optional[RedisClient] = None


def get_redis_client_instance() -> RedisClient:
    global _redis_client

    if _redis_client is None:
        _redis_client = RedisClient()

    return _redis_client


async def close_redis_client() -> None:
    global _redis_client

    if _redis_client:
        await _redis_client.disconnect()
        _redis_client = None
