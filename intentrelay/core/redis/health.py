"""
Redis health probe
"""

import time
from typing import Optional

from intentrelay.core.logging import get_logger
from intentrelay.shared.constants.redis import HEALTH_KEY_PREFIX, HEALTH_PROBE_TTL_SECONDS
from intentrelay.shared.helpers import now_ms, now_utc
from .client import RedisClient, get_redis_client_instance
from .models import RedisHealthStatus

logger = get_logger(__name__)


async def check_redis_health(
    redis_client: Optional[RedisClient] = None,
) -> RedisHealthStatus:
    """Write, read back and delete a probe key; never raises"""
    redis_client = redis_client or get_redis_client_instance()
    endpoint = redis_client.config.describe()
    started = time.perf_counter()

    def elapsed_ms() -> float:
        return round((time.perf_counter() - started) * 1000, 2)

    probe_key = f"{HEALTH_KEY_PREFIX}:{now_ms()}"
    try:
        await redis_client.set(probe_key, "ok", ex=HEALTH_PROBE_TTL_SECONDS)
        value = await redis_client.get(probe_key)
        await redis_client.delete(probe_key)
        if value != "ok":
            raise RuntimeError(f"Probe read back {value!r}")
    except Exception as e:
        logger.error("Redis health check failed", error=str(e), elapsed_ms=elapsed_ms())
        return RedisHealthStatus(
            is_healthy=False,
            checked_at=now_utc().isoformat(),
            response_time_ms=elapsed_ms(),
            endpoint=endpoint,
            error_message=str(e),
        )

    return RedisHealthStatus(
        is_healthy=True,
        checked_at=now_utc().isoformat(),
        response_time_ms=elapsed_ms(),
        endpoint=endpoint,
    )
