"""
Daily success/error counters for deferred deep-link resolution

Counters are a side channel: record_outcome_safely never lets a counter
failure reach the caller.
"""

import asyncio
from abc import ABC, abstractmethod
from collections import defaultdict
from typing import Dict, Optional

from intentrelay.core.logging import get_logger
from intentrelay.core.redis import RedisClient
from intentrelay.shared.constants.attribution import (
    OUTCOME_ERROR,
    OUTCOME_SUCCESS,
    STATS_TIMEOUT_SECONDS,
)
from intentrelay.shared.constants.redis import STATS_KEY_PREFIX
from intentrelay.shared.helpers import utc_day

logger = get_logger(__name__)

OUTCOMES = (OUTCOME_SUCCESS, OUTCOME_ERROR)


def stats_key(outcome: str, day: str) -> str:
    return f"{STATS_KEY_PREFIX}:{outcome}:{day}"


class StatsRecorder(ABC):
    """Per-day outcome counters"""

    @abstractmethod
    async def increment(self, outcome: str, day: str) -> int:
        pass

    @abstractmethod
    async def get_counts(self, day: str) -> Dict[str, int]:
        pass


class InMemoryStatsRecorder(StatsRecorder):
    def __init__(self):
        self._counts: Dict[str, int] = defaultdict(int)

    async def increment(self, outcome: str, day: str) -> int:
        key = stats_key(outcome, day)
        self._counts[key] += 1
        return self._counts[key]

    async def get_counts(self, day: str) -> Dict[str, int]:
        return {outcome: self._counts.get(stats_key(outcome, day), 0) for outcome in OUTCOMES}


class RedisStatsRecorder(StatsRecorder):
    def __init__(self, redis_client: RedisClient):
        self._redis = redis_client

    async def increment(self, outcome: str, day: str) -> int:
        return await self._redis.incr(stats_key(outcome, day))

    async def get_counts(self, day: str) -> Dict[str, int]:
        counts = {}
        for outcome in OUTCOMES:
            value = await self._redis.get(stats_key(outcome, day))
            counts[outcome] = int(value) if value else 0
        return counts


async def record_outcome_safely(
    recorder: Optional[StatsRecorder],
    outcome: str,
    day: Optional[str] = None,
    timeout: float = STATS_TIMEOUT_SECONDS,
) -> None:
    """Increment a counter, logging and discarding any failure"""
    if recorder is None:
        return

    try:
        await asyncio.wait_for(recorder.increment(outcome, day or utc_day()), timeout=timeout)
    except asyncio.TimeoutError:
        logger.warning("Stats update timed out", outcome=outcome, timeout=timeout)
    except Exception as e:
        logger.warning(
            "Failed to update stats",
            outcome=outcome,
            error=str(e),
            error_type=type(e).__name__,
        )
