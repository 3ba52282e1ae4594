"""
FastAPI dependencies and service wiring
"""

from typing import Optional

from intentrelay.core.config import settings
from intentrelay.core.logging import get_logger
from intentrelay.core.redis import get_redis_client_instance
from intentrelay.domains.attribution.services import (
    AttributionService,
    RedisIntentStore,
    RedisStatsRecorder,
)
from intentrelay.domains.presentation import LinkBuilder

logger = get_logger(__name__)

# Global service instance
_attribution_service: Optional[AttributionService] = None


def build_attribution_service() -> AttributionService:
    """Redis-backed service configured from settings"""
    redis_client = get_redis_client_instance()
    return AttributionService(
        store=RedisIntentStore(redis_client),
        stats=RedisStatsRecorder(redis_client),
        links=LinkBuilder.from_settings(settings.presentation),
        ttl_seconds=settings.attribution.INTENT_TTL_SECONDS,
        threshold=settings.attribution.MATCH_THRESHOLD,
        stats_timeout=settings.attribution.STATS_TIMEOUT_SECONDS,
    )


def get_attribution_service() -> AttributionService:
    """Dependency returning the shared attribution service"""
    global _attribution_service

    if _attribution_service is None:
        _attribution_service = build_attribution_service()
        logger.info(
            "Attribution service initialized",
            ttl_seconds=_attribution_service.ttl_seconds,
            threshold=_attribution_service.threshold,
        )

    return _attribution_service


def reset_attribution_service() -> None:
    global _attribution_service
    _attribution_service = None
