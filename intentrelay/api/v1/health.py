"""
Health check and stats endpoints
"""

import asyncio

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from intentrelay.core.config import settings
from intentrelay.core.dependencies import get_attribution_service
from intentrelay.core.exceptions import IntentStoreError
from intentrelay.core.logging import get_logger
from intentrelay.domains.attribution.services import AttributionService
from intentrelay.models.deeplink_models import HealthResponse, StatsResponse
from intentrelay.shared.constants.attribution import OUTCOME_ERROR, OUTCOME_SUCCESS
from intentrelay.shared.helpers import now_utc, utc_day

logger = get_logger(__name__)
router = APIRouter(tags=["health"])


def _unhealthy(error: str) -> JSONResponse:
    body = HealthResponse(status="unhealthy", timestamp=now_utc().isoformat(), error=error)
    return JSONResponse(status_code=503, content=body.model_dump(exclude_none=True))


@router.get("/health", response_model=HealthResponse, response_model_exclude_none=True)
async def health_check(service: AttributionService = Depends(get_attribution_service)):
    """Verify the intent store with a write/read/delete round trip"""
    try:
        await asyncio.wait_for(service.store.ping(), timeout=settings.HEALTH_CHECK_TIMEOUT)
    except asyncio.TimeoutError:
        logger.error("Health check timed out", timeout=settings.HEALTH_CHECK_TIMEOUT)
        return _unhealthy("Health check timed out")
    except IntentStoreError as e:
        logger.error("Health check failed", error=e.message)
        return _unhealthy(e.message)

    return HealthResponse(
        status="healthy", timestamp=now_utc().isoformat(), redis="connected"
    )


@router.get("/api/stats", response_model=StatsResponse)
async def get_stats(service: AttributionService = Depends(get_attribution_service)):
    """Pending intent records and today's resolution counters"""
    day = utc_day()
    pending = await service.store.count_pending()
    counts = await service.stats.get_counts(day) if service.stats else {}

    return StatsResponse(
        active_pending_links=pending,
        success=counts.get(OUTCOME_SUCCESS, 0),
        error=counts.get(OUTCOME_ERROR, 0),
        date=day,
        timestamp=now_utc().isoformat(),
    )
