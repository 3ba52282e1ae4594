"""
Install-time deferred deep-link resolution
"""

from typing import Optional

from fastapi import APIRouter, Body, Depends, Request

from intentrelay.core.dependencies import get_attribution_service
from intentrelay.domains.attribution.services import AttributionService
from intentrelay.domains.presentation import extract_ip_address
from intentrelay.models.deeplink_models import (
    DeferredDeepLinkRequest,
    DeferredDeepLinkResponse,
)

router = APIRouter(prefix="/api", tags=["deferred-deeplink"])


@router.post(
    "/deferred-deeplink",
    response_model=DeferredDeepLinkResponse,
    response_model_exclude_none=True,
)
async def resolve_deferred_deeplink(
    http_request: Request,
    request: Optional[DeferredDeepLinkRequest] = Body(None),
    service: AttributionService = Depends(get_attribution_service),
):
    """
    Return the link the device clicked before installing the app.

    A missing body or deviceInfo is rejected with 400; negative outcomes are 200
    responses with found=false and a reason.
    """
    signals = None
    if request is not None and request.device_info is not None:
        signals = request.device_info.to_signals(
            fallback_ip=extract_ip_address(http_request)
        )

    app_info = request.app_info if request is not None else None
    result = await service.resolve_query(signals, app_info)
    return DeferredDeepLinkResponse.from_result(result)
