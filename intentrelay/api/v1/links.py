"""
Link click endpoints
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from intentrelay.core.dependencies import get_attribution_service
from intentrelay.domains.attribution.services import AttributionService
from intentrelay.domains.presentation import render_interstitial, signals_from_request

router = APIRouter(tags=["links"])


async def _handle_click(
    request: Request,
    service: AttributionService,
    link_id: Optional[str],
    content: Optional[str],
    campaign: Optional[str],
    source: Optional[str],
):
    click = signals_from_request(request)

    outcome = await service.record_click(
        link_id=link_id,
        content=content,
        campaign=campaign,
        source=source,
        signals=click.signals,
        is_mobile=click.is_mobile,
    )

    if not outcome.mobile:
        return RedirectResponse(outcome.redirect_target, status_code=302)

    record = outcome.record
    page = render_interstitial(
        service.links,
        content=record.content,
        campaign=record.campaign,
        source=record.source,
        is_ios=click.is_ios,
    )
    return HTMLResponse(page)


@router.get("/link/{link_id}")
async def follow_link(
    request: Request,
    link_id: str,
    content: Optional[str] = Query(None, description="Content identifier to open"),
    campaign: Optional[str] = Query(None, description="Campaign name"),
    source: Optional[str] = Query(None, description="Traffic source"),
    service: AttributionService = Depends(get_attribution_service),
):
    """Record a click and send the visitor to the app, the store or the website"""
    return await _handle_click(request, service, link_id, content, campaign, source)


@router.get("/api/link")
async def follow_link_query(
    request: Request,
    link_id: Optional[str] = Query(None, alias="linkId"),
    content: Optional[str] = Query(None),
    campaign: Optional[str] = Query(None),
    source: Optional[str] = Query(None),
    service: AttributionService = Depends(get_attribution_service),
):
    """Same as /link/{link_id} with the link id passed as a query parameter"""
    return await _handle_click(request, service, link_id, content, campaign, source)
