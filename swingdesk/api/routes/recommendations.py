"""Morning scan recommendations."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from swingdesk.api.dependencies import get_morning_scan_service
from swingdesk.schemas.analysis import MorningScanResponse
from swingdesk.services.morning_scan import MorningScanService


router = APIRouter()


@router.get(
    "/morning",
    response_model=MorningScanResponse,
    summary="Morning scan",
    description="Top watchlist picks by confidence. Reuses today's scan unless refresh=true.",
)
async def morning_recommendations(
    refresh: bool = Query(False, description="Re-run the scan even if today's result exists"),
    service: MorningScanService = Depends(get_morning_scan_service),
) -> MorningScanResponse:
    return await service.run(force_refresh=refresh)
