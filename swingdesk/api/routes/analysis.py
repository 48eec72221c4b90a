"""On-demand stock analysis routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Path, Query

from swingdesk.api.dependencies import get_analysis_service
from swingdesk.schemas.analysis import AnalysisRecord, AnalyzeRequest
from swingdesk.services.analysis import AnalysisService


router = APIRouter()


@router.post(
    "",
    response_model=AnalysisRecord,
    summary="Analyze a stock",
    description="Return a cached analysis younger than the TTL, or compute a fresh one.",
)
async def analyze_stock(
    request: AnalyzeRequest,
    service: AnalysisService = Depends(get_analysis_service),
) -> AnalysisRecord:
    return await service.analyze(request.symbol, force_refresh=request.force_refresh)


@router.get(
    "/{symbol}",
    response_model=AnalysisRecord,
    summary="Get stock analysis",
)
async def get_stock_analysis(
    symbol: str = Path(..., min_length=1, max_length=20),
    refresh: bool = Query(False, description="Ignore a fresh cached analysis"),
    service: AnalysisService = Depends(get_analysis_service),
) -> AnalysisRecord:
    """Same as POST /analysis with the symbol in the path."""
    return await service.analyze(symbol, force_refresh=refresh)
