"""API request/response schemas."""

from .analysis import (
    AnalysisRecord,
    AnalyzeRequest,
    ChartBar,
    MorningScanResponse,
    PositionSizing,
    ScanRecommendation,
    SupportResistanceView,
    TechnicalsView,
)
from .common import ErrorResponse, HealthResponse


__all__ = [
    "AnalysisRecord",
    "AnalyzeRequest",
    "ChartBar",
    "ErrorResponse",
    "HealthResponse",
    "MorningScanResponse",
    "PositionSizing",
    "ScanRecommendation",
    "SupportResistanceView",
    "TechnicalsView",
]
