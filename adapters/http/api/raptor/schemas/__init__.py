"""Centralized API schemas for the RAPTOR trace viewer endpoints."""

from .upload_schemas import (
    TextUploadRequest,
    StopsUploadRequest,
    ParseWarningResponse,
    StopsLoadResponse,
    TraceLoadResponse,
)

from .point_schemas import (
    PointResponse,
    PointsResponse,
)

from .round_schemas import (
    ReachabilityDetailResponse,
    LookupGapResponse,
    RoundDetailsResponse,
    RoundsSummaryResponse,
)

__all__ = [
    "TextUploadRequest",
    "StopsUploadRequest",
    "ParseWarningResponse",
    "StopsLoadResponse",
    "TraceLoadResponse",
    "PointResponse",
    "PointsResponse",
    "ReachabilityDetailResponse",
    "LookupGapResponse",
    "RoundDetailsResponse",
    "RoundsSummaryResponse",
]
