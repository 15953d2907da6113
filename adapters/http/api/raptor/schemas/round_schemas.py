"""Round query response schemas."""

from typing import List, Optional
from pydantic import BaseModel


class ReachabilityDetailResponse(BaseModel):
    longitude: float
    latitude: float
    label: str
    stop_id: str
    stop_name: str

    class Config:
        from_attributes = True


class LookupGapResponse(BaseModel):
    stop_id: str
    reason: str
    round_index: Optional[int] = None

    class Config:
        from_attributes = True


class RoundDetailsResponse(BaseModel):
    round_index: int
    ready: bool
    count: int
    details: List[ReachabilityDetailResponse]
    gaps: List[LookupGapResponse]


class RoundsSummaryResponse(BaseModel):
    """Sizes used by the client to configure its round slider."""
    ready: bool
    rounds_number: int
    row_count: int
    points: int
