"""Point-related response schemas."""

from typing import List
from pydantic import BaseModel

from .upload_schemas import ParseWarningResponse


class PointResponse(BaseModel):
    longitude: float
    latitude: float
    label: str

    class Config:
        from_attributes = True


class PointsResponse(BaseModel):
    """Parsed points. `has_data` is False when no line was usable."""
    has_data: bool
    count: int
    points: List[PointResponse]
    warnings: List[ParseWarningResponse] = []
