"""Request/response schemas for loading input files."""

from typing import List, Optional
from pydantic import BaseModel, Field


class TextUploadRequest(BaseModel):
    """Whole file content, read by the client (drag-and-drop or file picker)."""
    content: str = Field(..., description="Raw text of the file")
    filename: Optional[str] = None


class StopsUploadRequest(TextUploadRequest):
    id_column: Optional[str] = Field(
        None, description="Identifier column; defaults to the configured one or the first column"
    )


class ParseWarningResponse(BaseModel):
    line_number: int
    line: str
    reason: str

    class Config:
        from_attributes = True


class StopsLoadResponse(BaseModel):
    row_count: int
    columns: List[str]
    id_column: str
    skipped_rows: int
    warnings: List[ParseWarningResponse]


class TraceLoadResponse(BaseModel):
    rounds_number: int
    entries_per_round: List[int]
    warnings: List[ParseWarningResponse]
