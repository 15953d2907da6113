import logging

from fastapi import APIRouter, Depends, HTTPException, Request

from core.rate_limiter import limiter, RateLimits
from core.workspace import get_workspace
from src.trace_bc.query.workspace import TraceWorkspace
from src.trace_bc.shared.domain.errors import ConfigError
from adapters.http.api.raptor.schemas import (
    TextUploadRequest,
    StopsUploadRequest,
    ParseWarningResponse,
    PointResponse,
    PointsResponse,
    StopsLoadResponse,
    TraceLoadResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/raptor", tags=["RAPTOR trace"])


def _warnings(warnings) -> list[ParseWarningResponse]:
    return [ParseWarningResponse.model_validate(w) for w in warnings]


def points_response(workspace: TraceWorkspace) -> PointsResponse:
    points = workspace.points
    return PointsResponse(
        has_data=bool(points),
        count=len(points),
        points=[PointResponse.model_validate(p) for p in points],
        warnings=_warnings(workspace.point_warnings),
    )


@router.post("/points", response_model=PointsResponse)
@limiter.limit(RateLimits.UPLOAD)
def load_points(
    request: Request,
    upload: TextUploadRequest,
    workspace: TraceWorkspace = Depends(get_workspace),
):
    """Parse a `lon,lat,text` CSV and replace the current points.

    An empty `points` list with `has_data=false` means no line was usable;
    it is not an error.
    """
    workspace.load_points(upload.content)
    return points_response(workspace)


@router.put("/stops", response_model=StopsLoadResponse)
@limiter.limit(RateLimits.UPLOAD)
def load_stops(
    request: Request,
    upload: StopsUploadRequest,
    workspace: TraceWorkspace = Depends(get_workspace),
):
    """Build the stops table and replace the current one.

    Returns 400 when the header cannot establish the table columns
    (empty or duplicate names, unknown identifier column). The previously
    loaded table stays in place in that case.
    """
    try:
        store = workspace.load_stops(upload.content, id_column=upload.id_column)
    except ConfigError as e:
        logger.warning(f"Rejected stops table {upload.filename or ''}: {e}")
        raise HTTPException(status_code=400, detail=str(e))

    return StopsLoadResponse(
        row_count=store.row_count(),
        columns=store.column_names,
        id_column=store.id_column,
        skipped_rows=store.skipped_rows,
        warnings=_warnings(store.warnings),
    )


@router.put("/trace", response_model=TraceLoadResponse)
@limiter.limit(RateLimits.UPLOAD)
def load_trace(
    request: Request,
    upload: TextUploadRequest,
    workspace: TraceWorkspace = Depends(get_workspace),
):
    """Parse a RAPTOR trace and replace the current one."""
    trace = workspace.load_trace(upload.content)
    return TraceLoadResponse(
        rounds_number=trace.rounds_number(),
        entries_per_round=trace.entry_counts(),
        warnings=_warnings(trace.warnings),
    )
