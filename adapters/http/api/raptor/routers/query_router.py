from fastapi import APIRouter, Depends, Request

from core.rate_limiter import limiter, RateLimits
from core.workspace import get_workspace
from src.trace_bc.query.workspace import TraceWorkspace
from adapters.http.api.raptor.routers.import_router import points_response
from adapters.http.api.raptor.schemas import (
    PointsResponse,
    ReachabilityDetailResponse,
    LookupGapResponse,
    RoundDetailsResponse,
    RoundsSummaryResponse,
)

router = APIRouter(prefix="/raptor", tags=["RAPTOR trace"])


@router.get("/points", response_model=PointsResponse)
@limiter.limit(RateLimits.SUMMARY)
def get_points(request: Request, workspace: TraceWorkspace = Depends(get_workspace)):
    """Currently loaded map-drop points."""
    return points_response(workspace)


@router.get("/rounds", response_model=RoundsSummaryResponse)
@limiter.limit(RateLimits.SUMMARY)
def get_rounds_summary(request: Request, workspace: TraceWorkspace = Depends(get_workspace)):
    """Number of rounds and stops, used to size the round slider (0..rounds_number-1)."""
    return RoundsSummaryResponse(**workspace.summary())


@router.get("/rounds/{round_index}", response_model=RoundDetailsResponse)
@limiter.limit(RateLimits.ROUND_QUERY)
def get_round_details(
    request: Request,
    round_index: int,
    workspace: TraceWorkspace = Depends(get_workspace),
):
    """Stops reached in one round, with coordinates and arrival labels.

    Never fails for a slider position: out-of-range rounds, or a workspace
    without both stops and trace loaded, return an empty list. Stops that
    could not be located are listed in `gaps`.

    **Example:**
    ```
    GET /api/v1/raptor/rounds/2
    ```
    """
    result = workspace.round_details(round_index)
    return RoundDetailsResponse(
        round_index=round_index,
        ready=workspace.is_ready,
        count=len(result.details),
        details=[ReachabilityDetailResponse.model_validate(d) for d in result.details],
        gaps=[LookupGapResponse.model_validate(g) for g in result.diagnostics.gaps],
    )
