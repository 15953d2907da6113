"""Round queries over a parsed RAPTOR trace.

Available entry points:
- details_of_round: reachable stops of one round, located on the map
- RoundQueryEngine: same queries bound to one stops table
- TraceWorkspace: currently loaded points, stops table and trace
"""

from .round_query import (
    ReachabilityDetail,
    QueryDiagnostics,
    StopColumns,
    RoundQueryEngine,
    details_of_round,
    details_of_stops,
    coords_of_stop,
)
from .workspace import TraceWorkspace, RoundResult

__all__ = [
    "ReachabilityDetail", "QueryDiagnostics", "StopColumns", "RoundQueryEngine",
    "details_of_round", "details_of_stops", "coords_of_stop",
    "TraceWorkspace", "RoundResult",
]
