"""TraceWorkspace - the currently loaded points, stops table and trace.

Each load builds a new immutable object and swaps the reference under a
lock; nothing is merged into the previous data. While a load is parsing,
readers keep seeing the previous objects.
"""

import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from src.trace_bc.point.domain.entities.point_record import PointRecord
from src.trace_bc.point.infrastructure.services.csv_point_parser import PointParser
from src.trace_bc.query.round_query import (
    QueryDiagnostics,
    ReachabilityDetail,
    RoundQueryEngine,
    StopColumns,
)
from src.trace_bc.shared.domain.errors import ParseWarning
from src.trace_bc.stop_table.tabular_store import TabularStore
from src.trace_bc.trace.domain.entities.routing_trace import RoutingTrace
from src.trace_bc.trace.infrastructure.services.trace_parser import parse_trace

logger = logging.getLogger(__name__)


@dataclass
class RoundResult:
    """Details of one round plus the stops that could not be located."""
    round_index: int
    details: List[ReachabilityDetail] = field(default_factory=list)
    diagnostics: QueryDiagnostics = field(default_factory=QueryDiagnostics)


class TraceWorkspace:
    """Holds the most recently loaded inputs of one viewer session."""

    def __init__(
        self,
        id_column: Optional[str] = None,
        delimiter: Optional[str] = None,
        columns: Optional[StopColumns] = None,
        label_transform: Any = None,
    ):
        self.id_column = id_column or None
        self.delimiter = delimiter or None
        self.columns = columns or StopColumns()
        self.label_transform = label_transform

        self.points: List[PointRecord] = []
        self.point_warnings: List[ParseWarning] = []
        self.stops: Optional[TabularStore] = None
        self.trace: Optional[RoutingTrace] = None
        self._engine: Optional[RoundQueryEngine] = None
        self._lock = threading.Lock()

    @classmethod
    def from_settings(cls, settings) -> "TraceWorkspace":
        return cls(
            id_column=settings.STOPS_ID_COLUMN,
            delimiter=settings.STOPS_DELIMITER,
            columns=StopColumns(
                longitude=settings.STOPS_LON_COLUMNS,
                latitude=settings.STOPS_LAT_COLUMNS,
                name=settings.STOPS_NAME_COLUMNS,
            ),
            label_transform=settings.POINT_LABEL_TRANSFORM,
        )

    @property
    def is_ready(self) -> bool:
        return self.stops is not None and self.trace is not None

    def load_points(self, text: str) -> List[PointRecord]:
        parser = PointParser(self.label_transform)
        points = parser.parse(text)
        with self._lock:
            self.points = points
            self.point_warnings = parser.warnings
        return points

    def load_stops(self, text: str, id_column: Optional[str] = None) -> TabularStore:
        """Build and install a new stops table. ConfigError leaves the old one in place."""
        start = time.time()
        store = TabularStore.build(text, id_column=id_column or self.id_column, delimiter=self.delimiter)
        engine = RoundQueryEngine(store, self.columns)
        if not engine.locatable:
            logger.warning(
                f"Stops table has no longitude/latitude column "
                f"(columns: {', '.join(store.column_names)}); no stop can be located"
            )
        with self._lock:
            self.stops = store
            self._engine = engine
        logger.info(f"Stops table installed in {time.time() - start:.3f}s")
        return store

    def load_trace(self, text: str) -> RoutingTrace:
        start = time.time()
        trace = parse_trace(text)
        with self._lock:
            self.trace = trace
        logger.info(f"Trace installed in {time.time() - start:.3f}s")
        return trace

    def round_details(self, round_index: int) -> RoundResult:
        """Details of a round; empty until both stops and trace are loaded."""
        with self._lock:
            engine, trace = self._engine, self.trace

        result = RoundResult(round_index)
        if engine is None or trace is None:
            return result
        result.details = engine.details_of_round(trace, round_index, result.diagnostics)
        return result

    def summary(self) -> Dict[str, Any]:
        with self._lock:
            stops, trace = self.stops, self.trace
        return {
            "ready": stops is not None and trace is not None,
            "row_count": stops.row_count() if stops is not None else 0,
            "rounds_number": trace.rounds_number() if trace is not None else 0,
            "points": len(self.points),
        }
