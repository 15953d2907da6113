"""Round Query Engine - joins a RoutingTrace against the stops table.

All heavy work (parsing, typing, identifier index) happens when the
store and trace are built. A query only walks the entries of one round
and does O(1) index lookups, so it can run on every position change of
an interactive round selector.
"""

import logging
import math
from dataclasses import dataclass, asdict, field
from typing import Iterable, List, Optional, Sequence, Tuple

from src.trace_bc.shared.domain.errors import LookupGap
from src.trace_bc.stop_table.tabular_store import TabularStore
from src.trace_bc.trace.domain.entities.routing_trace import RoutingTrace

logger = logging.getLogger(__name__)

# Column names tried in order; the first present in the table is used.
# StopLng/StopLat/Stopname is the layout written by the routing tooling.
DEFAULT_LON_COLUMNS = ("StopLng", "lon", "stop_lon", "longitude", "lng")
DEFAULT_LAT_COLUMNS = ("StopLat", "lat", "stop_lat", "latitude")
DEFAULT_NAME_COLUMNS = ("Stopname", "name", "stop_name")


@dataclass(frozen=True)
class ReachabilityDetail:
    """A reached stop located on the map."""
    longitude: float
    latitude: float
    label: str
    stop_id: str = ""
    stop_name: str = ""

    def to_tuple(self) -> Tuple[float, float, str]:
        """Return as (lon, lat, label) triple."""
        return (self.longitude, self.latitude, self.label)

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class QueryDiagnostics:
    """Collects lookup gaps across one or more queries."""
    gaps: List[LookupGap] = field(default_factory=list)

    def add(self, gap: LookupGap) -> None:
        self.gaps.append(gap)

    @property
    def gap_count(self) -> int:
        return len(self.gaps)

    def missing_stop_ids(self) -> List[str]:
        return [gap.stop_id for gap in self.gaps]


@dataclass(frozen=True)
class StopColumns:
    """Candidate column names for coordinates and stop name."""
    longitude: Sequence[str] = DEFAULT_LON_COLUMNS
    latitude: Sequence[str] = DEFAULT_LAT_COLUMNS
    name: Sequence[str] = DEFAULT_NAME_COLUMNS

    def resolve(self, store: TabularStore) -> Tuple[Optional[str], Optional[str], Optional[str]]:
        return (
            _first_present(store, self.longitude),
            _first_present(store, self.latitude),
            _first_present(store, self.name),
        )


def _first_present(store: TabularStore, candidates: Iterable[str]) -> Optional[str]:
    for name in candidates:
        if store.has_column(name):
            return name
    return None


def _as_coordinate(value) -> Optional[float]:
    if isinstance(value, str):
        try:
            value = float(value)
        except ValueError:
            return None
    number = float(value)
    return number if math.isfinite(number) else None


class RoundQueryEngine:
    """Resolves stop ids to ReachabilityDetails against one stops table."""

    def __init__(self, store: TabularStore, columns: Optional[StopColumns] = None):
        self.store = store
        self.lon_column, self.lat_column, self.name_column = (columns or StopColumns()).resolve(store)
        if not self.locatable:
            logger.debug(
                f"Stops table has no longitude/latitude column "
                f"(columns: {', '.join(store.column_names)}); no stop can be located"
            )

    @property
    def locatable(self) -> bool:
        return self.lon_column is not None and self.lat_column is not None

    def coords_of_stop(self, stop_id: str) -> Optional[Tuple[float, float]]:
        """(lon, lat) of a stop, or None when unknown or not numeric."""
        if not self.locatable:
            return None
        offset = self.store.row_offset(stop_id)
        if offset is None:
            return None
        lon = _as_coordinate(self.store.cell(offset, self.lon_column))
        lat = _as_coordinate(self.store.cell(offset, self.lat_column))
        if lon is None or lat is None:
            return None
        return lon, lat

    def detail(self, stop_id: str, label: str,
               diagnostics: Optional[QueryDiagnostics] = None,
               round_index: Optional[int] = None) -> Optional[ReachabilityDetail]:
        offset = self.store.row_offset(stop_id)
        if offset is None:
            self._gap(diagnostics, stop_id, "stop id not in stops table", round_index)
            return None

        coords = self.coords_of_stop(stop_id)
        if coords is None:
            self._gap(diagnostics, stop_id, "stop has no numeric coordinates", round_index)
            return None

        name = ""
        if self.name_column is not None:
            name = str(self.store.cell(offset, self.name_column))
        return ReachabilityDetail(
            longitude=coords[0],
            latitude=coords[1],
            label=label,
            stop_id=stop_id,
            stop_name=name,
        )

    def details_of_stops(self, stop_ids: Iterable[str],
                         diagnostics: Optional[QueryDiagnostics] = None) -> List[ReachabilityDetail]:
        """Details for stop ids in the given order, labelled with the stop name."""
        details = []
        for stop_id in stop_ids:
            offset = self.store.row_offset(stop_id)
            label = str(self.store.cell(offset, self.name_column)) if (
                offset is not None and self.name_column is not None
            ) else str(stop_id)
            detail = self.detail(str(stop_id), label, diagnostics)
            if detail is not None:
                details.append(detail)
        return details

    def details_of_round(self, trace: RoutingTrace, round_index: int,
                         diagnostics: Optional[QueryDiagnostics] = None) -> List[ReachabilityDetail]:
        """Reachable stops of one round, in entry order.

        Out-of-range rounds give an empty list. Entries whose stop cannot
        be located are dropped and reported to `diagnostics`.
        """
        if not trace.has_round(round_index):
            return []

        details = []
        for entry in trace.entries(round_index):
            detail = self.detail(entry.stop_id, entry.label, diagnostics, round_index)
            if detail is not None:
                details.append(detail)
        return details

    @staticmethod
    def _gap(diagnostics: Optional[QueryDiagnostics], stop_id: str, reason: str,
             round_index: Optional[int]) -> None:
        logger.debug(f"Dropping stop {stop_id} (round {round_index}): {reason}")
        if diagnostics is not None:
            diagnostics.add(LookupGap(stop_id=stop_id, reason=reason, round_index=round_index))


def details_of_round(store: TabularStore, trace: RoutingTrace, round_index: int,
                     diagnostics: Optional[QueryDiagnostics] = None,
                     columns: Optional[StopColumns] = None) -> List[ReachabilityDetail]:
    """Reachability details of `round_index`; [] when the round does not exist."""
    return RoundQueryEngine(store, columns).details_of_round(trace, round_index, diagnostics)


def details_of_stops(store: TabularStore, stop_ids: Iterable[str],
                     diagnostics: Optional[QueryDiagnostics] = None,
                     columns: Optional[StopColumns] = None) -> List[ReachabilityDetail]:
    return RoundQueryEngine(store, columns).details_of_stops(stop_ids, diagnostics)


def coords_of_stop(store: TabularStore, stop_id: str,
                   columns: Optional[StopColumns] = None) -> Optional[Tuple[float, float]]:
    return RoundQueryEngine(store, columns).coords_of_stop(stop_id)
