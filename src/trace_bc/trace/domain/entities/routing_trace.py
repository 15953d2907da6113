from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple

from src.trace_bc.shared.domain.errors import ParseWarning


class EntryKind(str, Enum):
    """How a stop was reached within a round."""
    MARKED = "marked"  # initially marked stop (round 0)
    ROUTE = "route"  # explored along a route
    TRANSFER = "transfer"  # reached by footpath from a marked stop
    EXPLICIT = "explicit"  # `stop,<id>,<label>` line


@dataclass(frozen=True)
class ReachabilityEntry:
    """A stop reached in a given round, with its arrival label."""
    stop_id: str
    label: str
    kind: EntryKind = EntryKind.EXPLICIT
    source_id: str = ""  # route id or marked stop id the entry came from


@dataclass
class TraceRound:
    """One expansion round: entries in first-seen order, unique by stop."""
    index: int
    entries: List[ReachabilityEntry] = field(default_factory=list)
    _seen: Dict[str, int] = field(default_factory=dict, repr=False)

    def add(self, entry: ReachabilityEntry) -> bool:
        """Add entry unless its stop is already in the round. First seen wins."""
        if entry.stop_id in self._seen:
            return False
        self._seen[entry.stop_id] = len(self.entries)
        self.entries.append(entry)
        return True

    def __contains__(self, stop_id: str) -> bool:
        return stop_id in self._seen

    def __len__(self) -> int:
        return len(self.entries)


class RoutingTrace:
    """Round-indexed reachability record set rebuilt from one trace file.

    Round indices are dense: rounds_number() is one past the highest round
    parsed and every index below it maps to a (possibly empty) round.
    """

    def __init__(self, rounds: List[TraceRound], warnings: Optional[List[ParseWarning]] = None):
        for position, trace_round in enumerate(rounds):
            if trace_round.index != position:
                raise ValueError(
                    f"Round at position {position} has index {trace_round.index}"
                )
        self._rounds: Tuple[Tuple[ReachabilityEntry, ...], ...] = tuple(
            tuple(r.entries) for r in rounds
        )
        self._warnings = list(warnings or [])

    def rounds_number(self) -> int:
        return len(self._rounds)

    def has_round(self, round_index: int) -> bool:
        return 0 <= round_index < len(self._rounds)

    def entries(self, round_index: int) -> Tuple[ReachabilityEntry, ...]:
        """Entries of a round in parse order; empty when out of range."""
        if not self.has_round(round_index):
            return ()
        return self._rounds[round_index]

    def stop_ids(self, round_index: int) -> List[str]:
        return [entry.stop_id for entry in self.entries(round_index)]

    def entry_counts(self) -> List[int]:
        return [len(entries) for entries in self._rounds]

    @property
    def warnings(self) -> List[ParseWarning]:
        return list(self._warnings)

    def __len__(self) -> int:
        return len(self._rounds)
