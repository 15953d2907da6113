"""Parser for the textual RAPTOR trace.

The routing tool dumps one section per round:

    round,0,
    1,2,3,
    round,1,
    route,43,
    route,42,1,2,3,4,
    round,2,
    marked_stop,42,
    marked_stop,43,45,89,78,

Line kinds:
- `round,<n>` or `round <n>`       section header, n = last integer token
- `route,<route_id>,<stops...>`   stops explored along a route
- `marked_stop,<from>,<stops...>` stops reached by transfer from `from`
- `stop,<stop_id>[,<label>]`      explicit entry with a free-text label
- anything else                   bare list of marked stop ids

Malformed lines are skipped and recorded as ParseWarning. A decreasing
round index truncates the trace at that point.
"""

import logging
from typing import List, Optional

from src.trace_bc.shared.domain.errors import ParseWarning
from src.trace_bc.trace.domain.entities.routing_trace import (
    EntryKind,
    ReachabilityEntry,
    RoutingTrace,
    TraceRound,
)

logger = logging.getLogger(__name__)

ROUND_KEYWORD = "round"
ROUTE_KEYWORD = "route"
TRANSFER_KEYWORD = "marked_stop"
STOP_KEYWORD = "stop"

MARKED_LABEL = "marked"
DEFAULT_STOP_LABEL = "reached"

# Round counters of the routing tool are 8-bit
MAX_ROUND_INDEX = 255


def split_fields(line: str) -> List[str]:
    """Comma-split a line, dropping empty fields (trailing commas)."""
    return [f.strip() for f in line.split(",") if f.strip()]


def is_round_header(fields: List[str]) -> bool:
    """True for `round,<n>` and `round <n>` lines."""
    tokens = fields[0].lower().split()
    return bool(tokens) and tokens[0] == ROUND_KEYWORD


def parse_round_index(fields: List[str]) -> Optional[int]:
    """Last token after the keyword that parses as a non-negative integer, or None."""
    tokens = fields[0].split()[1:]
    for field in fields[1:]:
        tokens.extend(field.split())
    index = None
    for value in tokens:
        if value.isascii() and value.isdigit():
            index = int(value)
    return index


class TraceParser:
    """Builds a RoutingTrace from trace text. One instance per parse."""

    def __init__(self):
        self.rounds: List[TraceRound] = []
        self.warnings: List[ParseWarning] = []
        self.truncated = False
        self._duplicates = 0

    @property
    def current(self) -> Optional[TraceRound]:
        return self.rounds[-1] if self.rounds else None

    def parse(self, text: str) -> RoutingTrace:
        for line_number, raw_line in enumerate(text.splitlines(), start=1):
            line = raw_line.strip()
            if not line:
                continue

            fields = split_fields(line)
            if not fields:
                self._warn(line_number, line, "no fields")
                continue

            keyword = fields[0].lower()
            if is_round_header(fields):
                if not self._open_round(line_number, line, fields):
                    self.truncated = True
                    break
                continue

            if self.current is None:
                self._warn(line_number, line, "entry before any round header")
                continue

            if keyword == ROUTE_KEYWORD:
                self._add_expansion(line_number, line, fields, EntryKind.ROUTE, "route {}")
            elif keyword == TRANSFER_KEYWORD:
                self._add_expansion(line_number, line, fields, EntryKind.TRANSFER, "transfer from {}")
            elif keyword == STOP_KEYWORD:
                self._add_explicit(line_number, line)
            else:
                for stop_id in fields:
                    self._add(ReachabilityEntry(stop_id, MARKED_LABEL, EntryKind.MARKED))

        trace = RoutingTrace(self.rounds, self.warnings)
        logger.info(
            f"Trace parsed: {trace.rounds_number()} rounds, "
            f"{sum(trace.entry_counts())} entries, {self._duplicates} duplicates ignored, "
            f"{len(self.warnings)} warnings"
        )
        return trace

    def _open_round(self, line_number: int, line: str, fields: List[str]) -> bool:
        """Start (or continue) the round named by a header. False means stop parsing."""
        index = parse_round_index(fields)
        if index is None:
            self._warn(line_number, line, "round header without a round index")
            return True

        if index > MAX_ROUND_INDEX:
            reason = f"round index {index} above {MAX_ROUND_INDEX}, header skipped"
            logger.warning(f"Line {line_number}: {reason}")
            self.warnings.append(ParseWarning(line_number, line, reason))
            return True

        current = self.current
        if current is not None and index < current.index:
            reason = f"round index decreased from {current.index} to {index}, trace truncated"
            logger.warning(f"Line {line_number}: {reason}")
            self.warnings.append(ParseWarning(line_number, line, reason))
            return False

        if current is not None and index == current.index:
            return True

        expected = current.index + 1 if current is not None else 0
        if index > expected:
            reason = f"rounds {expected}..{index - 1} missing, kept as empty rounds"
            logger.warning(f"Line {line_number}: {reason}")
            self.warnings.append(ParseWarning(line_number, line, reason))

        for missing in range(expected, index + 1):
            self.rounds.append(TraceRound(missing))
        return True

    def _add_expansion(self, line_number: int, line: str, fields: List[str],
                       kind: EntryKind, label_format: str) -> None:
        if len(fields) < 2:
            self._warn(line_number, line, f"'{fields[0]}' line without its identifier")
            return
        source_id = fields[1]
        label = label_format.format(source_id)
        for stop_id in fields[2:]:
            self._add(ReachabilityEntry(stop_id, label, kind, source_id))

    def _add_explicit(self, line_number: int, line: str) -> None:
        parts = line.split(",", 2)
        if len(parts) < 2 or not parts[1].strip():
            self._warn(line_number, line, "'stop' line without a stop id")
            return
        label = parts[2].strip().rstrip(",").strip() if len(parts) > 2 else ""
        self._add(ReachabilityEntry(parts[1].strip(), label or DEFAULT_STOP_LABEL))

    def _add(self, entry: ReachabilityEntry) -> None:
        if not self.current.add(entry):
            self._duplicates += 1

    def _warn(self, line_number: int, line: str, reason: str) -> None:
        logger.debug(f"Skipping trace line {line_number} ({reason}): {line}")
        self.warnings.append(ParseWarning(line_number, line, reason))


def parse_trace(text: str) -> RoutingTrace:
    """Parse trace text into a dense, round-indexed RoutingTrace."""
    return TraceParser().parse(text)
