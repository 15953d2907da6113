"""Error and diagnostic types shared by the trace parsers and query engine.

Only ConfigError is ever raised. ParseWarning and LookupGap are collected
and returned so a caller can surface data-quality issues without aborting.
"""

from dataclasses import dataclass
from typing import Optional


class ConfigError(ValueError):
    """Structural problem that prevents building a store or parser."""


@dataclass(frozen=True)
class ParseWarning:
    """A line skipped (or partially used) while parsing."""
    line_number: int  # 1-based
    line: str
    reason: str

    def __str__(self) -> str:
        return f"line {self.line_number}: {self.reason} ({self.line!r})"


@dataclass(frozen=True)
class LookupGap:
    """A trace entry whose stop could not be joined against the stops table."""
    stop_id: str
    reason: str
    round_index: Optional[int] = None
