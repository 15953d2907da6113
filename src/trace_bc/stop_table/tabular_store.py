"""TabularStore - in-memory stops table built from delimited text.

The stops table comes out of the routing tooling as `;`-separated text
with a header row (StopOffset;StopLng;StopLat;Stopname), but hand-made
tables with commas work too: the delimiter is detected from the header
unless given explicitly.

Structures built once in build():
- columns: {column_name: [cell, cell, ...]} with cells typed per column
- index:   {identifier: row_offset} over the raw identifier column
- aliases: {canonical integer id: row_offset}, used only when the raw
  identifier does not match

The store is read-only after build; every accessor returns fresh
containers so callers can never mutate its internals.
"""

import csv
import io
import logging
import math
import re
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

from src.trace_bc.shared.domain.errors import ConfigError, ParseWarning

logger = logging.getLogger(__name__)

CANDIDATE_DELIMITERS = (";", ",", "\t")

_INT_RE = re.compile(r"^[+-]?\d+$")

Cell = Any  # int | float | str


def detect_delimiter(header_line: str) -> str:
    """Pick the candidate delimiter occurring most often in the header."""
    counts = [(header_line.count(d), d) for d in CANDIDATE_DELIMITERS]
    best_count, best = max(counts, key=lambda c: c[0])
    # ';' is the tooling default, also used for single-column tables
    return best if best_count > 0 else ";"


def infer_column_type(values: Sequence[str]) -> type:
    """int if every non-empty cell is an integer, else float, else str."""
    non_empty = [v for v in values if v != ""]
    if not non_empty:
        return str
    if all(_INT_RE.match(v) for v in non_empty):
        return int
    try:
        if all(math.isfinite(float(v)) and "_" not in v for v in non_empty):
            return float
    except ValueError:
        pass
    return str


def normalize_identifier(value: str) -> str:
    """Canonical form of an integer identifier (`042` -> `42`), else unchanged."""
    if _INT_RE.match(value):
        return str(int(value))
    return value


def _convert(value: str, column_type: type) -> Cell:
    if value == "" or column_type is str:
        return value
    return column_type(value)


class TabularStore:
    """Immutable table with typed columns and O(1) lookup by identifier."""

    def __init__(
        self,
        column_names: List[str],
        columns: Dict[str, List[Cell]],
        column_types: Dict[str, type],
        id_column: str,
        index: Dict[str, int],
        warnings: List[ParseWarning],
        delimiter: str,
        skipped_rows: int = 0,
        aliases: Optional[Dict[str, int]] = None,
    ):
        self._column_names = column_names
        self._columns = columns
        self._column_types = column_types
        self._id_column = id_column
        self._index = index
        self._aliases = aliases or {}
        self._warnings = warnings
        self._skipped_rows = skipped_rows
        self._delimiter = delimiter
        self._row_count = len(columns[column_names[0]]) if column_names else 0

    @classmethod
    def build(
        cls,
        text: str,
        id_column: Optional[str] = None,
        delimiter: Optional[str] = None,
    ) -> "TabularStore":
        """Build a store from a header line followed by delimited rows.

        Args:
            text: Whole file content
            id_column: Column used for row(); defaults to the first column
            delimiter: Field separator; detected from the header when None

        Raises:
            ConfigError: if the header cannot establish unique, non-empty
                column names or id_column is not one of them
        """
        text = text.lstrip("\ufeff")
        lines = text.splitlines()
        header_pos = next((i for i, line in enumerate(lines) if line.strip()), None)
        if header_pos is None:
            raise ConfigError("Stops table is empty: no header line found")

        if not delimiter:
            delimiter = detect_delimiter(lines[header_pos])

        reader = csv.reader(io.StringIO("\n".join(lines[header_pos:])), delimiter=delimiter)
        header = [name.strip() for name in next(reader)]

        if any(not name for name in header):
            raise ConfigError(f"Stops table header has an empty column name: {lines[header_pos]!r}")
        duplicates = sorted({name for name in header if header.count(name) > 1})
        if duplicates:
            raise ConfigError(f"Duplicate column names in header: {', '.join(duplicates)}")

        if id_column is None:
            id_column = header[0]
        elif id_column not in header:
            raise ConfigError(
                f"Identifier column '{id_column}' not in header ({', '.join(header)})"
            )

        raw_rows: List[List[str]] = []
        row_lines: List[int] = []
        warnings: List[ParseWarning] = []
        skipped_rows = 0
        for fields in reader:
            line_number = header_pos + reader.line_num
            if not fields or all(not f.strip() for f in fields):
                continue
            if len(fields) != len(header):
                reason = f"expected {len(header)} fields, got {len(fields)}"
                line = delimiter.join(fields)
                logger.debug(f"Skipping stops row {line_number} ({reason})")
                warnings.append(ParseWarning(line_number, line, reason))
                skipped_rows += 1
                continue
            raw_rows.append([f.strip() for f in fields])
            row_lines.append(line_number)

        raw_columns = {name: [row[pos] for row in raw_rows] for pos, name in enumerate(header)}
        column_types = {name: infer_column_type(values) for name, values in raw_columns.items()}
        columns = {
            name: [_convert(v, column_types[name]) for v in values]
            for name, values in raw_columns.items()
        }

        index: Dict[str, int] = {}
        aliases: Dict[str, int] = {}
        for offset, raw_id in enumerate(raw_columns[id_column]):
            if raw_id in index:
                warnings.append(ParseWarning(
                    row_lines[offset],
                    delimiter.join(raw_rows[offset]),
                    f"duplicate identifier '{raw_id}', first row kept",
                ))
                continue
            index[raw_id] = offset
            alias = normalize_identifier(raw_id)
            if alias != raw_id:
                aliases.setdefault(alias, offset)

        store = cls(
            header, columns, column_types, id_column, index, warnings, delimiter,
            skipped_rows=skipped_rows,
            aliases=aliases,
        )
        logger.info(
            f"Stops table loaded: {store.row_count()} rows, {len(header)} columns "
            f"(id column '{id_column}', {skipped_rows} rows skipped)"
        )
        return store

    def row_count(self) -> int:
        return self._row_count

    @property
    def column_names(self) -> List[str]:
        return list(self._column_names)

    @property
    def id_column(self) -> str:
        return self._id_column

    @property
    def delimiter(self) -> str:
        return self._delimiter

    @property
    def skipped_rows(self) -> int:
        """Number of data rows rejected for a wrong field count."""
        return self._skipped_rows

    @property
    def warnings(self) -> List[ParseWarning]:
        return list(self._warnings)

    def has_column(self, name: str) -> bool:
        return name in self._columns

    def column_type(self, name: str) -> type:
        return self._column_types[name]

    def column(self, name: str) -> Tuple[Cell, ...]:
        """Typed cells of one column, in row order. Raises KeyError if unknown."""
        return tuple(self._columns[name])

    def row_offset(self, identifier: Any) -> Optional[int]:
        """Offset of the row with this identifier.

        An exact match wins; otherwise integer ids match by value, so a
        zero-padded `042` and `42` find each other.
        """
        key = str(identifier).strip()
        offset = self._index.get(key)
        if offset is not None:
            return offset
        alias = normalize_identifier(key)
        offset = self._index.get(alias)
        if offset is not None:
            return offset
        return self._aliases.get(alias)

    def row_at(self, offset: int) -> Dict[str, Cell]:
        return {name: self._columns[name][offset] for name in self._column_names}

    def cell(self, offset: int, name: str) -> Cell:
        return self._columns[name][offset]

    def row(self, identifier: Any) -> Optional[Dict[str, Cell]]:
        """Row whose identifier column equals `identifier`, or None."""
        offset = self.row_offset(identifier)
        if offset is None:
            return None
        return self.row_at(offset)

    def rows(self) -> Iterator[Dict[str, Cell]]:
        for offset in range(self._row_count):
            yield self.row_at(offset)

    def __len__(self) -> int:
        return self._row_count
