"""Parser for the simple map-drop mode.

Each non-blank line is `longitude,latitude,label`. The label is free text
and may contain further commas. Lines whose coordinates do not parse are
skipped and recorded, never fatal.

Usage:
    parser = PointParser(label_transform="reverse")
    points = parser.parse(csv_text)
    if not points:
        # "no data" outcome, nothing to plot
        ...
"""

import logging
import math
from typing import Callable, Dict, List, Optional, Union

from src.trace_bc.point.domain.entities.point_record import PointRecord
from src.trace_bc.shared.domain.errors import ConfigError, ParseWarning

logger = logging.getLogger(__name__)

LabelTransform = Callable[[str], str]

LABEL_TRANSFORMS: Dict[str, LabelTransform] = {
    "reverse": lambda text: text[::-1],
    "upper": str.upper,
    "strip": str.strip,
    "identity": lambda text: text,
}

DEFAULT_LABEL_TRANSFORM = "reverse"


def resolve_label_transform(transform: Union[str, LabelTransform, None]) -> LabelTransform:
    """Return a label transform from a registered name or a callable."""
    if transform is None:
        return LABEL_TRANSFORMS[DEFAULT_LABEL_TRANSFORM]
    if callable(transform):
        return transform
    try:
        return LABEL_TRANSFORMS[transform.lower()]
    except KeyError:
        raise ConfigError(
            f"Unknown label transform '{transform}'. "
            f"Available: {', '.join(sorted(LABEL_TRANSFORMS))}"
        ) from None


def parse_coordinate(value: str) -> Optional[float]:
    """Parse a finite float, or None."""
    try:
        number = float(value.strip())
    except ValueError:
        return None
    if not math.isfinite(number):
        return None
    return number


class PointParser:
    """Turns CSV text into PointRecords, collecting skipped lines."""

    def __init__(self, label_transform: Union[str, LabelTransform, None] = None):
        self._transform = resolve_label_transform(label_transform)
        self.warnings: List[ParseWarning] = []

    def parse(self, text: str) -> List[PointRecord]:
        self.warnings = []
        points: List[PointRecord] = []

        for line_number, raw_line in enumerate(text.splitlines(), start=1):
            line = raw_line.strip()
            if not line:
                continue

            fields = line.split(",", 2)
            if len(fields) < 3:
                self._skip(line_number, line, f"expected 3 fields, got {len(fields)}")
                continue

            lon = parse_coordinate(fields[0])
            lat = parse_coordinate(fields[1])
            if lon is None or lat is None:
                self._skip(line_number, line, "longitude/latitude is not a finite number")
                continue

            points.append(PointRecord(
                longitude=lon,
                latitude=lat,
                label=self._transform(fields[2]),
            ))

        logger.info(f"Parsed {len(points)} points ({len(self.warnings)} lines skipped)")
        return points

    def _skip(self, line_number: int, line: str, reason: str) -> None:
        logger.debug(f"Skipping line {line_number} ({reason}): {line}")
        self.warnings.append(ParseWarning(line_number, line, reason))


def parse_points(text: str, label_transform: Union[str, LabelTransform, None] = None) -> List[PointRecord]:
    """Parse `lon,lat,label` lines; an empty list means no usable data."""
    return PointParser(label_transform).parse(text)
