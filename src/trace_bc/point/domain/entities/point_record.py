from dataclasses import dataclass, asdict


@dataclass(frozen=True)
class PointRecord:
    """A labelled map point parsed from a `lon,lat,text` line."""

    longitude: float
    latitude: float
    label: str

    def to_dict(self) -> dict:
        return asdict(self)
