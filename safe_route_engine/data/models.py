"""
Plain value types shared across the engine.
"""

from dataclasses import dataclass
from typing import NamedTuple, Union


class GeoPoint(NamedTuple):
    """WGS84 coordinate in degrees."""
    lat: float
    lon: float


@dataclass(frozen=True)
class Incident:
    """A single historical incident location."""
    id: Union[int, str]
    lat: float
    lon: float

    @property
    def point(self) -> GeoPoint:
        return GeoPoint(self.lat, self.lon)


@dataclass(frozen=True)
class LoadReport:
    """Row counts from an incident load."""
    total_rows: int = 0
    valid_rows: int = 0
    invalid_rows: int = 0
