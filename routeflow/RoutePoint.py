from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple, Optional, Sequence, Tuple

LatLon = Tuple[float, float]  # (lat, lon)


class Coordinate(NamedTuple):
    """A GPS coordinate. Plain ``(lat, lon)`` tuples are interchangeable with it."""
    lat: float
    lon: float


@dataclass(frozen=True)
class RoutePoint:
    """
    A route coordinate picked by the sampler.
    index: position of the coordinate in the source route
    cumulative_distance: meters travelled along the raw route up to this point
    """
    coord: Coordinate
    index: int
    cumulative_distance: Optional[float] = None

    @property
    def lat(self) -> float:
        return self.coord.lat

    @property
    def lon(self) -> float:
        return self.coord.lon


Route = Sequence[Coordinate]
