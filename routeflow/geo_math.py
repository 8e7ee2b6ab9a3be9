import math
from typing import Iterable, List, Sequence

from routeflow.RoutePoint import LatLon

EARTH_RADIUS_M = 6371000.0


def deg_to_rad(degree: float) -> float:
    return degree * (math.pi / 180.0)


def rad_to_deg(radian: float) -> float:
    return radian * (180.0 / math.pi)


def haversine_m(a: LatLon, b: LatLon) -> float:
    """Great-circle distance in meters between two (lat, lon) pairs."""
    lat1, lon1 = map(deg_to_rad, a)
    lat2, lon2 = map(deg_to_rad, b)
    dlat = lat2 - lat1
    dlon = lon2 - lon1
    x = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    # rounding can push x a hair above 1 for antipodal points
    return 2 * EARTH_RADIUS_M * math.asin(math.sqrt(min(1.0, x)))


def cum_array(values: Iterable[float]) -> List[float]:
    cum = [0.0]
    s = 0.0
    for v in values:
        s += v
        cum.append(s)
    return cum


def segment_lengths_m(route: Sequence[LatLon]) -> List[float]:
    return [haversine_m(route[i], route[i + 1]) for i in range(len(route) - 1)]


def route_length_m(route: Sequence[LatLon]) -> float:
    if len(route) < 2:
        return 0.0
    return cum_array(segment_lengths_m(route))[-1]
