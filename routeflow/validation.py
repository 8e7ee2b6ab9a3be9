import math
from typing import Any, Iterable, List, Mapping, Optional

from routeflow.RoutePoint import Coordinate
from routeflow.config import MAX_TRAJECTORY_REPEAT
from routeflow.errors import (
    EmptyRouteError,
    InvalidCoordinateError,
    InvalidRepeatError,
    InvalidThresholdError,
)


def _to_float(value: Any, name: str) -> float:
    if isinstance(value, bool):
        raise InvalidCoordinateError(f"{name} must be a number, got {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidCoordinateError(f"{name} must be a number, got {value!r}") from None
    if not math.isfinite(number):
        raise InvalidCoordinateError(f"{name} must be finite, got {value!r}")
    return number


def validate_coordinate(value: Any) -> Coordinate:
    """
    Accepts a Coordinate, a (lat, lon) pair or a mapping with ``lat`` and
    ``lon``/``long`` keys. Latitude must be in [-90, 90], longitude in [-180, 180].
    """
    if isinstance(value, Mapping):
        lat = value.get("lat")
        lon = value.get("lon", value.get("long"))
    elif isinstance(value, (str, bytes)):
        raise InvalidCoordinateError(f"not a coordinate: {value!r}")
    else:
        try:
            lat, lon = value
        except (TypeError, ValueError):
            raise InvalidCoordinateError(f"not a coordinate: {value!r}") from None

    if lat is None or lon is None:
        raise InvalidCoordinateError(f"coordinate is missing lat or lon: {value!r}")

    lat = _to_float(lat, "lat")
    lon = _to_float(lon, "lon")
    if not -90.0 <= lat <= 90.0:
        raise InvalidCoordinateError(f"lat must be in [-90, 90], got {lat}")
    if not -180.0 <= lon <= 180.0:
        raise InvalidCoordinateError(f"lon must be in [-180, 180], got {lon}")
    return Coordinate(lat, lon)


def parse_coord(text: str) -> Coordinate:
    """Parses a ``"lat,long"`` string as sent in query parameters."""
    if not isinstance(text, str):
        raise InvalidCoordinateError(f"expected a 'lat,long' string, got {text!r}")
    parts = [p.strip() for p in text.split(",")]
    if len(parts) != 2:
        raise InvalidCoordinateError(f"expected a 'lat,long' string, got {text!r}")
    return validate_coordinate(parts)


def validate_route(points: Optional[Iterable[Any]]) -> List[Coordinate]:
    route = [validate_coordinate(p) for p in (points or [])]
    if not route:
        raise EmptyRouteError("route must contain at least one coordinate")
    return route


def validate_threshold(value: Any) -> Optional[float]:
    if value is None:
        return None
    try:
        threshold = float(value)
    except (TypeError, ValueError):
        raise InvalidThresholdError(f"distance threshold must be a number, got {value!r}") from None
    if not math.isfinite(threshold) or threshold <= 0:
        raise InvalidThresholdError(f"distance threshold must be positive, got {value!r}")
    return threshold


def validate_repeat(value: Any, limit: int = MAX_TRAJECTORY_REPEAT) -> int:
    if isinstance(value, bool):
        raise InvalidRepeatError(f"repeat must be an integer, got {value!r}")
    try:
        repeat = int(value)
    except (TypeError, ValueError):
        raise InvalidRepeatError(f"repeat must be an integer, got {value!r}") from None
    if repeat != value and str(repeat) != str(value).strip():
        raise InvalidRepeatError(f"repeat must be an integer, got {value!r}")
    if not 1 <= repeat <= limit:
        raise InvalidRepeatError(f"repeat must be in [1, {limit}], got {repeat}")
    return repeat
