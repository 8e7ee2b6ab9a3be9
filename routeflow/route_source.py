import logging
from typing import List

import polyline
import requests

from routeflow.RoutePoint import Coordinate, LatLon
from routeflow.config import OSRM_BASE_URL
from routeflow.errors import RouteSourceError

logger = logging.getLogger(__name__)

PROFILES = ("driving", "walking", "cycling")


def decode_route(encoded: str, precision: int = 5) -> List[Coordinate]:
    """Decodes an encoded polyline into route coordinates."""
    return [Coordinate(lat, lon) for lat, lon in polyline.decode(encoded, precision)]


def fetch_route(start: LatLon,
                dest: LatLon,
                profile: str = "driving",
                base_url: str = OSRM_BASE_URL,
                timeout: float = 60) -> List[Coordinate]:
    """Dense route geometry between two coordinates from an OSRM server."""
    if profile not in PROFILES:
        raise ValueError(f"Unknown profile: {profile}")

    a_lat, a_lon = start
    b_lat, b_lon = dest
    coords = f"{a_lon},{a_lat};{b_lon},{b_lat}"
    url = f"{base_url.rstrip('/')}/route/v1/{profile}/{coords}?overview=full&geometries=polyline&steps=false"
    logger.info("Fetching %s route %s", profile, coords)

    try:
        r = requests.get(url, timeout=timeout)
        r.raise_for_status()
        data = r.json()
    except (requests.RequestException, ValueError) as exc:
        raise RouteSourceError(f"route request failed: {exc}") from exc

    if data.get("code") != "Ok" or not data.get("routes"):
        raise RouteSourceError(f"route provider returned {data.get('code')}: {data.get('message')}")

    geometry = decode_route(data["routes"][0]["geometry"])
    logger.info("Route has %d points, %.0f m", len(geometry), data["routes"][0].get("distance", 0.0))
    return geometry
