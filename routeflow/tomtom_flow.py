import logging
from typing import Any, Dict, List, Optional

import aiohttp

from routeflow.config import ProviderSettings
from routeflow.errors import ProviderError

logger = logging.getLogger(__name__)

# functional road classes of the TomTom flow segment API
FRC_DESCRIPTIONS = {
    "FRC0": "Motorway, freeway or other major road",
    "FRC1": "Major road, less important than a motorway",
    "FRC2": "Other major road",
    "FRC3": "Secondary road",
    "FRC4": "Local connecting road",
    "FRC5": "Local road of high importance",
    "FRC6": "Local road",
}


def _parse_coordinates(raw: Any) -> List[Dict[str, float]]:
    if isinstance(raw, dict):
        raw = raw.get("coordinate")
    coords = []
    for item in raw or []:
        try:
            coords.append({"lat": float(item["latitude"]), "lon": float(item["longitude"])})
        except (KeyError, TypeError, ValueError):
            continue
    return coords


def parse_flow_segment(data: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Flattens a flowSegmentData response. Returns {} for an empty body."""
    if not data or not isinstance(data.get("flowSegmentData"), dict):
        return {}
    segment = data["flowSegmentData"]
    frc = segment.get("frc")
    return {
        "frc": frc,
        "road_description": FRC_DESCRIPTIONS.get(frc),
        "current_speed": segment.get("currentSpeed"),
        "free_flow_speed": segment.get("freeFlowSpeed"),
        "current_travel_time": segment.get("currentTravelTime"),
        "free_flow_travel_time": segment.get("freeFlowTravelTime"),
        "confidence": segment.get("confidence"),
        "road_closure": segment.get("roadClosure"),
        "coordinates": _parse_coordinates(segment.get("coordinates")),
    }


class TomTomFlowClient:
    """
    Per-point traffic flow lookups. ``fetch_flow`` is the enrichment function
    handed to the dispatcher; it raises on any failure.
    """

    def __init__(self, session: aiohttp.ClientSession, settings: ProviderSettings):
        self.session = session
        self.url = settings.tomtom_flow_url
        self.api_key = settings.tomtom_api_key
        self.timeout = aiohttp.ClientTimeout(total=settings.timeout_s)

    async def fetch_flow(self, point) -> Dict[str, Any]:
        params = {"key": self.api_key or "", "point": f"{point.lat},{point.lon}", "unit": "KMPH"}
        logger.debug("GET %s point=%s", self.url, params["point"])
        async with self.session.get(self.url, params=params, timeout=self.timeout) as response:
            if response.status != 200:
                raise ProviderError(f"TomTom flow response status is {response.status}", response.status)
            data = await response.json()
        return parse_flow_segment(data)
