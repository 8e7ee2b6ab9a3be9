import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List

from routeflow.RoutePoint import Coordinate
from routeflow.errors import ProviderError
from routeflow.validation import validate_coordinate, validate_repeat

logger = logging.getLogger(__name__)


@dataclass
class Trajectory:
    start: Coordinate
    segments: List[List[Coordinate]] = field(default_factory=list)
    flows: List[Dict[str, Any]] = field(default_factory=list)

    @property
    def coords(self) -> List[Coordinate]:
        out: List[Coordinate] = []
        for segment in self.segments:
            # consecutive segments share their joint
            out.extend(segment[1:] if out and segment and segment[0] == out[-1] else segment)
        return out

    def to_dict(self) -> Dict[str, Any]:
        return {
            "start": {"lat": self.start.lat, "lon": self.start.lon},
            "routes": [
                {"coords": [{"lat": c.lat, "lon": c.lon} for c in segment], "flow": flow}
                for segment, flow in zip(self.segments, self.flows)
            ],
        }


def _segment(payload: Any) -> List[Coordinate]:
    coords = payload.get("coordinates") if isinstance(payload, dict) else None
    return [validate_coordinate(c) for c in coords or []]


async def trajectory(start: Any, repeat: Any, enrich) -> Trajectory:
    """
    Follows the road from ``start``: every lookup starts at the last coordinate
    of the segment returned by the previous one. Lookups are sequential since
    each depends on the one before.
    """
    current = validate_coordinate(start)
    repeat = validate_repeat(repeat)
    result = Trajectory(start=current)
    logger.info("Repeating trajectory for %d times.", repeat)

    for i in range(repeat):
        payload = await enrich(current)
        segment = _segment(payload)
        if not segment:
            raise ProviderError(f"no road segment around {current} (iteration {i + 1})")
        logger.debug("Iter #%d: %d coordinates", i + 1, len(segment))
        result.segments.append(segment)
        result.flows.append({k: v for k, v in payload.items() if k != "coordinates"})
        current = segment[-1]
    return result
