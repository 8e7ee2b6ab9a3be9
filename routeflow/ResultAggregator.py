import logging
import math
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Sequence

from routeflow.BatchDispatcher import EnrichmentResult
from routeflow.RoutePoint import Coordinate

logger = logging.getLogger(__name__)

TRAFFIC_FLOW_FIELDS = (
    "free_flow_speed",
    "current_speed",
    "current_travel_time",
    "free_flow_travel_time",
    "confidence",
    "frc",
    "road_description",
)
TRAFFIC_REQUIRED_FIELDS = ("coordinates",)

WEATHER_FIELDS = ("temp", "humidity", "pressure", "wind")
WEATHER_REQUIRED_FIELDS = ("temp",)


def congestion_factor(free_flow_speed: Any, current_speed: Any) -> int:
    """
    Jam factor on a 0-10 scale: 10 * (free - current) / free, rounded.
    Reported as 0 whenever the free-flow speed is missing or zero, or the
    factor is not a finite number.
    """
    try:
        free = float(free_flow_speed)
        current = float(current_speed)
    except (TypeError, ValueError):
        return 0
    if not free > 0:
        return 0
    factor = 10 * (free - current) / free
    if not math.isfinite(factor):
        return 0
    return round(factor)


def congestion_level(jam_factor: Optional[float]) -> Optional[str]:
    if jam_factor is None:
        return None
    if jam_factor < 4:
        return "low"
    if jam_factor < 7:
        return "medium"
    return "high"


def traffic_jam_factor(payload: Mapping[str, Any]) -> int:
    return congestion_factor(payload.get("free_flow_speed"), payload.get("current_speed"))


@dataclass
class AggregatedEntry:
    coord: Coordinate
    cumulative_distance: Optional[float]
    attributes: Dict[str, Any]
    jam_factor: Optional[int]
    congestion_level: Optional[str]

    def to_dict(self) -> Dict[str, Any]:
        out = {"coord": {"lat": self.coord.lat, "lon": self.coord.lon}}
        if self.cumulative_distance is not None:
            out["cumulative_distance"] = self.cumulative_distance
        out.update(self.attributes)
        out["jam_factor"] = self.jam_factor
        out["congestion_level"] = self.congestion_level
        return out


@dataclass
class AggregatedResponse:
    entries: List[AggregatedEntry] = field(default_factory=list)
    requested: int = 0
    failed: int = 0
    skipped: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "coords": [e.to_dict() for e in self.entries],
            "requested": self.requested,
            "failed": self.failed,
            "skipped": self.skipped,
        }


def _snapped_coord(payload: Mapping[str, Any], point: Any) -> Coordinate:
    # providers return a line along the road starting at the requested point
    coords = payload.get("coordinates")
    if isinstance(coords, Sequence) and coords:
        first = coords[0]
        if isinstance(first, Mapping):
            lat = first.get("lat")
            lon = first.get("lon", first.get("long"))
            try:
                return Coordinate(float(lat), float(lon))
            except (TypeError, ValueError):
                logger.debug("no usable snapped coordinate for %s", point)
    return Coordinate(point.lat, point.lon)


class ResultAggregator:
    def __init__(
            self,
            fields: Iterable[str] = TRAFFIC_FLOW_FIELDS,
            required_fields: Iterable[str] = TRAFFIC_REQUIRED_FIELDS,
            metric: Optional[Callable[[Mapping[str, Any]], int]] = traffic_jam_factor,
    ):
        self.fields = tuple(fields)
        self.required_fields = tuple(required_fields)
        self.metric = metric

    @classmethod
    def for_weather(cls) -> "ResultAggregator":
        return cls(fields=WEATHER_FIELDS, required_fields=WEATHER_REQUIRED_FIELDS, metric=None)

    def _is_empty(self, payload: Any) -> bool:
        if not isinstance(payload, Mapping):
            return True
        return any(payload.get(name) in (None, [], {}) for name in self.required_fields)

    def aggregate(self, results: Iterable[EnrichmentResult]) -> AggregatedResponse:
        response = AggregatedResponse()
        for result in results:
            response.requested += 1
            if result.failure:
                response.failed += 1
                logger.warning("Skipping %s, enrichment failed: %r", result.point, result.error)
                continue
            payload = result.payload
            if self._is_empty(payload):
                response.skipped += 1
                logger.warning("%s doesn't have any info, skipping", result.point)
                continue

            jam = self.metric(payload) if self.metric else None
            response.entries.append(AggregatedEntry(
                coord=_snapped_coord(payload, result.point),
                cumulative_distance=getattr(result.point, "cumulative_distance", None),
                attributes={name: payload.get(name) for name in self.fields},
                jam_factor=jam,
                congestion_level=congestion_level(jam),
            ))

        logger.info("aggregated %d of %d results (failed: %d, skipped: %d)",
                    len(response.entries), response.requested, response.failed, response.skipped)
        return response
