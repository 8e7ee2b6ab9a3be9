import logging
import math
from dataclasses import dataclass
from typing import Iterator, List, Optional

from routeflow.RoutePoint import Coordinate, Route, RoutePoint
from routeflow.config import SamplingConfig
from routeflow.geo_math import haversine_m

logger = logging.getLogger(__name__)


@dataclass
class ScanState:
    """Cursor state of the adaptive scan."""
    last_retained: RoutePoint
    last_seen: RoutePoint
    last_distance: float = math.inf
    cumulative: float = 0.0
    previous: Optional[Coordinate] = None


class RouteSampler:
    """
    Reduces a dense route to points spaced roughly ``target`` meters apart.

    simplify: keeps a point once it is at least ``target`` away from the last
        kept one. Cheap, used for drawing markers.
    iter_adaptive: at every threshold crossing keeps whichever of the two
        points around the crossing is closer to ``target``. Samples are yielded
        as soon as they are decided so callers can dispatch work for them while
        the rest of the route is still being scanned.
    """

    def __init__(self, config: SamplingConfig):
        self.config = config

    def bias(self, target: float) -> float:
        return self.config.bias_ratio * target

    def simplify(self, route: Route, target: float) -> List[RoutePoint]:
        kept: List[RoutePoint] = []
        if not route:
            return kept

        last = Coordinate(*route[0])
        kept.append(RoutePoint(last, 0, 0.0))
        cumulative = 0.0
        previous = last
        for i in range(1, len(route)):
            point = Coordinate(*route[i])
            cumulative += haversine_m(previous, point)
            previous = point

            distance = haversine_m(last, point)
            if distance < target:
                logger.debug("Distance %.1f is less than the threshold %s", distance, target)
                continue
            last = point
            kept.append(RoutePoint(point, i, cumulative))

        logger.info("simplify: %d coords -> %d samples (threshold %s m)", len(route), len(kept), target)
        return kept

    def iter_adaptive(self, route: Route, target: float) -> Iterator[RoutePoint]:
        if not route:
            return

        first = RoutePoint(Coordinate(*route[0]), 0, 0.0)
        yield first
        state = ScanState(last_retained=first, last_seen=first, previous=first.coord)
        lower = target - self.bias(target)

        for i in range(1, len(route)):
            coord = Coordinate(*route[i])
            state.cumulative += haversine_m(state.previous, coord)
            state.previous = coord
            point = RoutePoint(coord, i, state.cumulative)

            d = haversine_m(state.last_retained.coord, coord)
            if d < lower:
                state.last_seen = point
                state.last_distance = d
                continue

            # crossing: the previous point wins only if it is strictly closer
            if abs(state.last_distance - target) < abs(d - target):
                winner = state.last_seen
            else:
                winner = point
            logger.debug("crossing at index %d: kept index %d (%.1f m)", i, winner.index,
                         state.last_distance if winner is state.last_seen else d)

            state.last_retained = winner
            state.last_seen = winner
            state.last_distance = math.inf
            yield winner

        if state.last_retained.index != len(route) - 1:
            # close out the route with its final point
            yield RoutePoint(state.previous, len(route) - 1, state.cumulative)

    def sample_adaptive(self, route: Route, target: float) -> List[RoutePoint]:
        samples = list(self.iter_adaptive(route, target))
        logger.info("sample_adaptive: %d coords -> %d samples (threshold %s m)",
                    len(route), len(samples), target)
        return samples
