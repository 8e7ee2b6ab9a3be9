import asyncio
import logging
from typing import Any, Callable, List, Optional, Sequence, Tuple

from routeflow.BatchDispatcher import BatchDispatcher
from routeflow.RoutePoint import Coordinate, RoutePoint
from routeflow.RouteSampler import RouteSampler
from routeflow.ResultAggregator import AggregatedResponse, ResultAggregator
from routeflow.ThresholdPolicy import ThresholdPolicy
from routeflow.config import SamplingConfig
from routeflow.geo_math import route_length_m
from routeflow.route_source import fetch_route
from routeflow.validation import validate_coordinate, validate_route, validate_threshold

logger = logging.getLogger(__name__)

MARKER_THRESHOLD = 500.0

RouteFetcher = Callable[[Coordinate, Coordinate], Sequence[Any]]


def check_request(source: Any,
                  destination: Any,
                  distance_threshold: Any = None,
                  config: Optional[SamplingConfig] = None) -> Tuple[Coordinate, Coordinate, float]:
    """Validates a request and resolves its sampling threshold without touching the network."""
    source = validate_coordinate(source)
    destination = validate_coordinate(destination)
    threshold = validate_threshold(distance_threshold)

    policy = ThresholdPolicy(config or SamplingConfig())
    distance = policy.check_distance(source, destination)
    logger.debug("Distance is calculated: %.1f", distance)
    if threshold is None:
        threshold = policy.classify(source, destination)
    return source, destination, threshold


async def route_flow(source: Any,
                     destination: Any,
                     enrich,
                     config: Optional[SamplingConfig] = None,
                     route: Optional[Sequence[Any]] = None,
                     distance_threshold: Any = None,
                     route_fetcher: RouteFetcher = fetch_route,
                     dispatcher: Optional[BatchDispatcher] = None,
                     aggregator: Optional[ResultAggregator] = None) -> AggregatedResponse:
    """
    Samples the route between ``source`` and ``destination`` and enriches every
    sample with ``enrich``.

    Input errors are raised before any route is fetched. Failed enrichment calls
    are dropped from the response; only a broken enrichment function aborts.
    """
    config = config or SamplingConfig()
    source, destination, threshold = check_request(source, destination, distance_threshold, config)

    if route is None:
        route = await asyncio.to_thread(route_fetcher, source, destination)
    points = validate_route(route)

    dispatcher = dispatcher or BatchDispatcher.from_config(config)
    aggregator = aggregator or ResultAggregator()
    samples, results = await dispatcher.scan_and_dispatch(RouteSampler(config), points, threshold, enrich)
    logger.info("route %s -> %s: %d points over %.0f m, %d samples at %s m", source, destination,
                len(points), route_length_m(points), len(samples), threshold)
    return aggregator.aggregate(results)


def marker_points(route: Sequence[Any], distance_threshold: Any = MARKER_THRESHOLD,
                  config: Optional[SamplingConfig] = None) -> List[RoutePoint]:
    """Coarse reduction of a route for drawing markers."""
    points = validate_route(route)
    threshold = validate_threshold(distance_threshold) or MARKER_THRESHOLD
    return RouteSampler(config or SamplingConfig()).simplify(points, threshold)
