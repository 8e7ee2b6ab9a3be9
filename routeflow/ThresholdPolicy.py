import logging
from enum import Enum, auto

from routeflow.RoutePoint import LatLon
from routeflow.config import SamplingConfig
from routeflow.errors import RouteTooLongError
from routeflow.geo_math import haversine_m

logger = logging.getLogger(__name__)


class RouteKind(Enum):
    INTRA_CITY = auto()
    INTER_CITY = auto()


class ThresholdPolicy:
    """
    Picks the spacing between consecutive samples from the straight-line
    distance between the route endpoints. A distance equal to the city cutoff
    still counts as intra-city.
    """

    def __init__(self, config: SamplingConfig):
        self.config = config

    def route_kind(self, source: LatLon, destination: LatLon) -> RouteKind:
        if haversine_m(source, destination) > self.config.max_city_distance_m:
            return RouteKind.INTER_CITY
        return RouteKind.INTRA_CITY

    def classify(self, source: LatLon, destination: LatLon) -> float:
        kind = self.route_kind(source, destination)
        if kind is RouteKind.INTER_CITY:
            threshold = self.config.inter_city_spacing_m
        else:
            threshold = self.config.intra_city_spacing_m
        logger.debug("route %s -> %s is %s, threshold %s m", source, destination, kind.name, threshold)
        return threshold

    def check_distance(self, source: LatLon, destination: LatLon) -> float:
        # long routes produce too many points, most of which the provider rejects
        distance = haversine_m(source, destination)
        if distance >= self.config.max_route_distance_m:
            raise RouteTooLongError(distance, self.config.max_route_distance_m)
        return distance
