import math

import pytest

from routeflow.RoutePoint import Coordinate
from routeflow.config import SamplingConfig
from routeflow.geo_math import EARTH_RADIUS_M


def straight_route(n, spacing_m, start=(40.0, 29.0)):
    """n points heading north along a meridian, spacing_m apart."""
    dlat = math.degrees(spacing_m / EARTH_RADIUS_M)
    return [Coordinate(start[0] + i * dlat, start[1]) for i in range(n)]


@pytest.fixture
def config():
    return SamplingConfig(
        intra_city_spacing_m=250.0,
        inter_city_spacing_m=2000.0,
        max_city_distance_m=50_000.0,
        max_route_distance_m=400_000.0,
        chunk_size=50,
        chunk_pause_s=0.0,
    )


class RecordingSleep:
    """Instrumented clock: records pauses instead of sleeping."""

    def __init__(self):
        self.calls = []

    async def __call__(self, seconds):
        self.calls.append(seconds)


@pytest.fixture
def recording_sleep():
    return RecordingSleep()
