import asyncio

import pytest

from routeflow.RoutePoint import Coordinate
from routeflow.errors import InvalidRepeatError, ProviderError
from routeflow.trajectory import trajectory


def _road_ahead(step=0.001):
    """Fake flow lookup: each segment runs two steps north-east of the queried point."""
    calls = []

    async def enrich(point):
        calls.append(point)
        return {
            "current_speed": 30,
            "coordinates": [
                {"lat": point.lat, "lon": point.lon},
                {"lat": point.lat + step, "lon": point.lon + step},
                {"lat": point.lat + 2 * step, "lon": point.lon + 2 * step},
            ],
        }

    return enrich, calls


def test_each_lookup_starts_where_the_last_segment_ended():
    enrich, calls = _road_ahead()
    result = asyncio.run(trajectory((40.0, 29.0), 3, enrich))
    assert len(result.segments) == 3
    assert calls[0] == Coordinate(40.0, 29.0)
    for segment, nxt in zip(result.segments, calls[1:]):
        assert nxt == segment[-1]
    # shared joints are not repeated
    assert len(result.coords) == 7
    assert result.flows[0] == {"current_speed": 30}


def test_to_dict():
    enrich, _ = _road_ahead()
    out = asyncio.run(trajectory({"lat": 40.0, "long": 29.0}, 1, enrich)).to_dict()
    assert out["start"] == {"lat": 40.0, "lon": 29.0}
    assert len(out["routes"]) == 1
    assert len(out["routes"][0]["coords"]) == 3


@pytest.mark.parametrize("repeat", [0, -1, 21, "x", 2.5, True, None])
def test_bad_repeat_is_rejected_before_any_lookup(repeat):
    enrich, calls = _road_ahead()
    with pytest.raises(InvalidRepeatError):
        asyncio.run(trajectory((40.0, 29.0), repeat, enrich))
    assert calls == []


def test_missing_segment_is_a_provider_error():
    async def enrich(point):
        return {}

    with pytest.raises(ProviderError):
        asyncio.run(trajectory((40.0, 29.0), 2, enrich))
