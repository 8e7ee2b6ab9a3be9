import math

import pytest

from routeflow.RoutePoint import Coordinate
from routeflow.RouteSampler import RouteSampler
from routeflow.geo_math import haversine_m

from conftest import straight_route


@pytest.fixture
def sampler(config):
    return RouteSampler(config)


def indices(samples):
    return [s.index for s in samples]


def test_single_point_route_yields_that_point(sampler):
    route = [Coordinate(51.2562, 7.1508)]
    for samples in (sampler.simplify(route, 250), sampler.sample_adaptive(route, 250)):
        assert len(samples) == 1
        assert samples[0].coord == route[0]
        assert samples[0].index == 0
        assert samples[0].cumulative_distance == 0.0


def test_empty_route_yields_nothing(sampler):
    assert sampler.simplify([], 250) == []
    assert sampler.sample_adaptive([], 250) == []


def test_simplify_always_keeps_first_point(sampler):
    # right next to (0, 0): the old sentinel would have dropped it
    route = [Coordinate(0.0, 0.0001), Coordinate(0.0, 0.01)]
    samples = sampler.simplify(route, 250)
    assert indices(samples) == [0, 1]


def test_simplify_keeps_points_at_least_target_apart(sampler):
    route = straight_route(10, 100.0)
    samples = sampler.simplify(route, 250)
    # 0 -> 3 (300 m) -> 6 -> 9
    assert indices(samples) == [0, 3, 6, 9]
    for a, b in zip(samples, samples[1:]):
        assert haversine_m(a.coord, b.coord) >= 250


def test_simplify_does_not_force_last_point(sampler):
    route = straight_route(9, 100.0)
    assert indices(sampler.simplify(route, 250)) == [0, 3, 6]


def test_simplify_accepts_plain_tuples(sampler):
    route = [tuple(c) for c in straight_route(4, 100.0)]
    samples = sampler.simplify(route, 250)
    assert isinstance(samples[0].coord, Coordinate)
    assert indices(samples) == [0, 3]


def test_adaptive_picks_closer_side_of_crossing(sampler):
    # target 260, band starts at 234: candidates 200 m (off by 60) vs 300 m (off by 40)
    route = straight_route(10, 100.0)
    assert indices(sampler.sample_adaptive(route, 260)) == [0, 3, 6, 9]


def test_adaptive_prefers_previous_point_when_closer(sampler):
    # target 190, band starts at 171: 100 m (off by 90) vs 200 m (off by 10) -> current
    # target 140, band starts at 126: 100 m (off by 40) vs 200 m (off by 60) -> previous
    route = straight_route(7, 100.0)
    assert indices(sampler.sample_adaptive(route, 190)) == [0, 2, 4, 6]
    samples = sampler.sample_adaptive(route, 140)
    assert indices(samples)[:2] == [0, 1]


def test_adaptive_ten_point_route_at_250(sampler):
    route = straight_route(10, 100.0)
    picked = indices(sampler.sample_adaptive(route, 250))
    assert picked[0] == 0
    assert picked[-1] == 9
    gaps = [b - a for a, b in zip(picked, picked[1:])]
    assert all(g in (2, 3) for g in gaps[:-1])
    assert picked == sorted(set(picked))


def test_adaptive_closes_out_the_route(sampler):
    route = straight_route(11, 100.0)
    samples = sampler.sample_adaptive(route, 260)
    assert indices(samples) == [0, 3, 6, 9, 10]
    assert samples[-1].coord == route[-1]


def test_adaptive_spacing_within_bias_band_on_dense_route(sampler):
    target = 250.0
    bias = 0.1 * target
    route = straight_route(400, 7.0)
    samples = sampler.sample_adaptive(route, target)
    assert len(samples) > 5
    for a, b in zip(samples[:-2], samples[1:-1]):
        d = haversine_m(a.coord, b.coord)
        assert target - bias <= d <= target + bias


def test_adaptive_cumulative_distance_is_monotonic(sampler):
    route = straight_route(50, 37.0)
    samples = sampler.sample_adaptive(route, 180)
    dists = [s.cumulative_distance for s in samples]
    assert dists[0] == 0.0
    assert all(b >= a for a, b in zip(dists, dists[1:]))
    assert math.isclose(dists[-1], 49 * 37.0, rel_tol=1e-6)


def test_adaptive_cumulative_distance_matches_winner(sampler):
    route = straight_route(10, 100.0)
    for s in sampler.sample_adaptive(route, 260):
        assert math.isclose(s.cumulative_distance, s.index * 100.0, rel_tol=1e-6, abs_tol=1e-6)


def test_adaptive_previous_point_wins_with_its_own_distance(sampler):
    # 220 m is closer to 250 than 290 m, so index 1 wins the first crossing
    offsets = [0.0, 220.0, 290.0, 560.0]
    route = [Coordinate(40.0 + math.degrees(m / 6_371_000.0), 29.0) for m in offsets]
    samples = sampler.sample_adaptive(route, 250)
    assert indices(samples) == [0, 1, 3]
    for s in samples:
        assert math.isclose(s.cumulative_distance, offsets[s.index], rel_tol=1e-6, abs_tol=1e-6)


def test_iter_adaptive_is_lazy(sampler):
    route = straight_route(10, 100.0)
    it = sampler.iter_adaptive(route, 260)
    assert next(it).index == 0
    assert next(it).index == 3
