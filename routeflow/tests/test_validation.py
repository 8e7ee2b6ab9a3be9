import math

import pytest

from routeflow.RoutePoint import Coordinate
from routeflow.errors import EmptyRouteError, InputError, InvalidCoordinateError, InvalidThresholdError
from routeflow.validation import (
    parse_coord,
    validate_coordinate,
    validate_repeat,
    validate_route,
    validate_threshold,
)


def test_validate_coordinate_accepts_common_shapes():
    expected = Coordinate(40.95, 29.1)
    assert validate_coordinate(expected) == expected
    assert validate_coordinate((40.95, 29.1)) == expected
    assert validate_coordinate(["40.95", "29.1"]) == expected
    assert validate_coordinate({"lat": 40.95, "long": 29.1}) == expected
    assert validate_coordinate({"lat": 40.95, "lon": 29.1}) == expected


@pytest.mark.parametrize("value", [
    (90.1, 0.0),
    (-90.1, 0.0),
    (0.0, 180.5),
    (0.0, -181.0),
    ("abc", 1.0),
    (math.nan, 0.0),
    (True, 0.0),
    {"lat": 1.0},
    (1.0, 2.0, 3.0),
    "12",
    None,
])
def test_validate_coordinate_rejects(value):
    with pytest.raises(InvalidCoordinateError):
        validate_coordinate(value)


def test_validate_coordinate_bounds_are_inclusive():
    assert validate_coordinate((90, 180)) == Coordinate(90.0, 180.0)
    assert validate_coordinate((-90, -180)) == Coordinate(-90.0, -180.0)


def test_parse_coord():
    assert parse_coord("40.9562591,29.1097512") == Coordinate(40.9562591, 29.1097512)
    assert parse_coord(" 51.2 , 7.1 ") == Coordinate(51.2, 7.1)
    for bad in ("40.9", "1,2,3", "a,b", ""):
        with pytest.raises(InvalidCoordinateError):
            parse_coord(bad)


def test_validate_route():
    assert validate_route([(1, 2), (3, 4)]) == [Coordinate(1.0, 2.0), Coordinate(3.0, 4.0)]
    with pytest.raises(EmptyRouteError):
        validate_route([])
    with pytest.raises(EmptyRouteError):
        validate_route(None)
    with pytest.raises(InvalidCoordinateError):
        validate_route([(1, 2), (100, 4)])


def test_validate_threshold():
    assert validate_threshold(None) is None
    assert validate_threshold("250") == 250.0
    for bad in (0, -10, "x", math.inf):
        with pytest.raises(InvalidThresholdError):
            validate_threshold(bad)


def test_input_errors_share_a_base():
    assert issubclass(InvalidThresholdError, InputError)
    assert issubclass(EmptyRouteError, InputError)


def test_validate_repeat():
    assert validate_repeat(1) == 1
    assert validate_repeat("5") == 5
    assert validate_repeat(20) == 20
    for bad in (0, 21, "five", 1.5, False):
        with pytest.raises(InputError):
            validate_repeat(bad)
