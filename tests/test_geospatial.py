import math

import pytest

from routegrid.models.domain import Coordinates
from routegrid.services.geospatial import (
    format_coordinates,
    great_circle_distance,
    is_finite_coordinates,
    normalize_lng,
    point_bounds,
)


@pytest.mark.parametrize(
    "raw, expected",
    [
        (190, -170),
        (-190, 170),
        (180, -180),
        (-180, -180),
        (0, 0),
        (539.5, 179.5),
        (-725, -5),
    ],
)
def test_normalize_lng_wraps_into_range(raw, expected):
    assert normalize_lng(raw) == pytest.approx(expected)


@pytest.mark.parametrize("raw", [-1000.25, -360, -181, -0.5, 12.3, 359.9, 720, 12345.678])
def test_normalize_lng_is_idempotent_and_range_closed(raw):
    once = normalize_lng(raw)
    assert -180 <= once < 180
    assert normalize_lng(once) == pytest.approx(once)


def test_great_circle_distance_one_degree_at_equator():
    assert great_circle_distance(Coordinates(0, 0), Coordinates(0, 1)) == 111.19


def test_great_circle_distance_is_symmetric_and_zero_on_identity():
    paris = Coordinates(48.8566, 2.3522)
    berlin = Coordinates(52.52, 13.405)

    assert great_circle_distance(paris, berlin) == great_circle_distance(berlin, paris)
    assert great_circle_distance(paris, paris) == 0.0
    assert 870 < great_circle_distance(paris, berlin) < 890


def test_format_coordinates_uses_six_decimals_and_normalized_longitude():
    assert format_coordinates(48.5, 190) == "48.500000, -170.000000"


def test_is_finite_coordinates_rejects_nan_and_infinity():
    assert is_finite_coordinates(Coordinates(1.0, 2.0))
    assert not is_finite_coordinates(Coordinates(math.nan, 2.0))
    assert not is_finite_coordinates(Coordinates(1.0, math.inf))


def test_point_bounds():
    assert point_bounds([]) is None
    bounds = point_bounds([Coordinates(10, 20), Coordinates(-5, 40), Coordinates(3, -7)])
    assert bounds == (-5, -7, 10, 40)


@pytest.mark.parametrize("bad", [math.nan, math.inf, -math.inf])
def test_great_circle_distance_is_nan_for_non_finite_points(bad):
    assert math.isnan(great_circle_distance(Coordinates(bad, 0), Coordinates(0, 1)))
    assert math.isnan(great_circle_distance(Coordinates(0, 0), Coordinates(0, bad)))
