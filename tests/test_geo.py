import math

import pytest

from exceptions import ValidationError
from geo import (
    calculate_bearing,
    destination_point,
    from_lng_lat,
    get_compass_direction,
    haversine_distance,
    to_lat_lng,
    to_lng_lat,
)
from models import GeoPoint


def test_haversine_identical_points_is_zero(london):
    assert haversine_distance(london, london) == 0
    assert haversine_distance(GeoPoint(0, 0), GeoPoint(0, 0)) == 0


def test_haversine_is_symmetric():
    a = GeoPoint(59.3293, 18.0686)
    b = GeoPoint(57.7089, 11.9746)
    assert haversine_distance(a, b) == pytest.approx(haversine_distance(b, a))
    # Stockholm - Göteborg fågelvägen
    assert haversine_distance(a, b) == pytest.approx(398_000, rel=0.01)


def test_one_degree_of_latitude():
    d = haversine_distance(GeoPoint(0, 0), GeoPoint(1, 0))
    assert d == pytest.approx(6371000 * math.pi / 180)


@pytest.mark.parametrize("distance", [100, 1000, 5000, 15000, 30000])
@pytest.mark.parametrize("bearing", [0, 0.7, math.pi / 2, 2.5, math.pi, 4.0, 5.9])
def test_destination_point_round_trip(london, distance, bearing):
    target = destination_point(london, distance, bearing)
    assert haversine_distance(london, target) == pytest.approx(distance, rel=1e-3)


def test_destination_point_north_increases_latitude(london):
    target = destination_point(london, 1000, 0)
    assert target.lat > london.lat
    assert target.lng == pytest.approx(london.lng)


def test_destination_point_crosses_antimeridian():
    origin = GeoPoint(10, 179.99)
    target = destination_point(origin, 5000, math.pi / 2)
    assert -180 <= target.lng < 180
    assert target.lng < 0
    assert haversine_distance(origin, target) == pytest.approx(5000, rel=1e-3)


def test_destination_point_near_pole():
    origin = GeoPoint(89.99, 45)
    target = destination_point(origin, 30000, 0)
    assert -90 <= target.lat <= 90
    assert -180 <= target.lng < 180
    assert haversine_distance(origin, target) == pytest.approx(30000, rel=1e-3)


def test_geopoint_rejects_invalid_coordinates():
    with pytest.raises(ValidationError):
        GeoPoint(91, 0)
    with pytest.raises(ValidationError):
        GeoPoint(0, -181)


def test_bearing_and_compass():
    origin = GeoPoint(0, 0)
    assert calculate_bearing(origin, GeoPoint(1, 0)) == pytest.approx(0)
    assert calculate_bearing(origin, GeoPoint(0, 1)) == pytest.approx(90)
    assert calculate_bearing(origin, GeoPoint(-1, 0)) == pytest.approx(180)
    assert get_compass_direction(0) == "N"
    assert get_compass_direction(90) == "E"
    assert get_compass_direction(225) == "SW"
    assert get_compass_direction(355) == "N"


def test_coordinate_adapters():
    points = [GeoPoint(59.3, 18.0), GeoPoint(59.4, 18.1)]
    assert to_lng_lat(points) == [[18.0, 59.3], [18.1, 59.4]]
    assert to_lat_lng(points) == [[59.3, 18.0], [59.4, 18.1]]
    assert from_lng_lat([[18.0, 59.3], [18.1, 59.4, 23.5]]) == points
    assert from_lng_lat(to_lng_lat(points)) == points
