from datetime import timedelta

import gpxpy
import pytest

from conftest import make_line
from geo import haversine_distance
from models import ElevationSample, GeoPoint, RouteResult, RouteType
from utils import (
    create_gpx,
    elevation_gain_loss,
    format_distance,
    format_time,
    get_route_statistics,
    gpx_filename,
    parse_pace,
    total_distance,
)


def samples_for(elevations, spacing=100.0):
    return [ElevationSample(distance=i * spacing, elevation=e) for i, e in enumerate(elevations)]


def test_total_distance_short_routes():
    assert total_distance([]) == 0
    assert total_distance([GeoPoint(59.0, 18.0)]) == 0


def test_total_distance_sums_segments():
    route = [GeoPoint(59.0, 18.0), GeoPoint(59.001, 18.0), GeoPoint(59.001, 18.002)]
    expected = haversine_distance(route[0], route[1]) + haversine_distance(route[1], route[2])
    assert total_distance(route) == pytest.approx(expected)


def test_elevation_gain_loss():
    gain, loss = elevation_gain_loss(samples_for([10, 15, 12, 20]))
    assert gain == 13
    assert loss == 3


def test_elevation_gain_loss_short_input():
    assert elevation_gain_loss([]) == (0, 0)
    assert elevation_gain_loss(samples_for([42])) == (0, 0)


def test_elevation_gain_loss_flat():
    assert elevation_gain_loss(samples_for([5, 5, 5])) == (0, 0)


@pytest.mark.parametrize("pace, expected", [
    ("5:30", 5.5),
    ("4:00", 4.0),
    ("10:15", 10.25),
    ("fem", 5.5),
    ("5", 5.5),
    ("5:75", 5.5),
    (None, 5.5),
])
def test_parse_pace(pace, expected):
    assert parse_pace(pace) == pytest.approx(expected)


def test_format_time():
    assert format_time(27.5) == "27:30"
    assert format_time(75) == "01:15:00"
    assert format_time(0) == "00:00"


def test_format_distance():
    assert format_distance(850) == "850 m"
    assert format_distance(5240) == "5.2 km"
    assert format_distance(1000) == "1.0 km"


def test_route_statistics():
    route = make_line(11)
    result = RouteResult(
        waypoints=[route[0], route[-1]],
        route=route,
        elevation=samples_for([10, 12, 11, 15, 15, 14, 20, 18, 18, 19, 10]),
        distance=12345.0
    )

    stats = get_route_statistics(result, "6:00")

    assert stats.distance == pytest.approx(total_distance(route))
    assert stats.elevation_gain == 13
    assert stats.elevation_loss == 13
    assert stats.max_elevation == 20
    assert stats.min_elevation == 10
    assert stats.num_points == 11
    assert stats.estimated_time == timedelta(minutes=stats.distance / 1000 * 6)


def test_route_statistics_without_elevation():
    route = make_line(3)
    stats = get_route_statistics(RouteResult(route, route, [], 0.0))
    assert stats.max_elevation is None
    assert stats.elevation_gain == 0


def test_gpx_filename():
    route = [GeoPoint(0, 0), GeoPoint(0.047, 0)]  # ca 5.2 km
    assert gpx_filename(RouteType.LOOP, route) == "loop-route-5.2km.gpx"
    assert gpx_filename("out-and-back", route) == "out-and-back-route-5.2km.gpx"
    assert gpx_filename(RouteType.POINT_TO_POINT, []) == "point-to-point-route-0.0km.gpx"


def test_create_gpx_has_one_track_point_per_route_point():
    route = make_line(5)
    elevation = samples_for([1, 2, 3, 4, 5])

    xml = create_gpx(route, elevation, "Morgonrunda")

    assert 'version="1.1"' in xml
    gpx = gpxpy.parse(xml)
    assert len(gpx.tracks) == 1
    assert gpx.tracks[0].name == "Morgonrunda"
    assert len(gpx.tracks[0].segments) == 1
    points = gpx.tracks[0].segments[0].points
    assert len(points) == 5
    assert points[0].latitude == pytest.approx(route[0].lat)
    assert points[0].longitude == pytest.approx(route[0].lng)
    assert [p.elevation for p in points] == [1, 2, 3, 4, 5]


def test_create_gpx_without_elevation():
    route = make_line(3)
    gpx = gpxpy.parse(create_gpx(route))
    assert all(p.elevation is None for p in gpx.tracks[0].segments[0].points)
