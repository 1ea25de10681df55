"""
Geografiska beräkningar och konvertering mellan koordinatformat
"""

import math
from typing import List, Sequence

from config import EARTH_RADIUS
from models import GeoPoint


def destination_point(origin: GeoPoint, distance: float, bearing: float) -> GeoPoint:
    """
    Beräkna punkten man når från origin efter en viss distans i en viss riktning

    Args:
        origin: Startpunkt
        distance: Distans i meter
        bearing: Riktning i radianer (0 = norr, medurs)

    Returns:
        Ny GeoPoint, longitud normaliserad till [-180, 180)
    """
    lat1 = math.radians(origin.lat)
    lng1 = math.radians(origin.lng)
    angular_distance = distance / EARTH_RADIUS

    sin_lat2 = (
        math.sin(lat1) * math.cos(angular_distance)
        + math.cos(lat1) * math.sin(angular_distance) * math.cos(bearing)
    )
    lat2 = math.asin(max(-1.0, min(1.0, sin_lat2)))

    lng2 = lng1 + math.atan2(
        math.sin(bearing) * math.sin(angular_distance) * math.cos(lat1),
        math.cos(angular_distance) - math.sin(lat1) * math.sin(lat2)
    )

    lng = (math.degrees(lng2) + 540) % 360 - 180
    return GeoPoint(lat=math.degrees(lat2), lng=lng)


def haversine_distance(p1: GeoPoint, p2: GeoPoint) -> float:
    """
    Storcirkelavstånd mellan två punkter (Haversine formula)

    Returns:
        Distans i meter
    """
    lat1, lng1 = math.radians(p1.lat), math.radians(p1.lng)
    lat2, lng2 = math.radians(p2.lat), math.radians(p2.lng)

    dlat = lat2 - lat1
    dlng = lng2 - lng1

    a = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlng / 2) ** 2
    c = 2 * math.asin(min(1.0, math.sqrt(a)))

    return EARTH_RADIUS * c


def calculate_bearing(p1: GeoPoint, p2: GeoPoint) -> float:
    """
    Beräkna bäring mellan två punkter

    Returns:
        Bäring i grader (0-360)
    """
    lat1, lng1 = math.radians(p1.lat), math.radians(p1.lng)
    lat2, lng2 = math.radians(p2.lat), math.radians(p2.lng)

    dlng = lng2 - lng1

    y = math.sin(dlng) * math.cos(lat2)
    x = math.cos(lat1) * math.sin(lat2) - math.sin(lat1) * math.cos(lat2) * math.cos(dlng)

    bearing = math.degrees(math.atan2(y, x))
    return (bearing + 360) % 360


def get_compass_direction(bearing: float) -> str:
    """Konvertera bäring i grader till kompassriktning (N, NE, E, ...)"""
    directions = ["N", "NNE", "NE", "ENE", "E", "ESE", "SE", "SSE",
                  "S", "SSW", "SW", "WSW", "W", "WNW", "NW", "NNW"]
    index = int((bearing + 11.25) / 22.5) % 16
    return directions[index]


# ORS vill ha [lng, lat], kartan och resten av koden använder (lat, lng).
# All omkastning av axlar ska gå via funktionerna nedan.

def to_lng_lat(points: Sequence[GeoPoint]) -> List[List[float]]:
    """GeoPoints -> ORS-format [[lng, lat], ...]"""
    return [[p.lng, p.lat] for p in points]


def from_lng_lat(coordinates: Sequence[Sequence[float]]) -> List[GeoPoint]:
    """ORS-koordinater [lng, lat(, höjd)] -> GeoPoints"""
    return [GeoPoint(lat=coord[1], lng=coord[0]) for coord in coordinates]


def to_lat_lng(points: Sequence[GeoPoint]) -> List[List[float]]:
    """GeoPoints -> kartformat [[lat, lng], ...]"""
    return [[p.lat, p.lng] for p in points]
