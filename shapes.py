"""
Generering av ruttformer: loop, fram-och-tillbaka och punkt-till-punkt

Generatorerna ger en grov polygon av via-punkter som routingtjänsten
sedan anpassar till vägnätet.
"""

import math
import random
from typing import List, Optional, Sequence

from config import (
    ROAD_FACTOR,
    LOOP_WAYPOINT_COUNT,
    LEG_WAYPOINT_COUNT,
    RETURN_BEARING_OFFSET
)
from exceptions import ValidationError
from geo import destination_point
from models import GeoPoint, RouteRequest, RouteType


def _random_bearing(rng: Optional[random.Random] = None) -> float:
    """Slumpad riktning i [0, 2π)"""
    source = rng if rng is not None else random
    return source.random() * 2 * math.pi


def loop_radius(target_distance: float) -> float:
    """Cirkelns radie så att omkretsen gånger vägfaktorn blir måldistansen"""
    return target_distance / (2 * math.pi * ROAD_FACTOR)


def generate_loop(
    start: GeoPoint,
    target_distance: float,
    rng: Optional[random.Random] = None
) -> List[GeoPoint]:
    """
    Skapa via-punkter för en loop som börjar och slutar i start

    Startpunkten ligger på cirkeln, inte i dess centrum. Cirkelns centrum
    läggs på avståndet radius från start i en slumpad riktning, så varje
    anrop ger en ny variant.

    Args:
        start: Startpunkt
        target_distance: Önskad distans i meter
        rng: Slumpkälla, t.ex. random.Random(seed) i tester

    Returns:
        LOOP_WAYPOINT_COUNT punkter runt cirkeln plus den första igen
    """
    radius = loop_radius(target_distance)
    bearing = _random_bearing(rng)
    center = destination_point(start, radius, bearing)

    # Börja mittemot centrumriktningen, dvs. i startpunkten
    start_angle = bearing + math.pi
    waypoints = []
    for i in range(LOOP_WAYPOINT_COUNT):
        angle = start_angle + (2 * math.pi * i) / LOOP_WAYPOINT_COUNT
        waypoints.append(destination_point(center, radius, angle))

    # Stäng loopen
    waypoints.append(waypoints[0])

    return waypoints


def generate_out_and_back(
    start: GeoPoint,
    target_distance: float,
    rng: Optional[random.Random] = None
) -> List[GeoPoint]:
    """
    Skapa via-punkter för en fram-och-tillbaka-runda

    Returvägen går i en något vriden riktning så att rutten blir en smal
    lins och kan ta en parallell gata tillbaka.

    Args:
        start: Startpunkt
        target_distance: Önskad total distans i meter
        rng: Slumpkälla

    Returns:
        Via-punkter som börjar och slutar exakt i start
    """
    leg_length = target_distance / 2 / ROAD_FACTOR
    bearing = _random_bearing(rng)
    return_bearing = bearing + RETURN_BEARING_OFFSET

    waypoints = [start]
    for i in range(1, LEG_WAYPOINT_COUNT + 1):
        distance = leg_length * i / LEG_WAYPOINT_COUNT
        waypoints.append(destination_point(start, distance, bearing))

    # Vändpunkten delas av båda benen
    for i in range(LEG_WAYPOINT_COUNT - 1, 0, -1):
        distance = leg_length * i / LEG_WAYPOINT_COUNT
        waypoints.append(destination_point(start, distance, return_bearing))

    waypoints.append(start)

    return waypoints


def generate_point_to_point(start: GeoPoint, destination: GeoPoint) -> List[GeoPoint]:
    """Punkt-till-punkt: routingtjänsten sköter hela formen"""
    return [start, destination]


def generate_waypoints(
    request: RouteRequest,
    rng: Optional[random.Random] = None
) -> List[GeoPoint]:
    """Välj generator utifrån rutttyp"""
    if request.start is None:
        raise ValidationError("Välj en startpunkt först!")

    route_type = RouteType(request.route_type)
    if route_type == RouteType.LOOP:
        return generate_loop(request.start, request.target_distance, rng)
    if route_type == RouteType.OUT_AND_BACK:
        return generate_out_and_back(request.start, request.target_distance, rng)

    if request.destination is None:
        raise ValidationError("Välj en slutpunkt först!")
    return generate_point_to_point(request.start, request.destination)


def move_waypoint(
    waypoints: Sequence[GeoPoint],
    index: int,
    position: GeoPoint
) -> List[GeoPoint]:
    """
    Flytta en via-punkt

    Flyttas den första punkten i en sluten rutt (loop eller
    fram-och-tillbaka) flyttas även den sista, så att rutten förblir sluten.

    Args:
        waypoints: Nuvarande via-punkter
        index: Index för punkten som flyttas
        position: Ny position

    Returns:
        Ny lista med via-punkter
    """
    if not 0 <= index < len(waypoints):
        raise ValidationError(f"Via-punkt {index} finns inte")

    closed = len(waypoints) > 2 and waypoints[0] == waypoints[-1]
    updated = list(waypoints)
    updated[index] = position
    if index == 0 and closed:
        updated[-1] = position

    return updated
