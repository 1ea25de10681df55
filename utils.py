"""
Hjälpfunktioner för löparruttplaneraren
"""

from datetime import datetime, timedelta, timezone
from typing import List, Optional, Sequence, Tuple

import gpxpy
import gpxpy.gpx

from geo import haversine_distance
from models import ElevationSample, RoutePoint, RouteResult, RouteStats, RouteType


def total_distance(route: Sequence[RoutePoint]) -> float:
    """
    Beräkna total distans längs en rutt (Haversine formula)

    Args:
        route: Lista med RoutePoint

    Returns:
        Total distans i meter, 0 för färre än två punkter
    """
    if len(route) < 2:
        return 0.0

    return sum(
        haversine_distance(route[i], route[i + 1])
        for i in range(len(route) - 1)
    )


def elevation_gain_loss(samples: Sequence[ElevationSample]) -> Tuple[float, float]:
    """
    Beräkna total höjdökning och höjdförlust

    Args:
        samples: Höjdprofil

    Returns:
        (ökning, förlust) i meter, båda positiva
    """
    gain = 0.0
    loss = 0.0

    for prev, current in zip(samples, samples[1:]):
        diff = current.elevation - prev.elevation
        if diff > 0:
            gain += diff
        else:
            loss += -diff

    return gain, loss


def parse_pace(pace_str: str) -> float:
    """
    Konvertera tempo-sträng till minuter per km

    Args:
        pace_str: Tempo som "5:30"

    Returns:
        Minuter per km
    """
    try:
        parts = pace_str.split(":")
        if len(parts) == 2:
            minutes = int(parts[0])
            seconds = int(parts[1])
            if minutes >= 0 and 0 <= seconds < 60:
                return minutes + seconds / 60
    except (AttributeError, ValueError):
        pass
    return 5.5  # Default


def format_time(minutes: float) -> str:
    """
    Formatera tid från minuter till sträng

    Args:
        minutes: Antal minuter

    Returns:
        Formaterad tidssträng (HH:MM:SS eller MM:SS)
    """
    total_seconds = int(round(minutes * 60))
    hours, rest = divmod(total_seconds, 3600)
    mins, secs = divmod(rest, 60)

    if hours > 0:
        return f"{hours:02d}:{mins:02d}:{secs:02d}"
    else:
        return f"{mins:02d}:{secs:02d}"


def format_distance(meters: float) -> str:
    """Visa distans som "850 m" eller "5.2 km" """
    if meters >= 1000:
        return f"{meters / 1000:.1f} km"
    return f"{round(meters)} m"


def get_route_statistics(result: RouteResult, pace: str = "5:30") -> RouteStats:
    """
    Beräkna statistik för en rutt

    Distansen räknas från den sammansatta geometrin, inte från
    tjänstens summerade delsträckor.

    Args:
        result: RouteResult från routingen
        pace: Tempo som "5:30" min/km

    Returns:
        RouteStats
    """
    distance = total_distance(result.route)
    gain, loss = elevation_gain_loss(result.elevation)

    elevations = [s.elevation for s in result.elevation]
    time_minutes = (distance / 1000) * parse_pace(pace)

    return RouteStats(
        distance=distance,
        elevation_gain=gain,
        elevation_loss=loss,
        estimated_time=timedelta(minutes=time_minutes),
        num_points=len(result.route),
        max_elevation=max(elevations) if elevations else None,
        min_elevation=min(elevations) if elevations else None
    )


def gpx_filename(route_type: RouteType, route: Sequence[RoutePoint]) -> str:
    """Filnamn som "loop-route-5.2km.gpx" """
    km = round(total_distance(route) / 100) / 10
    return f"{RouteType(route_type).value}-route-{km:.1f}km.gpx"


def create_gpx(
    route: Sequence[RoutePoint],
    elevation: Optional[Sequence[ElevationSample]] = None,
    name: str = "Löprunda"
) -> str:
    """
    Skapa GPX-fil från en rutt

    Args:
        route: Ruttpunkter
        elevation: Höjdprofil, samma index som route
        name: Namn på rutten

    Returns:
        GPX 1.1 som sträng
    """
    gpx = gpxpy.gpx.GPX()

    # Lägg till metadata
    gpx.creator = "Löparruttplanerare"
    gpx.name = name
    gpx.time = datetime.now(timezone.utc)
    gpx.description = f"Genererad rutt på {total_distance(route) / 1000:.2f} km"

    # Skapa track
    gpx_track = gpxpy.gpx.GPXTrack()
    gpx_track.name = name
    gpx_track.type = "running"
    gpx.tracks.append(gpx_track)

    # Skapa segment
    gpx_segment = gpxpy.gpx.GPXTrackSegment()
    gpx_track.segments.append(gpx_segment)

    elevations: List[Optional[float]] = [None] * len(route)
    if elevation and len(elevation) == len(route):
        elevations = [s.elevation for s in elevation]

    # Lägg till punkter
    for point, ele in zip(route, elevations):
        gpx_segment.points.append(
            gpxpy.gpx.GPXTrackPoint(point.lat, point.lng, elevation=ele)
        )

    return gpx.to_xml(version="1.1")
