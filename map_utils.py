"""
Kartfunktioner för visualisering
"""

from typing import Dict, List, Optional, Sequence

import folium

from config import ELEVATION_CHART_MAX_POINTS
from geo import to_lat_lng
from models import ElevationSample, GeoPoint, RoutePoint


def create_map(
    center: List[float],
    waypoints: Sequence[GeoPoint] = (),
    route: Sequence[RoutePoint] = (),
    start_marker: Optional[GeoPoint] = None,
    end_marker: Optional[GeoPoint] = None,
    selected_waypoint: Optional[int] = None
) -> folium.Map:
    """
    Skapa Folium-karta med rutt, via-punkter och markörer

    Args:
        center: Kartans centrum [lat, lng]
        waypoints: Via-punkter från formgeneratorn
        route: Vägföljande rutt
        start_marker: Startpunkt
        end_marker: Slutpunkt (punkt-till-punkt)
        selected_waypoint: Index för via-punkten som ska flyttas

    Returns:
        Folium Map-objekt
    """
    m = folium.Map(
        location=center,
        zoom_start=13,
        control_scale=True
    )

    # Lägg till startmarkör
    if start_marker:
        folium.Marker(
            to_lat_lng([start_marker])[0],
            popup="Start",
            icon=folium.Icon(color="green", icon="play")
        ).add_to(m)

    # Lägg till slutmarkör
    if end_marker:
        folium.Marker(
            to_lat_lng([end_marker])[0],
            popup="Mål",
            icon=folium.Icon(color="red", icon="stop")
        ).add_to(m)

    # Via-punkter, numrerade från 1. Sista punkten i en sluten rutt är
    # samma som den första och ritas inte igen.
    closed = len(waypoints) > 2 and waypoints[0] == waypoints[-1]
    shown = waypoints[:-1] if closed else waypoints
    for i, location in enumerate(to_lat_lng(shown)):
        folium.CircleMarker(
            location,
            radius=7 if i == selected_waypoint else 5,
            color="orange" if i == selected_waypoint else "gray",
            fill=True,
            fill_opacity=0.9,
            tooltip=f"Via-punkt {i + 1}"
        ).add_to(m)

    # Rita rutt
    if route:
        route_coords = to_lat_lng(route)

        folium.PolyLine(
            route_coords,
            color="blue",
            weight=4,
            opacity=0.8
        ).add_to(m)

        # Anpassa zoom för att visa hela rutten
        if len(route_coords) > 1:
            bounds = [[min(p[0] for p in route_coords), min(p[1] for p in route_coords)],
                      [max(p[0] for p in route_coords), max(p[1] for p in route_coords)]]
            m.fit_bounds(bounds)

    return m


def elevation_profile(
    samples: Sequence[ElevationSample],
    max_points: int = ELEVATION_CHART_MAX_POINTS
) -> Dict[str, List[float]]:
    """
    Data för höjdprofilen, glesad till ungefär max_points punkter

    Returns:
        {"Distans (km)": [...], "Höjd (m)": [...]}
    """
    if not samples:
        return {"Distans (km)": [], "Höjd (m)": []}

    step = max(1, -(-len(samples) // max_points))
    sampled = list(samples[::step])
    if sampled[-1] is not samples[-1]:
        sampled.append(samples[-1])

    return {
        "Distans (km)": [s.distance / 1000 for s in sampled],
        "Höjd (m)": [s.elevation for s in sampled]
    }
