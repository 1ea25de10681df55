"""
Huvudsaklig routing-modul som kopplar ihop formgenerering och provider
"""

import asyncio
import logging
import random
from typing import Any, Awaitable, Callable, Coroutine, Optional, Sequence, TypeVar

import httpx

from config import MIN_DISTANCE, MAX_DISTANCE, ROUTE_TIMEOUT
from exceptions import NetworkError, ValidationError
from models import GeoPoint, RouteRequest, RouteResult, RouteType, Terrain
from routing_providers import OpenRouteServiceProvider
from shapes import generate_waypoints, move_waypoint

logger = logging.getLogger(__name__)

T = TypeVar("T")


def validate_request(request: RouteRequest, api_key: str) -> None:
    """Kontrollera indata innan något skickas till tjänsten"""
    if request.start is None:
        raise ValidationError("Välj en startpunkt först!")
    if RouteType(request.route_type) == RouteType.POINT_TO_POINT:
        if request.destination is None:
            raise ValidationError("Välj en slutpunkt först!")
    elif not MIN_DISTANCE <= request.target_distance <= MAX_DISTANCE:
        raise ValidationError(
            f"Distansen måste vara mellan {MIN_DISTANCE / 1000:.0f} och {MAX_DISTANCE / 1000:.0f} km"
        )
    if not api_key:
        raise ValidationError("Ange din OpenRouteService API-nyckel")


async def _with_timeout(awaitable: Awaitable[T], timeout: Optional[float]) -> T:
    # wait_for avbryter det pågående delanropet och därmed resten av delarna
    try:
        return await asyncio.wait_for(awaitable, timeout)
    except asyncio.TimeoutError as e:
        logger.warning("Ruttberäkningen tog mer än %s s", timeout)
        raise NetworkError("Ruttberäkningen tog för lång tid") from e


async def fetch_waypoints(
    waypoints: Sequence[GeoPoint],
    api_key: str,
    terrain: Terrain = Terrain.MIXED,
    is_cancelled: Optional[Callable[[], bool]] = None,
    timeout: Optional[float] = ROUTE_TIMEOUT,
    client: Optional[httpx.AsyncClient] = None
) -> RouteResult:
    """Hämta vägföljande rutt för färdiga via-punkter"""
    async with OpenRouteServiceProvider(api_key, client=client) as provider:
        return await _with_timeout(
            provider.fetch_route(waypoints, terrain, is_cancelled),
            timeout
        )


async def generate_route(
    request: RouteRequest,
    api_key: str,
    rng: Optional[random.Random] = None,
    is_cancelled: Optional[Callable[[], bool]] = None,
    timeout: Optional[float] = ROUTE_TIMEOUT,
    client: Optional[httpx.AsyncClient] = None
) -> RouteResult:
    """
    Generera en ny rutt från en förfrågan

    Args:
        request: Start, mål, distans, rutttyp och underlag
        api_key: OpenRouteService API-nyckel
        rng: Slumpkälla för ruttens riktning
        is_cancelled: Returnerar True om en nyare förfrågan har startats
        timeout: Maxtid i sekunder för alla delanrop tillsammans
        client: Befintlig httpx-klient, annars skapas en

    Returns:
        RouteResult
    """
    validate_request(request, api_key)

    waypoints = generate_waypoints(request, rng)
    logger.info(
        "Genererar %s-rutt, %.0f m, underlag %s, %d via-punkter",
        RouteType(request.route_type).value,
        request.target_distance,
        Terrain(request.terrain).value,
        len(waypoints)
    )

    return await fetch_waypoints(
        waypoints, api_key, request.terrain, is_cancelled, timeout, client
    )


async def reroute_waypoint(
    waypoints: Sequence[GeoPoint],
    index: int,
    position: GeoPoint,
    api_key: str,
    terrain: Terrain = Terrain.MIXED,
    is_cancelled: Optional[Callable[[], bool]] = None,
    timeout: Optional[float] = ROUTE_TIMEOUT,
    client: Optional[httpx.AsyncClient] = None
) -> RouteResult:
    """Flytta en via-punkt och beräkna om hela rutten"""
    if not api_key:
        raise ValidationError("Ange din OpenRouteService API-nyckel")

    updated = move_waypoint(waypoints, index, position)
    logger.info("Via-punkt %d flyttad till %.5f, %.5f", index, position.lat, position.lng)

    return await fetch_waypoints(updated, api_key, terrain, is_cancelled, timeout, client)


def run_sync(coro: Coroutine[Any, Any, T]) -> T:
    """Kör en korutin från Streamlit-skriptet, som är synkront"""
    return asyncio.run(coro)
