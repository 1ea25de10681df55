"""
Routing-provider: OpenRouteService directions

Gör om via-punkter till en vägföljande rutt med höjddata. ORS tar
högst MAX_WAYPOINTS_PER_REQUEST koordinater per anrop, så längre
sekvenser delas upp i överlappande delar som hämtas i tur och ordning
och sätts ihop.
"""

import logging
from typing import Callable, List, Optional, Sequence, Tuple

import httpx

from config import (
    ORS_BASE_URL,
    MAX_WAYPOINTS_PER_REQUEST,
    REQUEST_TIMEOUT,
    TERRAIN_PROFILES
)
from exceptions import NetworkError, RouteCancelled, ServiceError, ValidationError
from geo import from_lng_lat, haversine_distance, to_lng_lat
from models import ElevationSample, GeoPoint, RoutePoint, RouteResult, Terrain

logger = logging.getLogger(__name__)


def terrain_parameters(terrain: Terrain) -> Tuple[str, str]:
    """
    Översätt underlag till ORS-profil och preferens

    Returns:
        (profil, preferens), t.ex. ("foot-hiking", "recommended")
    """
    try:
        return TERRAIN_PROFILES[Terrain(terrain).value]
    except ValueError:
        raise ValidationError(f"Okänt underlag: {terrain}") from None


def split_into_chunks(waypoints: Sequence, max_size: int) -> List[list]:
    """
    Dela upp via-punkter i delar om högst max_size punkter

    Intilliggande delar delar exakt en punkt (kopplingspunkten).
    """
    if max_size < 2:
        raise ValueError("max_size must be at least 2")

    chunks = []
    for i in range(0, len(waypoints), max_size - 1):
        chunk = list(waypoints[i:i + max_size])
        if len(chunk) < 2:
            break
        chunks.append(chunk)
    return chunks


def _error_message(response: httpx.Response) -> str:
    """Plocka ut ORS felmeddelande, annars ett generellt meddelande"""
    try:
        data = response.json()
    except ValueError:
        data = None

    if isinstance(data, dict):
        error = data.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if isinstance(error, str) and error:
            return error

    return f"Routing misslyckades med status {response.status_code}"


def parse_chunk(data: dict) -> Tuple[List[RoutePoint], List[ElevationSample], float]:
    """
    Parsa ett ORS GeoJSON-svar

    Höjdprofilens distans räknas i delens egen referensram, från 0 i
    dess första punkt, på de råa koordinaterna.

    Returns:
        (ruttpunkter, höjdprofil, distans i meter)
    """
    features = data.get("features") if isinstance(data, dict) else None
    if not isinstance(features, list) or not features or not isinstance(features[0], dict):
        raise ServiceError("Ogiltigt svar från routingtjänsten")

    geometry = features[0].get("geometry")
    raw = geometry.get("coordinates") if isinstance(geometry, dict) else None
    if not isinstance(raw, list):
        raise ServiceError("Ogiltigt svar från routingtjänsten")

    # En Point-geometri har ett koordinatpar i stället för en lista av par
    coordinates = [c for c in raw if isinstance(c, (list, tuple)) and len(c) >= 2]
    if not coordinates:
        raise ServiceError("Ogiltigt svar från routingtjänsten")

    try:
        points = from_lng_lat(coordinates)
    except (TypeError, ValueError, ValidationError) as e:
        raise ServiceError("Ogiltigt svar från routingtjänsten") from e

    samples = []
    cumulative = 0.0
    for i, coord in enumerate(coordinates):
        if i > 0:
            cumulative += haversine_distance(points[i - 1], points[i])
        elevation = coord[2] if len(coord) > 2 and isinstance(coord[2], (int, float)) else 0.0
        samples.append(ElevationSample(distance=cumulative, elevation=elevation))

    properties = features[0].get("properties")
    summary = properties.get("summary") if isinstance(properties, dict) else None
    distance = summary.get("distance") if isinstance(summary, dict) else None
    if not isinstance(distance, (int, float)):
        distance = 0
    if distance == 0:
        distance = cumulative

    return points, samples, float(distance)


class RoutingProvider:
    """Basklass för routing-providers"""

    async def fetch_route(
        self,
        waypoints: Sequence[GeoPoint],
        terrain: Terrain = Terrain.MIXED,
        is_cancelled: Optional[Callable[[], bool]] = None
    ) -> RouteResult:
        raise NotImplementedError


class OpenRouteServiceProvider(RoutingProvider):
    """OpenRouteService routing provider"""

    def __init__(
        self,
        api_key: str,
        client: Optional[httpx.AsyncClient] = None,
        base_url: str = ORS_BASE_URL,
        max_waypoints: int = MAX_WAYPOINTS_PER_REQUEST,
        timeout: float = REQUEST_TIMEOUT
    ):
        self.name = "ORS"
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.max_waypoints = max_waypoints
        self._client = client
        self._owns_client = client is None
        self._timeout = timeout

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout)
        return self._client

    async def aclose(self):
        if self._owns_client and self._client is not None:
            await self._client.aclose()
            self._client = None

    def directions_url(self, profile: str) -> str:
        return f"{self.base_url}/v2/directions/{profile}/geojson"

    async def fetch_route(
        self,
        waypoints: Sequence[GeoPoint],
        terrain: Terrain = Terrain.MIXED,
        is_cancelled: Optional[Callable[[], bool]] = None
    ) -> RouteResult:
        """
        Hämta vägföljande rutt genom alla via-punkter

        Args:
            waypoints: Via-punkter, minst två
            terrain: Önskat underlag
            is_cancelled: Anropas före varje delanrop; returnerar True om
                en nyare förfrågan har ersatt denna

        Returns:
            RouteResult med rutt, höjdprofil och distans
        """
        if not self.api_key:
            raise ValidationError("OpenRouteService API-nyckel saknas")
        if len(waypoints) < 2:
            raise ValidationError("Minst två via-punkter krävs")

        profile, preference = terrain_parameters(terrain)
        chunks = split_into_chunks(waypoints, self.max_waypoints)

        route: List[RoutePoint] = []
        elevation: List[ElevationSample] = []
        total_distance = 0.0

        # Delarna hämtas i tur och ordning, de delar kopplingspunkter
        for n, chunk in enumerate(chunks):
            if is_cancelled is not None and is_cancelled():
                logger.info("Ruttberäkning avbruten före del %d av %d", n + 1, len(chunks))
                raise RouteCancelled()

            points, samples, distance = await self.fetch_chunk(chunk, profile, preference)

            offset = 0.0
            if n > 0:
                points = points[1:]
                samples = samples[1:]
                offset = elevation[-1].distance if elevation else 0.0

            route.extend(points)
            elevation.extend(
                ElevationSample(distance=s.distance + offset, elevation=s.elevation)
                for s in samples
            )
            total_distance += distance

        logger.info(
            "Rutt klar: %d via-punkter, %d delanrop, %d punkter, %.0f m",
            len(waypoints), len(chunks), len(route), total_distance
        )

        return RouteResult(
            waypoints=list(waypoints),
            route=route,
            elevation=elevation,
            distance=total_distance
        )

    async def fetch_chunk(
        self,
        waypoints: Sequence[GeoPoint],
        profile: str,
        preference: str
    ) -> Tuple[List[RoutePoint], List[ElevationSample], float]:
        """Ett anrop mot ORS directions för högst max_waypoints punkter"""

        url = self.directions_url(profile)
        headers = {
            "Authorization": self.api_key,
            "Content-Type": "application/json"
        }
        body = {
            "coordinates": to_lng_lat(waypoints),
            "instructions": False,
            "elevation": True,
            "preference": preference
        }

        logger.debug("POST %s med %d koordinater (%s)", url, len(waypoints), preference)

        try:
            response = await self.client.post(url, json=body, headers=headers)
        except httpx.TimeoutException as e:
            logger.warning("Routing-anrop tog för lång tid: %s", e)
            raise NetworkError("Routingtjänsten svarade inte i tid") from e
        except httpx.RequestError as e:
            logger.warning("Routing-anrop misslyckades: %s", e)
            raise NetworkError(f"Kunde inte nå routingtjänsten: {e}") from e

        if not response.is_success:
            message = _error_message(response)
            logger.warning("ORS svarade %d: %s", response.status_code, message)
            raise ServiceError(message, status_code=response.status_code)

        try:
            data = response.json()
        except ValueError as e:
            raise ServiceError("Ogiltigt svar från routingtjänsten") from e

        return parse_chunk(data)
