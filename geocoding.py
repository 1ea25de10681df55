"""
Geokodning: sök platser via OpenRouteService
"""

import logging
from typing import List

import requests

from config import ORS_GEOCODE_URL, GEOCODE_TIMEOUT, GEOCODE_RESULT_LIMIT
from exceptions import NetworkError, ServiceError, ValidationError
from geo import from_lng_lat
from models import Place

logger = logging.getLogger(__name__)


def search_location(query: str, api_key: str, size: int = GEOCODE_RESULT_LIMIT) -> List[Place]:
    """
    Sök platser efter namn eller adress

    Args:
        query: Söktext, t.ex. "Kungsgatan 1, Stockholm"
        api_key: OpenRouteService API-nyckel
        size: Max antal träffar

    Returns:
        Lista med Place, tom lista för för kort söktext
    """
    if not query or len(query.strip()) < 2:
        return []

    if not api_key:
        raise ValidationError("API-nyckel krävs för platssökning")

    params = {
        "api_key": api_key,
        "text": query.strip(),
        "size": size
    }

    try:
        response = requests.get(ORS_GEOCODE_URL, params=params, timeout=GEOCODE_TIMEOUT)
    except requests.RequestException as e:
        logger.warning("Platssökning för %r misslyckades: %s", query, e)
        raise NetworkError("Kunde inte nå söktjänsten") from e

    if response.status_code != 200:
        logger.warning("Platssökning svarade %d", response.status_code)
        raise ServiceError("Platssökningen misslyckades", status_code=response.status_code)

    try:
        data = response.json()
    except ValueError as e:
        logger.warning("Platssökning gav ett svar som inte är JSON")
        raise ServiceError("Ogiltigt svar från söktjänsten") from e

    features = data.get("features") if isinstance(data, dict) else None
    places = []
    for feature in features if isinstance(features, list) else []:
        if not isinstance(feature, dict):
            continue
        properties = feature.get("properties")
        if not isinstance(properties, dict):
            properties = {}
        geometry = feature.get("geometry")
        coords = geometry.get("coordinates") if isinstance(geometry, dict) else None
        if not isinstance(coords, list) or len(coords) < 2:
            continue
        try:
            point = from_lng_lat([coords])[0]
        except (TypeError, ValidationError):
            continue
        places.append(Place(
            name=properties.get("label", "Okänd plats"),
            lat=point.lat,
            lng=point.lng,
            country=properties.get("country"),
            region=properties.get("region")
        ))

    return places
