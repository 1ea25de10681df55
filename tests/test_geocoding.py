from unittest import mock

import pytest
import requests

from config import ORS_GEOCODE_URL
from exceptions import NetworkError, ServiceError, ValidationError
from geocoding import search_location


def fake_response(status_code=200, payload=None):
    response = mock.Mock()
    response.status_code = status_code
    response.json.return_value = payload
    return response


PAYLOAD = {
    "features": [
        {
            "geometry": {"coordinates": [18.0649, 59.3326]},
            "properties": {"label": "Stureplan, Stockholm, Sverige", "country": "Sverige", "region": "Stockholm"},
        },
        {
            "geometry": {"coordinates": []},
            "properties": {"label": "Utan koordinater"},
        },
    ]
}


def test_search_location_parses_features():
    with mock.patch("geocoding.requests.get", return_value=fake_response(payload=PAYLOAD)) as get:
        places = search_location("  Stureplan ", "test-key")

    assert len(places) == 1
    place = places[0]
    assert place.name == "Stureplan, Stockholm, Sverige"
    assert place.lat == 59.3326
    assert place.lng == 18.0649
    assert place.country == "Sverige"
    assert place.point.lat == 59.3326

    args, kwargs = get.call_args
    assert args[0] == ORS_GEOCODE_URL
    assert kwargs["params"] == {"api_key": "test-key", "text": "Stureplan", "size": 5}


@pytest.mark.parametrize("query", ["", " ", "a", None])
def test_short_query_returns_nothing(query):
    with mock.patch("geocoding.requests.get") as get:
        assert search_location(query, "test-key") == []
    get.assert_not_called()


def test_search_requires_api_key():
    with pytest.raises(ValidationError):
        search_location("Stureplan", "")


def test_search_service_error():
    with mock.patch("geocoding.requests.get", return_value=fake_response(status_code=401)):
        with pytest.raises(ServiceError):
            search_location("Stureplan", "bad-key")


def test_search_network_error():
    with mock.patch("geocoding.requests.get", side_effect=requests.ConnectionError("down")):
        with pytest.raises(NetworkError):
            search_location("Stureplan", "test-key")


def test_search_without_features():
    with mock.patch("geocoding.requests.get", return_value=fake_response(payload={})):
        assert search_location("Stureplan", "test-key") == []


def test_search_response_that_is_not_json():
    response = fake_response()
    response.json.side_effect = ValueError("Expecting value")

    with mock.patch("geocoding.requests.get", return_value=response):
        with pytest.raises(ServiceError) as excinfo:
            search_location("Stureplan", "test-key")

    assert str(excinfo.value) == "Ogiltigt svar från söktjänsten"
    assert excinfo.value.status_code is None


def test_search_skips_malformed_features():
    payload = {
        "features": [
            "oops",
            {"geometry": "oops"},
            {"geometry": {"coordinates": ["a", "b"]}},
            {"geometry": {"coordinates": [18.0, 95.0]}},
            PAYLOAD["features"][0],
        ]
    }
    with mock.patch("geocoding.requests.get", return_value=fake_response(payload=payload)):
        places = search_location("Stureplan", "test-key")

    assert [p.name for p in places] == ["Stureplan, Stockholm, Sverige"]
