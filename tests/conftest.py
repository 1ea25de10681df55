import json
import sys
from pathlib import Path

import httpx
import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT))

from models import GeoPoint  # noqa: E402


class FakeORS:
    """Svarar som ORS directions: ekar koordinaterna med höjd = index"""

    def __init__(self, summary_distance=1000.0, fail_on=None, status_code=500, payload=None):
        self.requests = []
        self.summary_distance = summary_distance
        self.fail_on = fail_on
        self.status_code = status_code
        self.payload = payload

    @property
    def bodies(self):
        return [json.loads(r.content) for r in self.requests]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.fail_on is not None and len(self.requests) == self.fail_on:
            if self.payload is None:
                return httpx.Response(self.status_code, text="upstream error")
            return httpx.Response(self.status_code, json=self.payload)

        body = json.loads(request.content)
        coordinates = [[lng, lat, float(i)] for i, (lng, lat) in enumerate(body["coordinates"])]
        properties = {}
        if self.summary_distance is not None:
            properties["summary"] = {"distance": self.summary_distance}
        return httpx.Response(200, json={
            "type": "FeatureCollection",
            "features": [{
                "type": "Feature",
                "geometry": {"type": "LineString", "coordinates": coordinates},
                "properties": properties
            }]
        })

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self))


@pytest.fixture
def fake_ors():
    return FakeORS()


@pytest.fixture
def london():
    return GeoPoint(lat=51.5074, lng=-0.1278)


def make_line(n, start=GeoPoint(59.3293, 18.0686), step=0.001):
    """n punkter i en rak linje österut"""
    return [GeoPoint(start.lat, start.lng + i * step) for i in range(n)]
