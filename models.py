"""
Datamodeller för löparruttplaneraren
"""

from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from typing import List, Optional

from config import DEFAULT_DISTANCE
from exceptions import ValidationError


class RouteType(str, Enum):
    """Ruttens form"""
    LOOP = "loop"
    OUT_AND_BACK = "out-and-back"
    POINT_TO_POINT = "point-to-point"


class Terrain(str, Enum):
    """Önskat underlag"""
    ROADS = "roads"
    MIXED = "mixed"
    TRAILS = "trails"


@dataclass(frozen=True)
class GeoPoint:
    """En geografisk punkt (lat, lng) i grader"""
    lat: float
    lng: float

    def __post_init__(self):
        if not (-90 <= self.lat <= 90 and -180 <= self.lng <= 180):
            raise ValidationError(f"Ogiltiga koordinater: {self.lat}, {self.lng}")


# Punkterna i den vägföljande rutten har samma form som en GeoPoint
RoutePoint = GeoPoint


@dataclass(frozen=True)
class ElevationSample:
    """Höjd vid en viss ackumulerad distans längs rutten"""
    distance: float  # meter från start
    elevation: float  # meter över havet


@dataclass(frozen=True)
class RouteRequest:
    """Indata för en ruttgenerering"""
    start: Optional[GeoPoint]
    destination: Optional[GeoPoint] = None
    target_distance: float = DEFAULT_DISTANCE
    route_type: RouteType = RouteType.LOOP
    terrain: Terrain = Terrain.MIXED


@dataclass(frozen=True)
class RouteResult:
    """Resultatet av en ruttberäkning"""
    waypoints: List[GeoPoint]
    route: List[RoutePoint]
    elevation: List[ElevationSample]
    distance: float  # meter, summan av tjänstens delsträckor


@dataclass
class RouteStats:
    """Statistik för visning och export"""
    distance: float
    elevation_gain: float
    elevation_loss: float
    estimated_time: timedelta
    num_points: int
    max_elevation: Optional[float] = None
    min_elevation: Optional[float] = None


@dataclass
class Place:
    """Ett sökresultat från geokodningen"""
    name: str
    lat: float
    lng: float
    country: Optional[str] = None
    region: Optional[str] = None

    @property
    def point(self) -> GeoPoint:
        return GeoPoint(self.lat, self.lng)
