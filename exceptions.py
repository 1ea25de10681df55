"""
Felklasser för ruttgenerering
"""

from typing import Optional


class RoutingError(Exception):
    """Basklass för alla fel vid ruttberäkning"""


class ValidationError(RoutingError):
    """Felaktig eller saknad indata, t.ex. startpunkt eller API-nyckel"""


class NetworkError(RoutingError):
    """Anropet nådde aldrig tjänsten eller tog för lång tid"""


class ServiceError(RoutingError):
    """Tjänsten svarade med fel eller med ett svar utan geometri"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class RouteCancelled(Exception):
    """Ruttberäkningen avbröts eftersom en nyare förfrågan ersatt den"""
