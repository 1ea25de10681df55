"""
Konfiguration och konstanter för löparruttplaneraren
"""

import os

# Standardvärden
DEFAULT_DISTANCE = 5000  # meter
MIN_DISTANCE = 1000
MAX_DISTANCE = 30000
DISTANCE_STEP = 500
DEFAULT_PACE = "5:30"
DEFAULT_CENTER = [59.3293, 18.0686]  # Stockholm

# API URLs
ORS_BASE_URL = "https://api.openrouteservice.org"
ORS_GEOCODE_URL = f"{ORS_BASE_URL}/geocode/search"

# Routing-inställningar
MAX_WAYPOINTS_PER_REQUEST = 50  # ORS tar max 50 koordinater per anrop
REQUEST_TIMEOUT = 30  # sekunder per anrop
ROUTE_TIMEOUT = 90  # sekunder för hela rutten, alla delanrop
GEOCODE_TIMEOUT = 10
GEOCODE_RESULT_LIMIT = 5

# Terräng -> (ORS-profil, preferens)
TERRAIN_PROFILES = {
    "roads": ("foot-walking", "shortest"),
    "mixed": ("foot-walking", "recommended"),
    "trails": ("foot-hiking", "recommended"),
}

# Geometri
EARTH_RADIUS = 6371000  # meter
ROAD_FACTOR = 1.4  # vägar är ca 35-40% längre än fågelvägen
LOOP_WAYPOINT_COUNT = 8
LEG_WAYPOINT_COUNT = 4
RETURN_BEARING_OFFSET = 0.05  # radianer

# Höjdprofil
ELEVATION_CHART_MAX_POINTS = 100

# Cache-inställningar
CACHE_TTL = 3600  # 1 timme

# Loggning
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
