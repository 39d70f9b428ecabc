"""
Fixed values for the Football Standings proxy.
Anything an operator may want to tune lives in config.py / settings.py instead.
"""

# ============================================================================
# UPSTREAM (football-data.org)
# ============================================================================

FOOTBALL_DATA_BASE_URL = "https://api.football-data.org/v4"
FOOTBALL_DATA_AUTH_HEADER = "X-Auth-Token"
FOOTBALL_DATA_SOURCE = "football-data"

# ============================================================================
# CACHE
# ============================================================================

STANDINGS_CACHE_PREFIX = "standings:"
STANDINGS_CACHE_TTL = 900  # 15 minutes; standings change a few times per day
CACHE_HIT = "cache"
CACHE_MISS = "upstream"

# ============================================================================
# HTTP SURFACE
# ============================================================================

DEV_SERVER_HOST = "0.0.0.0"  # Bind to all interfaces
DEV_SERVER_PORT = 5000
STANDINGS_ERROR_MESSAGE = "Failed to fetch standings"

# ============================================================================
# COMPETITIONS & TABLE ZONES
# ============================================================================

DEFAULT_COMPETITIONS = (
    {"id": 2021, "name": "Premier League", "code": "PL"},
    {"id": 2014, "name": "La Liga", "code": "PD"},
    {"id": 2019, "name": "Serie A", "code": "SA"},
    {"id": 2002, "name": "Bundesliga", "code": "BL1"},
    {"id": 2015, "name": "Ligue 1", "code": "FL1"},
)

TOTAL_STANDING_TYPE = "TOTAL"
CHAMPIONS_LEAGUE_SPOTS = 4  # positions 1-4 highlighted
RELEGATION_OFFSET = 3  # position >= table size - 3 highlighted
ZONE_CHAMPIONS_LEAGUE = "champions_league"
ZONE_RELEGATION = "relegation"
