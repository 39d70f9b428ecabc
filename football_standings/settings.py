import os
from dotenv import load_dotenv

from .constants import DEV_SERVER_HOST, DEV_SERVER_PORT, FOOTBALL_DATA_BASE_URL

# Load .env from repo root (dotenv auto-walks up from CWD)
load_dotenv()


def _get_bool(name: str, default: bool = False) -> bool:
    val = os.getenv(name)
    if val is None:
        return default
    return str(val).strip().lower() in {"1", "true", "yes", "on"}


def _read_secret_file(path: str | None) -> str | None:
    if not path:
        return None
    try:
        with open(path, "r", encoding="utf-8") as f:
            return f.read().strip()
    except OSError:
        return None


# --- Server ---
HOST = os.getenv("HOST", DEV_SERVER_HOST)
PORT = int(os.getenv("PORT", str(DEV_SERVER_PORT)))

# --- football-data.org ---
FOOTBALL_API_KEY = os.getenv("FOOTBALL_API_KEY") or _read_secret_file(os.getenv("FOOTBALL_API_KEY_FILE"))
FOOTBALL_API_BASE = os.getenv("FOOTBALL_API_BASE", FOOTBALL_DATA_BASE_URL).rstrip("/")

# --- Cache store ---
REDIS_URL = os.getenv("REDIS_URL")
CACHE_FAIL_OPEN = _get_bool("CACHE_FAIL_OPEN", True)   # cache outage -> direct upstream passthrough
SINGLE_FLIGHT = _get_bool("SINGLE_FLIGHT", True)       # share one upstream call per concurrent miss
