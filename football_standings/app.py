from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from flask import Flask

from .app_utils import make_ok
from .config import setup_logger
from .routes.standings import SERVICE_EXTENSION, bp as standings_bp
from .services.standings_service import StandingsService

logger = setup_logger(__name__)


def create_app(service: Optional[StandingsService] = None) -> Flask:
    """
    Build the Flask application.

    ``service`` is created from the environment (FOOTBALL_API_KEY, REDIS_URL)
    when not supplied; tests pass one wired to fakes.
    """
    if service is None:
        from .composition.providers import build_service

        service = build_service()

    app = Flask(__name__)
    # Standings documents are forwarded with upstream key order intact.
    app.json.sort_keys = False
    app.extensions[SERVICE_EXTENSION] = service
    app.register_blueprint(standings_bp)

    @app.get("/health")
    def health():
        return make_ok(
            {"ok": True, "ts": datetime.now(timezone.utc).isoformat()},
            "OK",
            status_code=200,
        )

    logger.info("football_standings app created")
    return app
