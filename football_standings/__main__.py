from . import settings
from .app import create_app
from .config import setup_logger

logger = setup_logger(__name__)


def main() -> None:
    app = create_app()
    logger.info("Server running on port %s", settings.PORT)
    app.run(host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    main()
