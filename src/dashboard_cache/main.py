"""Dashboard cache main entry point."""

import logging

import uvicorn

from .config.logging_config import LoggingConfig
from .config.settings import get_settings

logger = logging.getLogger(__name__)


def main() -> None:
    """Run the monitoring application."""
    LoggingConfig.configure()
    settings = get_settings()

    from .app import create_app

    app = create_app()

    logger.info(f"Starting dashboard cache on {settings.host}:{settings.port}")

    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level="debug" if settings.debug else "info",
        access_log=True,
    )


if __name__ == "__main__":
    main()
