"""Module entrypoint: validate startup configuration, then serve the API."""

import logging

import uvicorn

from stock_closes.core.config import ConfigError, load_service_config, load_settings
from stock_closes.core.logging import configure_logging
from stock_closes.services.api.main import create_app


def main() -> int:
    """Run the API service using configured host and port, refusing to start on bad config."""

    logger = logging.getLogger(__name__)
    try:
        settings = load_settings()
        configure_logging(settings.LOG_LEVEL)
        logger.info("startup")
        config = load_service_config(settings)
    except ConfigError as exc:
        configure_logging()
        logger.error("config_invalid", extra={"problems": exc.problems})
        return 1

    app = create_app(config, settings=settings)
    logger.info("listening", extra={"host": settings.HOST, "port": settings.PORT})
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_config=None)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
