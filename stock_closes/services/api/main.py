"""FastAPI service returning trailing business-day closes and their average for one symbol."""

import logging
import time
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from datetime import date
from functools import partial

from fastapi import FastAPI, Request, Response
from fastapi.responses import PlainTextResponse

from stock_closes.core.config import Settings, get_settings
from stock_closes.core.time_utils import market_today
from stock_closes.core.types import ServiceConfig
from stock_closes.core.window import compute_closes
from stock_closes.services.api.schemas import ClosesResponse
from stock_closes.services.upstream.client import AlphaVantageClient, UpstreamError

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "There was an error processing your request"


def create_app(
    config: ServiceConfig,
    client: AlphaVantageClient | None = None,
    clock: Callable[[], date] | None = None,
    settings: Settings | None = None,
) -> FastAPI:
    """Build the API around an explicit, already validated configuration."""

    settings = settings or get_settings()
    owns_client = client is None
    upstream = client or AlphaVantageClient(
        api_key=config.api_key,
        base_url=config.api_base_url,
        timeout=config.request_timeout_s,
    )
    today = clock or partial(market_today, config.market_timezone)

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        """Log startup metadata and release the upstream client on shutdown."""

        logger.info(
            "api_startup",
            extra={
                "service": "api",
                "env": settings.ENV,
                "version": settings.VERSION,
                "symbol": config.symbol,
                "day_count": config.day_count,
            },
        )
        try:
            yield
        finally:
            if owns_client:
                upstream.close()
            logger.info("api_shutdown")

    app = FastAPI(title=settings.APP_NAME, version=settings.VERSION, lifespan=lifespan)

    @app.middleware("http")
    async def log_requests(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        started = time.perf_counter()
        response = await call_next(request)
        logger.info(
            "http_request",
            extra={
                "method": request.method,
                "path": request.url.path,
                "status": response.status_code,
                "duration_ms": round((time.perf_counter() - started) * 1000, 2),
            },
        )
        return response

    @app.api_route("/", methods=["GET", "OPTIONS"], response_model=ClosesResponse)
    def get_stock_closes() -> ClosesResponse | Response:
        """Return the previous N business-day closes for the configured symbol and their average."""

        try:
            series = upstream.fetch_daily_series(config.symbol)
        except UpstreamError as exc:
            logger.error(
                "upstream_request_failed",
                extra={"symbol": config.symbol, "error": str(exc)},
            )
            return PlainTextResponse(GENERIC_ERROR_MESSAGE, status_code=500)

        result = compute_closes(today(), config.day_count, series, config.symbol)
        return ClosesResponse.from_result(result)

    @app.get("/health")
    def health() -> dict[str, str]:
        """Return process liveness status."""

        return {"status": "ok"}

    @app.get("/version")
    def version() -> dict[str, str]:
        """Return application metadata from shared settings."""

        return {
            "name": settings.APP_NAME,
            "version": settings.VERSION,
            "env": settings.ENV,
        }

    return app
