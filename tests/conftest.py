"""Shared fixtures for API and calculator tests."""

from collections.abc import Callable
from datetime import date

import pytest

from stock_closes.core.config import Settings
from stock_closes.core.types import DailyCloseSeries, ServiceConfig
from stock_closes.services.api.main import create_app
from stock_closes.services.upstream.client import UpstreamError

MONDAY = date(2024, 1, 8)


class FakeUpstream:
    """In-memory stand-in for AlphaVantageClient."""

    def __init__(self, series: DailyCloseSeries | None = None, error: str | None = None) -> None:
        self.series = dict(series or {})
        self.error = error
        self.calls: list[str] = []

    def fetch_daily_series(self, symbol: str) -> DailyCloseSeries:
        self.calls.append(symbol)
        if self.error is not None:
            raise UpstreamError(self.error)
        return self.series

    def close(self) -> None:
        return None


@pytest.fixture
def service_config() -> ServiceConfig:
    return ServiceConfig(symbol="MSFT", day_count=5, api_key="demo")


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None, APP_NAME="Stock Closes", VERSION="0.1.0", ENV="test")


@pytest.fixture
def build_app(service_config: ServiceConfig, settings: Settings) -> Callable[..., object]:
    def _build(upstream: object, config: ServiceConfig | None = None):
        return create_app(
            config or service_config,
            client=upstream,  # type: ignore[arg-type]
            clock=lambda: MONDAY,
            settings=settings,
        )

    return _build


@pytest.fixture
def upstream_factory() -> type[FakeUpstream]:
    return FakeUpstream
