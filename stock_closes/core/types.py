"""Shared lightweight types to keep module interfaces explicit and typed."""

from collections.abc import Mapping
from dataclasses import dataclass

DailyCloseSeries = Mapping[str, float]


@dataclass(frozen=True, slots=True)
class ServiceConfig:
    """Validated startup configuration handed to the API factory."""

    symbol: str
    day_count: int
    api_key: str
    api_base_url: str = "https://www.alphavantage.co"
    request_timeout_s: float = 15.0
    market_timezone: str = "America/New_York"


@dataclass(frozen=True, slots=True)
class ClosesResult:
    """Trailing-window closes for one symbol, newest first."""

    symbol: str
    daily_closes: tuple[float, ...]
    average_close: float
