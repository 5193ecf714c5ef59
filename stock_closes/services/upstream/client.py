"""Alpha Vantage client for the daily adjusted time series."""

import logging
from types import TracebackType
from typing import Any

import httpx

from stock_closes.core.types import DailyCloseSeries

logger = logging.getLogger(__name__)

_SERIES_KEY = "Time Series (Daily)"
_CLOSE_KEY = "4. close"
_ERROR_KEYS = ("Error Message", "Note", "Information")


class UpstreamError(RuntimeError):
    """Raised when the upstream price series cannot be fetched or decoded."""


class AlphaVantageClient:
    """Thin wrapper around the Alpha Vantage REST API; one request per call, no retries."""

    FUNCTION = "TIME_SERIES_DAILY_ADJUSTED"

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://www.alphavantage.co",
        timeout: float = 15.0,
        http_client: httpx.Client | None = None,
    ) -> None:
        if not api_key:
            raise ValueError("Alpha Vantage API key is required")
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self._owns_client = http_client is None
        self._client = http_client or httpx.Client(timeout=timeout)

    def close(self) -> None:
        """Close the HTTP client if this instance created it."""
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "AlphaVantageClient":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def fetch_daily_series(self, symbol: str) -> DailyCloseSeries:
        """Return a mapping of YYYY-MM-DD to close price for the symbol."""

        params = {
            "apikey": self.api_key,
            "function": self.FUNCTION,
            "symbol": symbol,
        }

        try:
            response = self._client.get(f"{self.base_url}/query", params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise UpstreamError(
                f"Alpha Vantage returned HTTP {exc.response.status_code} for {symbol}"
            ) from exc
        except httpx.HTTPError as exc:
            raise UpstreamError(f"Error retrieving stock info for {symbol}: {exc}") from exc

        try:
            payload = response.json()
        except ValueError as exc:
            raise UpstreamError(f"Error decoding stock info response for {symbol}") from exc

        return parse_daily_series(payload)


def parse_daily_series(payload: Any) -> dict[str, float]:
    """Extract the date to close mapping from a TIME_SERIES_DAILY_ADJUSTED payload."""

    if not isinstance(payload, dict):
        raise UpstreamError("Unexpected daily series payload format")

    for key in _ERROR_KEYS:
        if payload.get(key):
            raise UpstreamError(str(payload[key]))

    raw_series = payload.get(_SERIES_KEY)
    if raw_series is None:
        logger.warning("upstream_series_missing", extra={"keys": sorted(payload)})
        return {}
    if not isinstance(raw_series, dict):
        raise UpstreamError(f"Unexpected '{_SERIES_KEY}' format")

    series: dict[str, float] = {}
    for day, entry in raw_series.items():
        if not isinstance(entry, dict):
            raise UpstreamError(f"Unexpected entry format for {day}")
        raw_close = entry.get(_CLOSE_KEY)
        if raw_close is None:
            continue
        try:
            series[day] = float(raw_close)
        except (TypeError, ValueError) as exc:
            raise UpstreamError(f"Invalid close value for {day}: {raw_close!r}") from exc
    return series


__all__ = ["AlphaVantageClient", "UpstreamError", "parse_daily_series"]
