"""Time helpers for consistent timestamps and market-calendar dates."""

from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo


def utc_now() -> datetime:
    """Return current UTC datetime with timezone attached."""

    return datetime.now(timezone.utc)


def market_today(tz_name: str) -> date:
    """Return today's calendar date as seen in the given market timezone."""

    return utc_now().astimezone(ZoneInfo(tz_name)).date()
