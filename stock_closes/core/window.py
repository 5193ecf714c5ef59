"""Trailing business-day window selection and close averaging."""

from datetime import date, timedelta

from stock_closes.core.types import ClosesResult, DailyCloseSeries

DATE_FORMAT = "%Y-%m-%d"

_SATURDAY = 5
_SUNDAY = 6


def trailing_business_days(reference_date: date, day_count: int) -> list[date]:
    """Walk backwards from reference_date, skipping weekends, newest first.

    The weekday check runs on the candidate computed with the compensator from
    the previous step, and the updated compensator is applied to the same step.
    """

    days: list[date] = []
    weekend_compensator = 0
    for i in range(1, day_count + 1):
        candidate = reference_date - timedelta(days=i + weekend_compensator)

        weekday = candidate.weekday()
        if weekday == _SATURDAY:
            weekend_compensator += 1
        elif weekday == _SUNDAY:
            weekend_compensator += 2

        days.append(reference_date - timedelta(days=i + weekend_compensator))
    return days


def compute_closes(
    reference_date: date,
    day_count: int,
    series: DailyCloseSeries,
    symbol: str,
) -> ClosesResult:
    """Collect the closes for the trailing window and average them over day_count.

    Dates absent from the series count as 0.0 and still weigh in the average.
    """

    if day_count <= 0:
        raise ValueError(f"day_count must be positive, got {day_count}")

    closes: list[float] = []
    cumulative_close = 0.0
    for day in trailing_business_days(reference_date, day_count):
        close = float(series.get(day.strftime(DATE_FORMAT), 0.0))
        closes.append(close)
        cumulative_close += close

    return ClosesResult(
        symbol=symbol,
        daily_closes=tuple(closes),
        average_close=cumulative_close / day_count,
    )
