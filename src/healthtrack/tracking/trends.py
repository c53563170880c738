"""Calendar bucketing of diet and exercise records.

A trend window is a pair of inclusive dates. It is split into calendar
periods (days, Monday-start weeks, or months) clipped to the window, and
every period gets a bucket even when no record falls into it.

Records are placed by event time (``occurred_at``) on the UTC calendar.
Naive datetimes are taken to be UTC already.
"""

from __future__ import annotations

import calendar
import math
from datetime import date, timedelta
from enum import Enum
from typing import Callable, Iterable, Sequence, Union

from healthtrack.errors import InvalidInputError
from healthtrack.tracking.models import ActivityRecord, TrendBucket


class Granularity(Enum):
    """Length of one trend bucket."""
    DAY = "day"
    WEEK = "week"
    MONTH = "month"


class TrendPeriod(Enum):
    """Trailing windows offered for trend charts."""
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


GoalComparator = Callable[[float, float], bool]


def parse_granularity(granularity: Union[Granularity, str]) -> Granularity:
    """Coerce a Granularity or its name."""
    if isinstance(granularity, Granularity):
        return granularity
    try:
        return Granularity(str(granularity).strip().lower())
    except ValueError:
        valid = ", ".join(g.value for g in Granularity)
        raise InvalidInputError(
            f"granularity must be one of: {valid}; got '{granularity}'"
        ) from None


def _shift_months(day: date, months: int) -> date:
    """Move a date by whole months, clamping to the end of the month."""
    month_index = day.year * 12 + (day.month - 1) + months
    year, month = divmod(month_index, 12)
    month += 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(day.day, last_day))


def _period_start(day: date, granularity: Granularity) -> date:
    """Unclipped start of the calendar period containing ``day``."""
    if granularity == Granularity.DAY:
        return day
    if granularity == Granularity.WEEK:
        return day - timedelta(days=day.weekday())
    return day.replace(day=1)


def _period_end(start: date, granularity: Granularity) -> date:
    """Unclipped inclusive end of the period beginning at ``start``."""
    if granularity == Granularity.DAY:
        return start
    if granularity == Granularity.WEEK:
        return start + timedelta(days=6)
    return _shift_months(start, 1) - timedelta(days=1)


def _period_label(start: date, end: date, granularity: Granularity) -> str:
    if granularity == Granularity.DAY:
        return f"{start.month}/{start.day}"
    if granularity == Granularity.WEEK:
        return f"{start.month}/{start.day}-{end.month}/{end.day}"
    return f"{start.year}-{start.month:02d}"


def enumerate_periods(
    window_start: date,
    window_end: date,
    granularity: Union[Granularity, str] = Granularity.DAY,
) -> list[tuple[date, date]]:
    """List the (start, end) dates of every period in a window.

    Periods are clipped to the window and returned in ascending order.

    Args:
        window_start: First day of the window (inclusive)
        window_end: Last day of the window (inclusive)
        granularity: "day", "week" or "month"

    Returns:
        List of inclusive (start, end) date pairs

    Raises:
        InvalidInputError: If the window is reversed or granularity unknown
    """
    unit = parse_granularity(granularity)
    if window_end < window_start:
        raise InvalidInputError(
            f"window end {window_end} is before window start {window_start}"
        )

    periods = []
    cursor = _period_start(window_start, unit)
    while cursor <= window_end:
        end = _period_end(cursor, unit)
        periods.append((max(cursor, window_start), min(end, window_end)))
        cursor = end + timedelta(days=1)
    return periods


def aggregate_trend(
    records: Iterable[ActivityRecord],
    window_start: date,
    window_end: date,
    granularity: Union[Granularity, str] = Granularity.DAY,
) -> list[TrendBucket]:
    """Sum record quantities per calendar period of a window.

    Records outside ``[window_start, window_end]`` are ignored. The result
    has one bucket per period whether or not any record falls into it, and
    does not depend on the order of ``records``.

    Args:
        records: Diet (kcal) or exercise (minutes) records
        window_start: First day of the window (inclusive)
        window_end: Last day of the window (inclusive)
        granularity: "day", "week" or "month"

    Returns:
        Buckets ordered by period start
    """
    unit = parse_granularity(granularity)
    periods = enumerate_periods(window_start, window_end, unit)

    # Keyed by unclipped period start
    index = {_period_start(start, unit): i for i, (start, _) in enumerate(periods)}
    quantities: list[list[float]] = [[] for _ in periods]

    for record in records:
        day = record.day
        if day < window_start or day > window_end:
            continue
        quantities[index[_period_start(day, unit)]].append(record.quantity)

    return [
        TrendBucket(
            period_label=_period_label(start, end, unit),
            period_start=start,
            period_end=end,
            # exact sum, independent of record order
            total=math.fsum(values),
        )
        for (start, end), values in zip(periods, quantities)
    ]


def average(buckets: Sequence[TrendBucket]) -> float:
    """Mean bucket total, empty periods included."""
    if not buckets:
        raise InvalidInputError("cannot average an empty bucket list")
    return math.fsum(b.total for b in buckets) / len(buckets)


def calorie_goal_met(total: float, goal: float) -> bool:
    """A day counts only if something was eaten and the goal was not exceeded."""
    return total > 0 and total <= goal


def exercise_goal_met(total: float, goal: float) -> bool:
    """A day counts if at least the goal minutes were done."""
    return total >= goal


def days_goal_met(
    buckets: Iterable[TrendBucket],
    goal: float,
    comparator: GoalComparator,
) -> int:
    """Count buckets whose total satisfies ``comparator(total, goal)``."""
    return sum(1 for b in buckets if comparator(b.total, goal))


def trailing_window(
    period: Union[TrendPeriod, str],
    end: date,
) -> tuple[date, date]:
    """Inclusive window for a trailing trend period ending at ``end``.

    daily is ``end`` alone, weekly the seven days ending at ``end``, and
    monthly one calendar month ending at ``end``.
    """
    if not isinstance(period, TrendPeriod):
        try:
            period = TrendPeriod(str(period).strip().lower())
        except ValueError:
            valid = ", ".join(p.value for p in TrendPeriod)
            raise InvalidInputError(
                f"period must be one of: {valid}; got '{period}'"
            ) from None

    if period == TrendPeriod.DAILY:
        return end, end
    if period == TrendPeriod.WEEKLY:
        return end - timedelta(days=6), end
    return _shift_months(end, -1) + timedelta(days=1), end
