"""Tests for calendar trend aggregation."""

from __future__ import annotations

import random
from datetime import date, datetime, timedelta, timezone

import pytest

from healthtrack.errors import InvalidInputError
from healthtrack.tracking.models import ActivityRecord, TrendBucket
from healthtrack.tracking.trends import (
    Granularity,
    aggregate_trend,
    average,
    calorie_goal_met,
    days_goal_met,
    enumerate_periods,
    exercise_goal_met,
    trailing_window,
)


def utc(year: int, month: int, day: int, hour: int = 12, minute: int = 0) -> datetime:
    return datetime(year, month, day, hour, minute, tzinfo=timezone.utc)


def bucket(total: float, day: date = date(2025, 1, 1)) -> TrendBucket:
    return TrendBucket(period_label="x", period_start=day, period_end=day, total=total)


class TestAggregateTrend:
    """Tests for aggregate_trend."""

    def test_empty_records_give_zero_buckets(self) -> None:
        start, end = date(2025, 3, 1), date(2025, 3, 7)
        buckets = aggregate_trend([], start, end)
        assert len(buckets) == (end - start).days + 1
        assert all(b.total == 0 for b in buckets)

    def test_single_day_window(self) -> None:
        buckets = aggregate_trend([], date(2025, 3, 1), date(2025, 3, 1))
        assert len(buckets) == 1
        assert buckets[0].period_label == "3/1"

    def test_sums_per_day(self) -> None:
        records = [
            ActivityRecord(utc(2025, 3, 1, 8), 400),
            ActivityRecord(utc(2025, 3, 1, 19), 700.5),
            ActivityRecord(utc(2025, 3, 3, 0, 0), 250),
        ]
        buckets = aggregate_trend(records, date(2025, 3, 1), date(2025, 3, 3))
        assert [b.total for b in buckets] == [1100.5, 0, 250]
        assert [b.period_label for b in buckets] == ["3/1", "3/2", "3/3"]
        assert [b.period_start for b in buckets] == [
            date(2025, 3, 1), date(2025, 3, 2), date(2025, 3, 3)
        ]

    def test_out_of_window_records_ignored(self) -> None:
        records = [
            ActivityRecord(utc(2025, 2, 28, 23, 59), 500),
            ActivityRecord(utc(2025, 3, 8, 0, 0), 500),
            ActivityRecord(utc(2024, 3, 4), 500),
        ]
        buckets = aggregate_trend(records, date(2025, 3, 1), date(2025, 3, 7))
        assert len(buckets) == 7
        assert all(b.total == 0 for b in buckets)

    def test_order_independent(self) -> None:
        rng = random.Random(7)
        start = date(2025, 1, 1)
        records = [
            ActivityRecord(
                datetime(2025, 1, 1, tzinfo=timezone.utc)
                + timedelta(minutes=rng.randrange(0, 60 * 24 * 14)),
                rng.uniform(0, 900),
            )
            for _ in range(200)
        ]
        expected = aggregate_trend(records, start, date(2025, 1, 14))
        for _ in range(5):
            shuffled = records[:]
            rng.shuffle(shuffled)
            assert aggregate_trend(shuffled, start, date(2025, 1, 14)) == expected

    def test_aware_datetimes_bucketed_in_utc(self) -> None:
        """23:30 at UTC-5 on 3/1 is 04:30 UTC on 3/2."""
        eastern = timezone(timedelta(hours=-5))
        records = [ActivityRecord(datetime(2025, 3, 1, 23, 30, tzinfo=eastern), 300)]
        buckets = aggregate_trend(records, date(2025, 3, 1), date(2025, 3, 2))
        assert [b.total for b in buckets] == [0, 300]

    def test_naive_datetimes_taken_as_utc(self) -> None:
        records = [ActivityRecord(datetime(2025, 3, 2, 23, 59), 45)]
        buckets = aggregate_trend(records, date(2025, 3, 1), date(2025, 3, 2))
        assert [b.total for b in buckets] == [0, 45]

    def test_accepts_generator(self) -> None:
        records = (ActivityRecord(utc(2025, 3, 1), q) for q in (10, 20))
        buckets = aggregate_trend(records, date(2025, 3, 1), date(2025, 3, 1))
        assert buckets[0].total == 30

    def test_weekly_buckets_clipped_to_window(self) -> None:
        """Wed 2025-01-01 .. Wed 2025-01-15 spans three Monday-start weeks."""
        records = [
            ActivityRecord(utc(2025, 1, 1), 30),   # Wed, week 1
            ActivityRecord(utc(2025, 1, 5), 20),   # Sun, week 1
            ActivityRecord(utc(2025, 1, 6), 45),   # Mon, week 2
            ActivityRecord(utc(2025, 1, 15), 60),  # Wed, week 3
            ActivityRecord(utc(2024, 12, 30), 99), # Mon, before window
        ]
        buckets = aggregate_trend(records, date(2025, 1, 1), date(2025, 1, 15), "week")
        assert [b.total for b in buckets] == [50, 45, 60]
        assert buckets[0].period_start == date(2025, 1, 1)
        assert buckets[0].period_end == date(2025, 1, 5)
        assert buckets[1].period_start == date(2025, 1, 6)
        assert buckets[2].period_end == date(2025, 1, 15)
        assert buckets[0].period_label == "1/1-1/5"

    def test_monthly_buckets(self) -> None:
        records = [
            ActivityRecord(utc(2024, 1, 31), 100),
            ActivityRecord(utc(2024, 2, 29), 200),
            ActivityRecord(utc(2024, 3, 10), 300),
        ]
        buckets = aggregate_trend(
            records, date(2024, 1, 15), date(2024, 3, 10), Granularity.MONTH
        )
        assert [b.period_label for b in buckets] == ["2024-01", "2024-02", "2024-03"]
        assert [b.total for b in buckets] == [100, 200, 300]
        assert buckets[1].period_end == date(2024, 2, 29)

    def test_reversed_window_rejected(self) -> None:
        with pytest.raises(InvalidInputError):
            aggregate_trend([], date(2025, 3, 7), date(2025, 3, 1))

    def test_unknown_granularity_rejected(self) -> None:
        with pytest.raises(InvalidInputError):
            aggregate_trend([], date(2025, 3, 1), date(2025, 3, 7), "hour")


class TestEnumeratePeriods:
    """Tests for enumerate_periods."""

    def test_days_across_year_end(self) -> None:
        periods = enumerate_periods(date(2024, 12, 30), date(2025, 1, 2))
        assert [p[0] for p in periods] == [
            date(2024, 12, 30), date(2024, 12, 31), date(2025, 1, 1), date(2025, 1, 2)
        ]

    def test_months_across_year_end(self) -> None:
        periods = enumerate_periods(date(2024, 11, 20), date(2025, 2, 3), "month")
        assert periods == [
            (date(2024, 11, 20), date(2024, 11, 30)),
            (date(2024, 12, 1), date(2024, 12, 31)),
            (date(2025, 1, 1), date(2025, 1, 31)),
            (date(2025, 2, 1), date(2025, 2, 3)),
        ]


class TestDerivedScalars:
    """Tests for average and days_goal_met."""

    def test_average_includes_empty_days(self) -> None:
        buckets = [bucket(700), bucket(0), bucket(0), bucket(0), bucket(0), bucket(0), bucket(0)]
        assert average(buckets) == pytest.approx(100)

    def test_average_of_empty_list_rejected(self) -> None:
        with pytest.raises(InvalidInputError):
            average([])

    def test_calorie_policy_requires_nonzero(self) -> None:
        buckets = [bucket(t) for t in (0, 1500, 2000, 2001)]
        assert days_goal_met(buckets, 2000, calorie_goal_met) == 2

    def test_exercise_policy_counts_at_or_above(self) -> None:
        buckets = [bucket(t) for t in (0, 29, 30, 90)]
        assert days_goal_met(buckets, 30, exercise_goal_met) == 2

    def test_policies_differ_on_zero_goal(self) -> None:
        """An empty day meets a zero exercise goal but never a calorie goal."""
        buckets = [bucket(0)]
        assert days_goal_met(buckets, 0, exercise_goal_met) == 1
        assert days_goal_met(buckets, 0, calorie_goal_met) == 0

    def test_custom_comparator(self) -> None:
        buckets = [bucket(t) for t in (10, 20, 30)]
        assert days_goal_met(buckets, 20, lambda total, goal: total == goal) == 1


class TestTrailingWindow:
    """Tests for trailing_window."""

    def test_daily(self) -> None:
        assert trailing_window("daily", date(2025, 3, 7)) == (date(2025, 3, 7), date(2025, 3, 7))

    def test_weekly_is_seven_days(self) -> None:
        start, end = trailing_window("weekly", date(2025, 3, 7))
        assert start == date(2025, 3, 1)
        assert len(aggregate_trend([], start, end)) == 7

    def test_monthly(self) -> None:
        assert trailing_window("monthly", date(2025, 3, 15)) == (date(2025, 2, 16), date(2025, 3, 15))

    def test_monthly_clamps_short_month(self) -> None:
        assert trailing_window("monthly", date(2025, 3, 31)) == (date(2025, 3, 1), date(2025, 3, 31))

    def test_unknown_period_rejected(self) -> None:
        with pytest.raises(InvalidInputError):
            trailing_window("yearly", date(2025, 3, 7))
