"""
domain.insights - Delta-based insights over an ascending-by-date record list.

All functions are pure. Callers pass records already sorted by date (the
repository guarantees this) and, where a window is relative to the present,
an explicit 'now' from the injected clock.

Two windows relative to now exist:

  get_monthly_insights         rolling 30 days ending now. Despite the name
                               this is NOT aligned to the calendar month;
                               period_days is always reported as 30.
  get_calendar_month_insights  from the 1st of now's month. Used by the
                               coach-side insights panel; kept separate
                               until the product settles on one definition.
"""

from __future__ import annotations

import math
from datetime import date, datetime, time, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Sequence

from inbody_tracker.domain.entities import BodyCompositionRecord
from inbody_tracker.domain.models import Insight

ROLLING_WINDOW_DAYS = 30

_ONE_DECIMAL = Decimal("0.1")


def round_one_decimal(value: float) -> float:
    """Round half away from zero on the exact binary value of the float."""
    return float(Decimal(value).quantize(_ONE_DECIMAL, rounding=ROUND_HALF_UP))


def _delta(later: float, earlier: float) -> float:
    return round_one_decimal(later - earlier)


def _compare(
    oldest: BodyCompositionRecord,
    latest: BodyCompositionRecord,
    period_days: int,
) -> Insight:
    return Insight(
        weight_change=_delta(latest.weight_kg, oldest.weight_kg),
        muscle_change=_delta(latest.skeletal_muscle_kg, oldest.skeletal_muscle_kg),
        fat_change=_delta(latest.body_fat_percentage, oldest.body_fat_percentage),
        period_days=period_days,
    )


def days_between(start: date, end: date) -> int:
    """Whole days from start to end, partial days rounded up."""
    seconds = (datetime.combine(end, time.min) - datetime.combine(start, time.min)).total_seconds()
    return math.ceil(seconds / 86400)


def get_insights(records: Sequence[BodyCompositionRecord]) -> Insight:
    """Compare the oldest and newest record of the full list."""
    if len(records) < 2:
        return Insight(period_days=0)

    oldest, latest = records[0], records[-1]
    return _compare(oldest, latest, days_between(oldest.date, latest.date))


def _midnight(day: date, now: datetime) -> datetime:
    return datetime.combine(day, time.min, tzinfo=now.tzinfo)


def rolling_window(
    records: Sequence[BodyCompositionRecord],
    now: datetime,
) -> list[BodyCompositionRecord]:
    """Records dated on or after now - 30 days (date taken as midnight)."""
    cutoff = now - timedelta(days=ROLLING_WINDOW_DAYS)
    return [r for r in records if _midnight(r.date, now) >= cutoff]


def calendar_month_window(
    records: Sequence[BodyCompositionRecord],
    now: datetime,
) -> list[BodyCompositionRecord]:
    """Records dated on or after the 1st of now's month."""
    month_start = now.date().replace(day=1)
    return [r for r in records if r.date >= month_start]


def get_monthly_insights(
    records: Sequence[BodyCompositionRecord],
    now: datetime,
) -> Insight:
    """Compare first and last record dated within the last 30 days."""
    window = rolling_window(records, now)

    if len(window) < 2:
        return Insight(period_days=ROLLING_WINDOW_DAYS)

    return _compare(window[0], window[-1], ROLLING_WINDOW_DAYS)


def get_calendar_month_insights(
    records: Sequence[BodyCompositionRecord],
    now: datetime,
) -> Insight:
    """Compare first and last record of the current calendar month."""
    period_days = now.date().day - 1
    window = calendar_month_window(records, now)

    if len(window) < 2:
        return Insight(period_days=period_days)

    return _compare(window[0], window[-1], period_days)
