"""
domain.trends - Three-way trend classification and goal-relative favorability.

The classifier knows nothing about calendar windows: callers pass the
records of whichever window they display and the first and last record
decide the trend.
"""

from __future__ import annotations

from typing import Optional, Sequence, Union

from inbody_tracker.domain.entities import BodyCompositionRecord
from inbody_tracker.domain.models import (
    Favorability,
    FitnessGoal,
    Metric,
    MetricTrends,
    Trend,
)

# Absolute units of the metric (kg or percentage points).
DEADBAND = 0.5


def classify(old_value: float, new_value: float) -> Trend:
    """Classify the change from old_value to new_value.

    >>> classify(70.0, 70.4)
    <Trend.STABLE: 'stable'>
    """
    diff = new_value - old_value
    if abs(diff) < DEADBAND:
        return Trend.STABLE
    return Trend.UP if diff > 0 else Trend.DOWN


def classify_records(records: Sequence[BodyCompositionRecord]) -> MetricTrends:
    """Trend per metric from the first and last record of the given window."""
    if len(records) < 2:
        return MetricTrends()

    first, last = records[0], records[-1]
    return MetricTrends(
        weight=classify(first.weight_kg, last.weight_kg),
        skeletal_muscle=classify(first.skeletal_muscle_kg, last.skeletal_muscle_kg),
        body_fat=classify(first.body_fat_percentage, last.body_fat_percentage),
    )


def _preferred_direction(metric: Metric, goal: Optional[FitnessGoal]) -> Trend:
    if metric is Metric.BODY_FAT:
        return Trend.DOWN
    if metric is Metric.SKELETAL_MUSCLE:
        return Trend.UP
    return Trend.DOWN if goal is FitnessGoal.LOSE_FAT else Trend.UP


def parse_goal(value: Union[str, FitnessGoal, None]) -> Optional[FitnessGoal]:
    """Map a stored goal string to FitnessGoal; unknown values become None."""
    if value is None or isinstance(value, FitnessGoal):
        return value
    try:
        return FitnessGoal(value.strip().lower())
    except ValueError:
        return None


def favorability(
    metric: Metric,
    trend: Optional[Trend],
    goal: Union[str, FitnessGoal, None],
) -> Favorability:
    """Whether a trend is good or bad news for someone with this goal."""
    if trend is None or trend is Trend.STABLE:
        return Favorability.NEUTRAL
    if trend is _preferred_direction(metric, parse_goal(goal)):
        return Favorability.FAVORABLE
    return Favorability.UNFAVORABLE
