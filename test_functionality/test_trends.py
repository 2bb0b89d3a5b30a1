"""
Test trend classification and goal-relative favorability
"""
import pytest

from conftest import make_record
from inbody_tracker.domain.models import Favorability, FitnessGoal, Metric, MetricTrends, Trend
from inbody_tracker.domain.trends import classify, classify_records, favorability, parse_goal

pytestmark = pytest.mark.unit


@pytest.mark.parametrize("old,new,expected", [
    (70.0, 70.4, Trend.STABLE),
    (70.0, 70.6, Trend.UP),
    (70.0, 69.4, Trend.DOWN),
    (70.0, 70.5, Trend.UP),
    (70.0, 70.0, Trend.STABLE),
])
def test_classify_with_deadband(old, new, expected):
    assert classify(old, new) is expected


def test_classify_records_needs_two_records():
    assert classify_records([make_record("2024-03-01", 80.0)]) == MetricTrends()


def test_classify_records_per_metric():
    records = [
        make_record("2024-03-01", 82.0, muscle=35.0, fat=24.0),
        make_record("2024-03-20", 80.0, muscle=35.2, fat=25.0),
    ]

    trends = classify_records(records)

    assert trends == MetricTrends(
        weight=Trend.DOWN, skeletal_muscle=Trend.STABLE, body_fat=Trend.UP,
    )


@pytest.mark.parametrize("metric,trend,goal,expected", [
    (Metric.WEIGHT, Trend.DOWN, "lose_fat", Favorability.FAVORABLE),
    (Metric.WEIGHT, Trend.DOWN, "gain_muscle", Favorability.UNFAVORABLE),
    (Metric.WEIGHT, Trend.UP, None, Favorability.FAVORABLE),
    (Metric.BODY_FAT, Trend.DOWN, "gain_muscle", Favorability.FAVORABLE),
    (Metric.BODY_FAT, Trend.UP, "lose_fat", Favorability.UNFAVORABLE),
    (Metric.SKELETAL_MUSCLE, Trend.UP, "performance", Favorability.FAVORABLE),
    (Metric.SKELETAL_MUSCLE, Trend.DOWN, "lose_fat", Favorability.UNFAVORABLE),
    (Metric.WEIGHT, Trend.STABLE, "lose_fat", Favorability.NEUTRAL),
    (Metric.BODY_FAT, None, "lose_fat", Favorability.NEUTRAL),
])
def test_favorability(metric, trend, goal, expected):
    assert favorability(metric, trend, goal) is expected


def test_parse_goal():
    assert parse_goal(" LOSE_FAT ") is FitnessGoal.LOSE_FAT
    assert parse_goal("marathon") is None
    assert parse_goal(None) is None
