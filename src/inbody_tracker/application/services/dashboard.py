"""
application.services.dashboard - Consolidated client insights.

Client dashboard, InBody page and the coach's client panel all read their
numbers from here, so insights, trends and favorability are derived once
from the same record list.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Optional

from inbody_tracker.application.dto import ClientInsights, MetricOverview
from inbody_tracker.application.services.attendance import AttendanceService
from inbody_tracker.application.services.record_store import RecordStore
from inbody_tracker.domain.models import Metric, MetricTrends
from inbody_tracker.domain.trends import favorability, parse_goal

logger = logging.getLogger(__name__)


def metric_overviews(trends: MetricTrends, goal: Optional[str]) -> list[MetricOverview]:
    """Pair every metric's trend with its goal-relative favorability."""
    overviews = []
    for metric in Metric:
        trend = trends.for_metric(metric)
        overviews.append(MetricOverview(
            metric=metric.value,
            trend=trend.value if trend else None,
            favorability=favorability(metric, trend, goal),
        ))
    return overviews


class DashboardService:
    """Builds ClientInsights from records and attendance."""

    def __init__(
        self,
        record_store_factory: Callable[[str], RecordStore],
        attendance_service: AttendanceService,
    ):
        self._record_store_factory = record_store_factory
        self._attendance = attendance_service

    async def client_insights(
        self,
        owner_id: str,
        goal: Optional[str] = None,
    ) -> ClientInsights:
        store = self._record_store_factory(owner_id)
        _, adherence = await asyncio.gather(
            store.load(),
            self._attendance.summary(owner_id),
        )

        parsed_goal = parse_goal(goal)
        trends = store.get_trends("range")
        logger.debug("Built dashboard insights for %s (%d records)", owner_id, len(store.records))

        return ClientInsights(
            owner_id=owner_id,
            goal=parsed_goal.value if parsed_goal else None,
            record_count=len(store.records),
            range_insight=store.get_insights(),
            rolling_insight=store.get_monthly_insights(),
            trends=trends,
            metrics=metric_overviews(trends, goal),
            adherence=adherence,
        )
