"""Protected dashboard endpoint: one consolidated view of a client's progress."""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from inbody_tracker.adapters.rest.dependencies import CurrentUser, get_current_user, get_factory
from inbody_tracker.adapters.rest.routers.inbody import insight_out, metric_out
from inbody_tracker.adapters.rest.schemas import AdherenceOut, DashboardOut
from inbody_tracker.factory import ServiceFactory

router = APIRouter(tags=["dashboard"])


@router.get("/dashboard", response_model=DashboardOut)
async def get_dashboard(
    goal: Optional[str] = Query(None),
    user: CurrentUser = Depends(get_current_user),
    factory: ServiceFactory = Depends(get_factory),
):
    """
    Return the caller's dashboard.

    Shows:
    - Overall and rolling 30-day change per metric
    - Trend and goal-relative favorability per metric
    - Attendance adherence over the configured window
    """
    service = factory.create_dashboard_service()
    insights = await service.client_insights(user.owner_id, goal)
    return DashboardOut(
        goal=insights.goal,
        record_count=insights.record_count,
        range_insight=insight_out("range", insights.range_insight),
        rolling_insight=insight_out("rolling", insights.rolling_insight),
        metrics=[metric_out(m) for m in insights.metrics],
        adherence=AdherenceOut(**insights.adherence.to_dict()),
    )
