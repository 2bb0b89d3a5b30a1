"""Protected InBody endpoints: report extraction, records, insights and trends."""

from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile

from inbody_tracker.adapters.rest.dependencies import CurrentUser, get_current_user, get_factory
from inbody_tracker.adapters.rest.schemas import (
    DraftOut,
    DraftOverrides,
    ExtractionOut,
    InsightOut,
    MetricTrendOut,
    RecordBody,
    RecordOut,
    TrendsOut,
)
from inbody_tracker.application.dto import MetricOverview
from inbody_tracker.application.services.dashboard import metric_overviews
from inbody_tracker.application.services.record_store import INSIGHT_WINDOWS
from inbody_tracker.domain.entities import BodyCompositionRecord
from inbody_tracker.domain.models import Insight
from inbody_tracker.factory import ServiceFactory

router = APIRouter(prefix="/inbody", tags=["inbody"])

_ACCEPTED_PREFIXES = ("image/", "application/pdf")


def record_out(record: BodyCompositionRecord) -> RecordOut:
    return RecordOut(
        id=record.id,
        date=record.date,
        weight_kg=record.weight_kg,
        skeletal_muscle_kg=record.skeletal_muscle_kg,
        body_fat_percentage=record.body_fat_percentage,
        source=record.source,
        created_at=record.created_at,
    )


def insight_out(window: str, insight: Insight) -> InsightOut:
    return InsightOut(window=window, **insight.to_dict())


def metric_out(overview: MetricOverview) -> MetricTrendOut:
    return MetricTrendOut(
        metric=overview.metric,
        trend=overview.trend,
        favorability=overview.favorability.value,
    )


def _check_window(window: str) -> None:
    if window not in INSIGHT_WINDOWS:
        raise HTTPException(
            status_code=400,
            detail=f"window must be one of: {', '.join(INSIGHT_WINDOWS)}",
        )


@router.post("/extract", response_model=ExtractionOut)
async def extract_report(
    file: UploadFile = File(...),
    user: CurrentUser = Depends(get_current_user),
    factory: ServiceFactory = Depends(get_factory),
):
    """Read an InBody report (image or PDF) and pre-fill the caller's draft.

    Unreadable reports are not an error: the response carries status
    "failed" and the draft is left for manual entry.
    """
    content_type = file.content_type or ""
    if not content_type.startswith(_ACCEPTED_PREFIXES):
        raise HTTPException(status_code=415, detail="Upload an image or a PDF report.")

    limit = factory.config.upload_max_bytes
    payload = await file.read(limit + 1)
    if len(payload) > limit:
        raise HTTPException(status_code=413, detail=f"Report exceeds {limit} bytes.")

    service = factory.get_ingestion_service()
    outcome = await service.extract(user.session(), payload)
    result = outcome.result
    return ExtractionOut(
        provider=outcome.provider,
        status=result.status.value,
        confidence=result.confidence,
        weight_kg=result.weight_kg,
        skeletal_muscle_kg=result.skeletal_muscle_kg,
        body_fat_percentage=result.body_fat_percentage,
        applied=outcome.applied,
        draft=DraftOut(**outcome.draft.to_dict()),
    )


@router.get("/draft", response_model=DraftOut)
async def get_draft(
    user: CurrentUser = Depends(get_current_user),
    factory: ServiceFactory = Depends(get_factory),
):
    draft = factory.get_ingestion_service().get_draft(user.session())
    return DraftOut(**draft.to_dict())


@router.post("/draft/save", response_model=RecordOut, status_code=201)
async def save_draft(
    body: DraftOverrides,
    user: CurrentUser = Depends(get_current_user),
    factory: ServiceFactory = Depends(get_factory),
):
    """Apply corrections to the caller's draft and save it as a record."""
    service = factory.get_ingestion_service()
    # Draft fields hold form text; JSON numbers arrive as floats.
    overrides = {
        name: None if value is None else f"{value:g}" if isinstance(value, float) else value
        for name, value in body.model_dump().items()
    }
    record = await service.save_draft(user.session(), **overrides)
    return record_out(record)


@router.post("/records", response_model=RecordOut, status_code=201)
async def save_record(
    body: RecordBody,
    user: CurrentUser = Depends(get_current_user),
    factory: ServiceFactory = Depends(get_factory),
):
    """Manually enter a measurement. Replaces any record on the same date."""
    store = factory.create_record_store(user.owner_id)
    record = await store.save(
        body.date, body.weight_kg, body.skeletal_muscle_kg, body.body_fat_percentage,
    )
    return record_out(record)


@router.get("/records", response_model=list[RecordOut])
async def list_records(
    user: CurrentUser = Depends(get_current_user),
    factory: ServiceFactory = Depends(get_factory),
):
    store = factory.create_record_store(user.owner_id)
    records = await store.load()
    return [record_out(r) for r in records]


@router.get("/insights", response_model=InsightOut)
async def get_insights(
    window: str = Query("range"),
    user: CurrentUser = Depends(get_current_user),
    factory: ServiceFactory = Depends(get_factory),
):
    """Change in each metric over the window.

    - range: first to last record overall
    - rolling: records from the last 30 days
    - calendar_month: records since the first of the current month
    """
    _check_window(window)
    store = factory.create_record_store(user.owner_id)
    await store.load()
    return insight_out(window, store.insights_for(window))


@router.get("/trends", response_model=TrendsOut)
async def get_trends(
    window: str = Query("range"),
    goal: Optional[str] = Query(None),
    user: CurrentUser = Depends(get_current_user),
    factory: ServiceFactory = Depends(get_factory),
):
    _check_window(window)
    store = factory.create_record_store(user.owner_id)
    await store.load()
    overviews = metric_overviews(store.get_trends(window), goal)
    return TrendsOut(
        window=window,
        goal=goal,
        metrics=[metric_out(o) for o in overviews],
    )
