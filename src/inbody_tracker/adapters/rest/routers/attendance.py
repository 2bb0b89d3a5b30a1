"""Protected attendance endpoints."""

from fastapi import APIRouter, Depends

from inbody_tracker.adapters.rest.dependencies import CurrentUser, get_current_user, get_factory
from inbody_tracker.adapters.rest.schemas import AdherenceOut, AttendanceBody, AttendanceOut
from inbody_tracker.factory import ServiceFactory

router = APIRouter(prefix="/attendance", tags=["attendance"])


@router.post("", response_model=AttendanceOut, status_code=201)
async def log_attendance(
    body: AttendanceBody,
    user: CurrentUser = Depends(get_current_user),
    factory: ServiceFactory = Depends(get_factory),
):
    """Log trained / rest / missed for a day (today if omitted)."""
    service = factory.create_attendance_service()
    record = await service.log(user.session(), body.status, body.date, body.notes)
    return AttendanceOut(date=record.date, status=record.status.value, notes=record.notes)


@router.get("/summary", response_model=AdherenceOut)
async def adherence_summary(
    user: CurrentUser = Depends(get_current_user),
    factory: ServiceFactory = Depends(get_factory),
):
    service = factory.create_attendance_service()
    summary = await service.summary(user.owner_id)
    return AdherenceOut(**summary.to_dict())
