"""
application.services.attendance - Daily attendance logging and adherence summary.
"""

from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Optional, Union

from inbody_tracker.application.context import SessionContext
from inbody_tracker.domain.adherence import summarize_attendance
from inbody_tracker.domain.entities import AttendanceRecord
from inbody_tracker.domain.exceptions import ValidationError
from inbody_tracker.domain.models import AdherenceSummary, AttendanceStatus
from inbody_tracker.domain.ports import AttendanceRepository, Clock

logger = logging.getLogger(__name__)


class AttendanceService:
    """Logs trained/rest/missed days and summarizes adherence."""

    def __init__(
        self,
        repository: AttendanceRepository,
        clock: Clock,
        window_days: int = 30,
    ):
        self._repo = repository
        self._clock = clock
        self._window_days = window_days

    async def log(
        self,
        ctx: SessionContext,
        status: Union[str, AttendanceStatus],
        day: Optional[date] = None,
        notes: str = "",
    ) -> AttendanceRecord:
        """Record the status for a day (today by default), replacing any earlier entry."""
        today = self._clock.now().date()
        day = day or today

        errors: dict[str, str] = {}
        try:
            parsed = AttendanceStatus(status)
        except ValueError:
            errors["status"] = "Status must be one of: trained, rest, missed"
        if day > today:
            errors["date"] = "Date cannot be in the future"
        if errors:
            raise ValidationError(errors)

        record = await self._repo.upsert_by_date(AttendanceRecord(
            owner_id=ctx.owner_id,
            date=day,
            status=parsed,
            notes=notes,
        ))
        logger.info("Logged %s for %s on %s", parsed.value, ctx.owner_id, day)
        return record

    async def summary(self, owner_id: str) -> AdherenceSummary:
        """Adherence over the configured window ending today."""
        today = self._clock.now().date()
        start = today - timedelta(days=self._window_days)
        records = await self._repo.list_between(owner_id, start, today)
        return summarize_attendance(records, today)
