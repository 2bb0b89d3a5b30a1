"""
application.services.record_store - Cached, date-ordered InBody records for one owner.

The store keeps the owner's records in ascending date order and exposes the
insight and trend computations over that list. A save validates first,
then upserts, then merges the stored record into the cache. If persistence
fails the cached list is left exactly as it was.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Union

from inbody_tracker.domain.entities import BodyCompositionRecord
from inbody_tracker.domain.exceptions import StorageUnavailable
from inbody_tracker.domain.insights import (
    calendar_month_window,
    get_calendar_month_insights,
    get_insights,
    get_monthly_insights,
    rolling_window,
)
from inbody_tracker.domain.models import Insight, MetricTrends
from inbody_tracker.domain.ports import BodyCompositionRepository, Clock
from inbody_tracker.domain.trends import classify_records
from inbody_tracker.domain.validation import FieldInput, validate_measurement

logger = logging.getLogger(__name__)

INSIGHT_WINDOWS = ("range", "rolling", "calendar_month")


class RecordStore:
    """Client-side cache of one owner's body-composition records."""

    def __init__(
        self,
        owner_id: str,
        repository: BodyCompositionRepository,
        clock: Clock,
    ):
        self._owner_id = owner_id
        self._repo = repository
        self._clock = clock
        self._records: tuple[BodyCompositionRecord, ...] = ()

    @property
    def owner_id(self) -> str:
        return self._owner_id

    @property
    def records(self) -> tuple[BodyCompositionRecord, ...]:
        """Cached records, ascending by date."""
        return self._records

    async def load(self) -> tuple[BodyCompositionRecord, ...]:
        """Replace the cache with the repository's current list."""
        records = await self._repo.list_ordered_by_date(self._owner_id)
        self._records = tuple(records)
        logger.debug("Loaded %d InBody record(s) for %s", len(records), self._owner_id)
        return self._records

    async def save(
        self,
        day: Union[str, date, None],
        weight_kg: FieldInput,
        skeletal_muscle_kg: FieldInput,
        body_fat_percentage: FieldInput,
        source: str = "manual",
    ) -> BodyCompositionRecord:
        """Validate and upsert a measurement for its date.

        Raises:
            ValidationError:    before any persistence attempt.
            StorageUnavailable: the write failed; the cache is unchanged.
        """
        valid = validate_measurement(
            day, weight_kg, skeletal_muscle_kg, body_fat_percentage,
            today=self._clock.now().date(),
        )
        record = BodyCompositionRecord(
            owner_id=self._owner_id,
            date=valid.date,
            weight_kg=valid.weight_kg,
            skeletal_muscle_kg=valid.skeletal_muscle_kg,
            body_fat_percentage=valid.body_fat_percentage,
            source=source,
        )

        try:
            stored = await self._repo.upsert_by_date(record)
        except StorageUnavailable:
            logger.warning(
                "Could not save InBody record for %s on %s; cache left untouched",
                self._owner_id, valid.date,
            )
            raise

        others = [r for r in self._records if r.date != stored.date]
        self._records = tuple(sorted([*others, stored], key=lambda r: r.date))
        logger.info("Saved InBody measurement for %s on %s", self._owner_id, stored.date)
        return stored

    # ------------------------------------------------------------------
    # Derived views
    # ------------------------------------------------------------------

    def get_insights(self) -> Insight:
        return get_insights(self._records)

    def get_monthly_insights(self) -> Insight:
        """Rolling 30-day window ending now (not the calendar month)."""
        return get_monthly_insights(self._records, self._clock.now())

    def get_calendar_month_insights(self) -> Insight:
        return get_calendar_month_insights(self._records, self._clock.now())

    def insights_for(self, window: str) -> Insight:
        if window == "range":
            return self.get_insights()
        if window == "rolling":
            return self.get_monthly_insights()
        if window == "calendar_month":
            return self.get_calendar_month_insights()
        raise ValueError(f"Unknown insight window: {window!r}")

    def get_trends(self, window: str = "range") -> MetricTrends:
        """Trends over the records of the named window."""
        if window == "range":
            return classify_records(self._records)
        if window == "rolling":
            return classify_records(rolling_window(self._records, self._clock.now()))
        if window == "calendar_month":
            return classify_records(calendar_month_window(self._records, self._clock.now()))
        raise ValueError(f"Unknown insight window: {window!r}")
