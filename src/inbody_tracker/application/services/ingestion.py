"""
application.services.ingestion - OCR-assisted InBody entry.

The image-to-record flow:
    1. User uploads an InBody report (image or PDF)
    2. The active OCRProvider recognizes it and extracts the three metrics
    3. Extracted values pre-fill the user's draft form
    4. User reviews / completes the draft and saves it through the RecordStore

Extraction never aborts the workflow: a failed or partial read simply leaves
fields for the user to type in. Drafts survive validation and storage
failures so nothing has to be re-entered.

Overlapping uploads for the same owner are last-write-wins: only the newest
extraction is bound to the draft.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from inbody_tracker.application.context import SessionContext
from inbody_tracker.application.dto import IngestionOutcome, MeasurementDraft
from inbody_tracker.application.services.record_store import RecordStore
from inbody_tracker.domain.entities import BodyCompositionRecord
from inbody_tracker.domain.models import ExtractionStatus
from inbody_tracker.domain.ports import Clock, OCRProvider, ProgressCallback, ReportPayload

logger = logging.getLogger(__name__)


def _format_value(value: Optional[float]) -> Optional[str]:
    return None if value is None else f"{value:g}"


class ReportIngestionService:
    """Binds OCR extraction results to per-owner measurement drafts."""

    def __init__(
        self,
        provider: OCRProvider,
        clock: Clock,
        record_store_factory: Callable[[str], RecordStore],
    ):
        self._provider = provider
        self._clock = clock
        self._record_store_factory = record_store_factory
        self._drafts: dict[str, MeasurementDraft] = {}
        self._generations: dict[str, int] = {}

    @property
    def provider_name(self) -> str:
        return self._provider.name

    def get_draft(self, ctx: SessionContext) -> MeasurementDraft:
        """Current draft for the owner; a fresh one dated today if none exists."""
        draft = self._drafts.get(ctx.owner_id)
        if draft is None:
            draft = MeasurementDraft(date=self._clock.now().date().isoformat())
            self._drafts[ctx.owner_id] = draft
        return draft

    def update_draft(self, ctx: SessionContext, **fields: Optional[str]) -> MeasurementDraft:
        draft = self.get_draft(ctx).merged(**fields)
        self._drafts[ctx.owner_id] = draft
        return draft

    def discard_draft(self, ctx: SessionContext) -> None:
        self._drafts.pop(ctx.owner_id, None)

    async def extract(
        self,
        ctx: SessionContext,
        payload: ReportPayload,
        on_progress: Optional[ProgressCallback] = None,
    ) -> IngestionOutcome:
        """Run OCR on a report and pre-fill the owner's draft.

        Never raises for recognition failures: the provider degrades to an
        empty result and the draft is left for manual entry.
        """
        generation = self._generations.get(ctx.owner_id, 0) + 1
        self._generations[ctx.owner_id] = generation

        logger.info(
            "Extracting InBody report for %s with %s (request %s)",
            ctx.owner_id, self._provider.name, ctx.request_id,
        )
        result = await self._provider.extract_inbody_data(payload, on_progress)

        if self._generations.get(ctx.owner_id) != generation:
            logger.info(
                "Discarding superseded extraction for %s (request %s)",
                ctx.owner_id, ctx.request_id,
            )
            return IngestionOutcome(
                result=result,
                draft=self.get_draft(ctx),
                applied=False,
                provider=self._provider.name,
            )

        draft = self.get_draft(ctx)
        if result.status is not ExtractionStatus.FAILED:
            draft = draft.merged(
                weight_kg=_format_value(result.weight_kg),
                skeletal_muscle_kg=_format_value(result.skeletal_muscle_kg),
                body_fat_percentage=_format_value(result.body_fat_percentage),
                from_ocr=True,
            )
            self._drafts[ctx.owner_id] = draft

        if result.status is ExtractionStatus.COMPLETE:
            logger.info("All fields extracted for %s", ctx.owner_id)
        elif result.status is ExtractionStatus.PARTIAL:
            logger.info(
                "Partial extraction for %s (%d/3 fields); review required",
                ctx.owner_id, result.found_fields,
            )
        else:
            logger.warning("Could not read report for %s; manual entry required", ctx.owner_id)

        return IngestionOutcome(
            result=result,
            draft=draft,
            applied=True,
            provider=self._provider.name,
        )

    async def save_draft(
        self,
        ctx: SessionContext,
        **overrides: Optional[str],
    ) -> BodyCompositionRecord:
        """Apply user corrections, validate and save the owner's draft.

        The draft is cleared only after a successful save.

        Raises:
            ValidationError:    the draft keeps the user's corrections.
            StorageUnavailable: the draft keeps the user's corrections.
        """
        draft = self.update_draft(ctx, **overrides)
        store = self._record_store_factory(ctx.owner_id)
        record = await store.save(
            draft.date,
            draft.weight_kg,
            draft.skeletal_muscle_kg,
            draft.body_fat_percentage,
            source="ocr" if draft.from_ocr else "manual",
        )
        self.discard_draft(ctx)
        return record
