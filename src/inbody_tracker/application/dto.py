"""
application.dto - Data Transfer Objects for service input/output.

These are the structured results that services return to callers
(REST endpoints, CLI commands).
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Optional

from inbody_tracker.domain.models import (
    AdherenceSummary,
    ExtractionResult,
    Favorability,
    Insight,
    MetricTrends,
)


@dataclass(frozen=True)
class MeasurementDraft:
    """The values currently bound to a user's measurement form.

    Fields hold the raw form text so the user's own input survives failed
    saves exactly as typed.
    """
    date: str = ""
    weight_kg: str = ""
    skeletal_muscle_kg: str = ""
    body_fat_percentage: str = ""
    from_ocr: bool = False

    def merged(self, **overrides: Optional[str]) -> MeasurementDraft:
        """Return a copy with every non-None override applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes)

    def to_dict(self) -> dict:
        return {
            "date": self.date,
            "weight_kg": self.weight_kg,
            "skeletal_muscle_kg": self.skeletal_muscle_kg,
            "body_fat_percentage": self.body_fat_percentage,
            "from_ocr": self.from_ocr,
        }


@dataclass(frozen=True)
class IngestionOutcome:
    """Result of one OCR extraction request.

    applied is False when a newer extraction for the same owner started
    before this one finished; its values were not bound to the draft.
    """
    result: ExtractionResult
    draft: MeasurementDraft
    applied: bool = True
    provider: str = ""


@dataclass(frozen=True)
class MetricOverview:
    """Trend of one metric plus its goal-relative reading."""
    metric: str
    trend: Optional[str]
    favorability: Favorability


@dataclass(frozen=True)
class ClientInsights:
    """Everything a dashboard needs about one client, computed in one place."""
    owner_id: str
    goal: Optional[str]
    record_count: int
    range_insight: Insight
    rolling_insight: Insight
    trends: MetricTrends
    metrics: list[MetricOverview] = field(default_factory=list)
    adherence: AdherenceSummary = field(default_factory=AdherenceSummary)
