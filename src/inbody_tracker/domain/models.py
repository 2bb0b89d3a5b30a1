"""
domain.models - Value objects for extraction, insights and trends.

These are immutable data containers with no dependencies on infrastructure
(no Tesseract, no SQLite, no FastAPI).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Optional


# ---------------------------------------------------------------------------
# Metrics
# ---------------------------------------------------------------------------

class Metric(str, Enum):
    """The three body-composition metrics tracked per record."""
    WEIGHT = "weight_kg"
    SKELETAL_MUSCLE = "skeletal_muscle_kg"
    BODY_FAT = "body_fat_percentage"


class FitnessGoal(str, Enum):
    """Client goal as stored on the client profile."""
    LOSE_FAT = "lose_fat"
    GAIN_MUSCLE = "gain_muscle"
    PERFORMANCE = "performance"
    GENERAL_FITNESS = "general_fitness"
    OTHER = "other"


# ---------------------------------------------------------------------------
# OCR extraction
# ---------------------------------------------------------------------------

class ExtractionStatus(str, Enum):
    """Outcome of an extraction, derived from how many fields were found.

    PARTIAL is not an error: the user is asked to complete the missing
    fields before saving.
    """
    COMPLETE = "complete"
    PARTIAL = "partial"
    FAILED = "failed"


@dataclass(frozen=True)
class ExtractionResult:
    """Best-guess metric values pulled out of a recognized InBody report.

    confidence is the fraction of the three metrics that were found. It is
    a presence signal, not a calibrated probability.
    """
    weight_kg: Optional[float] = None
    skeletal_muscle_kg: Optional[float] = None
    body_fat_percentage: Optional[float] = None
    confidence: float = 0.0
    raw_text: str = ""

    @classmethod
    def empty(cls) -> ExtractionResult:
        """Result returned when the recognition engine could not process the input."""
        return cls()

    @property
    def found_fields(self) -> int:
        return sum(
            v is not None
            for v in (self.weight_kg, self.skeletal_muscle_kg, self.body_fat_percentage)
        )

    @property
    def status(self) -> ExtractionStatus:
        found = self.found_fields
        if found == 3:
            return ExtractionStatus.COMPLETE
        if found > 0:
            return ExtractionStatus.PARTIAL
        return ExtractionStatus.FAILED

    def value_for(self, metric: Metric) -> Optional[float]:
        return getattr(self, metric.value)

    def to_dict(self) -> dict:
        return {
            "weight_kg": self.weight_kg,
            "skeletal_muscle_kg": self.skeletal_muscle_kg,
            "body_fat_percentage": self.body_fat_percentage,
            "confidence": self.confidence,
            "status": self.status.value,
        }


# ---------------------------------------------------------------------------
# Insights & trends
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Insight:
    """Change between an earlier and a later record, one decimal place."""
    weight_change: Optional[float] = None
    muscle_change: Optional[float] = None
    fat_change: Optional[float] = None
    period_days: int = 0

    @property
    def has_data(self) -> bool:
        return self.weight_change is not None

    def to_dict(self) -> dict:
        return {
            "weight_change": self.weight_change,
            "muscle_change": self.muscle_change,
            "fat_change": self.fat_change,
            "period_days": self.period_days,
        }


class Trend(str, Enum):
    UP = "up"
    DOWN = "down"
    STABLE = "stable"


class Favorability(str, Enum):
    """Goal-relative reading of a trend, used for dashboard colouring."""
    FAVORABLE = "favorable"
    UNFAVORABLE = "unfavorable"
    NEUTRAL = "neutral"


@dataclass(frozen=True)
class MetricTrends:
    """Per-metric trend over a caller-chosen window. None = not enough data."""
    weight: Optional[Trend] = None
    skeletal_muscle: Optional[Trend] = None
    body_fat: Optional[Trend] = None

    def for_metric(self, metric: Metric) -> Optional[Trend]:
        if metric is Metric.WEIGHT:
            return self.weight
        if metric is Metric.SKELETAL_MUSCLE:
            return self.skeletal_muscle
        return self.body_fat


# ---------------------------------------------------------------------------
# Attendance adherence
# ---------------------------------------------------------------------------

class AttendanceStatus(str, Enum):
    TRAINED = "trained"
    REST = "rest"
    MISSED = "missed"


@dataclass(frozen=True)
class AdherenceSummary:
    """Streak / consistency view over a window of logged attendance days."""
    trained_days: int = 0
    rest_days: int = 0
    missed_days: int = 0
    total_logged: int = 0
    current_streak: int = 0
    consistency_score: int = 0
    best_day: Optional[str] = None
    last_trained_date: Optional[date] = None
    risk_flags: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "trained_days": self.trained_days,
            "rest_days": self.rest_days,
            "missed_days": self.missed_days,
            "total_logged": self.total_logged,
            "current_streak": self.current_streak,
            "consistency_score": self.consistency_score,
            "best_day": self.best_day,
            "last_trained_date": (
                self.last_trained_date.isoformat() if self.last_trained_date else None
            ),
            "risk_flags": list(self.risk_flags),
        }
