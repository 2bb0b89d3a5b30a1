"""
domain.entities - Persistence-aware types (have IDs, timestamps).

Decoupled from any persistence strategy: no SQL concerns, no DB imports.
Timestamps and IDs are assigned by the repository implementations on first
insert, not by the entities themselves.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from inbody_tracker.domain.models import AttendanceStatus, Metric


@dataclass(frozen=True)
class BodyCompositionRecord:
    """One InBody measurement. At most one per (owner_id, date)."""
    owner_id: str
    date: date
    weight_kg: float
    skeletal_muscle_kg: float
    body_fat_percentage: float
    source: str = "manual"  # "manual" or "ocr"
    id: Optional[str] = None
    created_at: str = ""

    def value_for(self, metric: Metric) -> float:
        return getattr(self, metric.value)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "owner_id": self.owner_id,
            "date": self.date.isoformat(),
            "weight_kg": self.weight_kg,
            "skeletal_muscle_kg": self.skeletal_muscle_kg,
            "body_fat_percentage": self.body_fat_percentage,
            "source": self.source,
            "created_at": self.created_at,
        }


@dataclass(frozen=True)
class AttendanceRecord:
    """A single day's attendance status. At most one per (owner_id, date)."""
    owner_id: str
    date: date
    status: AttendanceStatus
    notes: str = ""
    id: Optional[str] = None
    created_at: str = ""
