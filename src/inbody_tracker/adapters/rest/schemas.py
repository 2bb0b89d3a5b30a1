"""Pydantic models for REST API request/response validation."""

from __future__ import annotations

import datetime as dt
from typing import Optional

from pydantic import BaseModel, Field


# --- InBody records ---

class RecordBody(BaseModel):
    """Raw form values; bounds are checked by the domain validator so every
    offending field is reported at once."""
    date: str
    weight_kg: float | str | None = None
    skeletal_muscle_kg: float | str | None = None
    body_fat_percentage: float | str | None = None


class RecordOut(BaseModel):
    id: str | None
    date: dt.date
    weight_kg: float
    skeletal_muscle_kg: float
    body_fat_percentage: float
    source: str
    created_at: str


class DraftOverrides(BaseModel):
    """User corrections applied to the OCR-filled draft before saving."""
    date: Optional[str] = None
    weight_kg: float | str | None = None
    skeletal_muscle_kg: float | str | None = None
    body_fat_percentage: float | str | None = None


class DraftOut(BaseModel):
    date: str
    weight_kg: str
    skeletal_muscle_kg: str
    body_fat_percentage: str
    from_ocr: bool


class ExtractionOut(BaseModel):
    provider: str
    status: str
    confidence: float
    weight_kg: float | None
    skeletal_muscle_kg: float | None
    body_fat_percentage: float | None
    applied: bool
    draft: DraftOut


# --- Insights ---

class InsightOut(BaseModel):
    window: str
    weight_change: float | None
    muscle_change: float | None
    fat_change: float | None
    period_days: int


class MetricTrendOut(BaseModel):
    metric: str
    trend: str | None
    favorability: str


class TrendsOut(BaseModel):
    window: str
    goal: str | None
    metrics: list[MetricTrendOut]


# --- Attendance ---

class AttendanceBody(BaseModel):
    status: str = Field(..., description="trained, rest or missed")
    date: Optional[dt.date] = None
    notes: str = ""


class AttendanceOut(BaseModel):
    date: dt.date
    status: str
    notes: str


class AdherenceOut(BaseModel):
    trained_days: int
    rest_days: int
    missed_days: int
    total_logged: int
    current_streak: int
    consistency_score: int
    best_day: str | None
    last_trained_date: str | None
    risk_flags: list[str]


# --- Dashboard ---

class DashboardOut(BaseModel):
    goal: str | None
    record_count: int
    range_insight: InsightOut
    rolling_insight: InsightOut
    metrics: list[MetricTrendOut]
    adherence: AdherenceOut
