"""
domain.validation - Per-field bounds checking for body-composition input.

Errors are collected for every field before raising so each offending
input can be reported next to the field it belongs to.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date
from typing import Optional, Union

from inbody_tracker.domain.exceptions import ValidationError

WEIGHT_MIN_KG = 20.0
WEIGHT_MAX_KG = 300.0
MUSCLE_MAX_KG = 150.0
BODY_FAT_MIN_PCT = 3.0
BODY_FAT_MAX_PCT = 60.0

FieldInput = Union[str, float, int, None]


@dataclass(frozen=True)
class ValidMeasurement:
    date: date
    weight_kg: float
    skeletal_muscle_kg: float
    body_fat_percentage: float


def _to_float(value: FieldInput) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def _to_date(value: Union[str, date, None]) -> Optional[date]:
    if isinstance(value, date):
        return value
    if not value:
        return None
    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        return None


def validate_measurement(
    day: Union[str, date, None],
    weight_kg: FieldInput,
    skeletal_muscle_kg: FieldInput,
    body_fat_percentage: FieldInput,
    today: Optional[date] = None,
) -> ValidMeasurement:
    """Check every field against its bound and return typed values.

    Raises:
        ValidationError: with one message per offending field.
    """
    errors: dict[str, str] = {}

    parsed_date = _to_date(day)
    if parsed_date is None:
        errors["date"] = "Date must be a valid YYYY-MM-DD date"
    elif today is not None and parsed_date > today:
        errors["date"] = "Date cannot be in the future"

    weight = _to_float(weight_kg)
    if weight is None or not WEIGHT_MIN_KG <= weight <= WEIGHT_MAX_KG:
        errors["weight_kg"] = "Weight must be between 20-300 kg"

    muscle = _to_float(skeletal_muscle_kg)
    if muscle is None or muscle <= 0:
        errors["skeletal_muscle_kg"] = "Muscle mass must be a positive number"
    elif muscle > MUSCLE_MAX_KG:
        errors["skeletal_muscle_kg"] = "Muscle mass cannot exceed 150 kg"

    fat = _to_float(body_fat_percentage)
    if fat is None or not BODY_FAT_MIN_PCT <= fat <= BODY_FAT_MAX_PCT:
        errors["body_fat_percentage"] = "Body fat must be between 3-60%"

    if errors:
        raise ValidationError(errors)

    return ValidMeasurement(
        date=parsed_date,
        weight_kg=weight,
        skeletal_muscle_kg=muscle,
        body_fat_percentage=fat,
    )
