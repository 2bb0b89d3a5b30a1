"""
domain.extraction - Pull InBody metrics out of free-form recognized text.

Each metric has an ordered list of patterns, most specific first. The first
pattern whose capture parses to a finite number wins; there is no averaging
across patterns. A capture that fails to parse counts as a non-match.
"""

from __future__ import annotations

import math
import re
from typing import Optional, Sequence

from inbody_tracker.domain.models import ExtractionResult

_NUM = r"(\d+\.?\d*)"

WEIGHT_PATTERNS = [
    re.compile(rf"weight[:\s]*{_NUM}\s*kg", re.IGNORECASE),
    re.compile(rf"body\s*weight[:\s]*{_NUM}", re.IGNORECASE),
    re.compile(rf"{_NUM}\s*kg\s*(?:weight|body)", re.IGNORECASE),
    re.compile(r"^(\d{2,3}\.?\d*)\s*kg$", re.IGNORECASE | re.MULTILINE),
]

MUSCLE_PATTERNS = [
    re.compile(rf"skeletal\s*muscle\s*mass[:\s]*{_NUM}", re.IGNORECASE),
    re.compile(rf"smm[:\s]*{_NUM}", re.IGNORECASE),
    re.compile(rf"muscle\s*mass[:\s]*{_NUM}", re.IGNORECASE),
    re.compile(rf"skeletal\s*muscle[:\s]*{_NUM}", re.IGNORECASE),
]

BODY_FAT_PATTERNS = [
    re.compile(rf"body\s*fat\s*(?:percentage|%)?[:\s]*{_NUM}", re.IGNORECASE),
    re.compile(rf"pbf[:\s]*{_NUM}", re.IGNORECASE),
    re.compile(rf"fat\s*(?:percentage|%)[:\s]*{_NUM}", re.IGNORECASE),
    re.compile(rf"{_NUM}\s*%\s*(?:body\s*fat|fat)", re.IGNORECASE),
]


def extract_number(text: str, patterns: Sequence[re.Pattern]) -> Optional[float]:
    """Return the value captured by the first matching pattern, or None."""
    for pattern in patterns:
        match = pattern.search(text)
        if not match or not match.group(1):
            continue
        try:
            value = float(match.group(1))
        except ValueError:
            continue
        if math.isfinite(value):
            return value
    return None


def parse_inbody_text(text: str) -> ExtractionResult:
    """Extract weight, skeletal muscle mass and body-fat % from report text.

    Pure and deterministic: identical text always yields an identical result.
    """
    weight = extract_number(text, WEIGHT_PATTERNS)
    muscle = extract_number(text, MUSCLE_PATTERNS)
    body_fat = extract_number(text, BODY_FAT_PATTERNS)

    found = sum(v is not None for v in (weight, muscle, body_fat))

    return ExtractionResult(
        weight_kg=weight,
        skeletal_muscle_kg=muscle,
        body_fat_percentage=body_fat,
        confidence=found / 3,
        raw_text=text,
    )
