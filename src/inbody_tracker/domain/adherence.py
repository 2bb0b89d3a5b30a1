"""
domain.adherence - Streak, consistency score and risk flags from attendance.

One implementation shared by the client dashboard, the attendance history
view and the coach-side insights panel.
"""

from __future__ import annotations

from collections import Counter
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Sequence

from inbody_tracker.domain.entities import AttendanceRecord
from inbody_tracker.domain.models import AdherenceSummary, AttendanceStatus

# Consistency is measured against at least two weeks of logging.
MIN_CONSISTENCY_DENOMINATOR = 14

# Reported when a client has never logged a trained day.
NEVER_TRAINED_DAYS = 999

_ON_TRACK = (AttendanceStatus.TRAINED, AttendanceStatus.REST)


def current_streak(records: Sequence[AttendanceRecord]) -> int:
    """Count consecutive trained/rest days, newest first, until a missed day."""
    streak = 0
    for record in sorted(records, key=lambda r: r.date, reverse=True):
        if record.status not in _ON_TRACK:
            break
        streak += 1
    return streak


def consistency_score(trained: int, rest: int, total: int) -> int:
    if total <= 0:
        return 0
    ratio = Decimal(trained + rest) / Decimal(max(total, MIN_CONSISTENCY_DENOMINATOR))
    return int((ratio * 100).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def summarize_attendance(
    records: Sequence[AttendanceRecord],
    today: date,
) -> AdherenceSummary:
    """Summarize the attendance days the caller loaded for its window."""
    newest_first = sorted(records, key=lambda r: r.date, reverse=True)
    counts = Counter(r.status for r in newest_first)
    trained = counts[AttendanceStatus.TRAINED]
    rest = counts[AttendanceStatus.REST]
    missed = counts[AttendanceStatus.MISSED]
    total = len(newest_first)
    score = consistency_score(trained, rest, total)

    # Counter keeps first-seen order, so ties go to the most recent weekday.
    weekdays = Counter(
        r.date.strftime("%A")
        for r in newest_first
        if r.status is AttendanceStatus.TRAINED
    )
    best_day = weekdays.most_common(1)[0][0] if weekdays else None

    last_trained = next(
        (r.date for r in newest_first if r.status is AttendanceStatus.TRAINED),
        None,
    )
    days_since = (today - last_trained).days if last_trained else NEVER_TRAINED_DAYS

    flags: list[str] = []
    if days_since >= 7:
        flags.append("Inactive for 7+ days")
    elif days_since >= 4:
        flags.append("No training in 4+ days")
    if missed >= 3:
        flags.append(f"{missed} missed sessions this month")
    if score < 50 and total > 7:
        flags.append("Low consistency score")

    return AdherenceSummary(
        trained_days=trained,
        rest_days=rest,
        missed_days=missed,
        total_logged=total,
        current_streak=current_streak(newest_first),
        consistency_score=score,
        best_day=best_day,
        last_trained_date=last_trained,
        risk_flags=flags,
    )
