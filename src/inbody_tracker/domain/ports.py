"""
domain.ports - Abstract interfaces (Protocols) for all system boundaries.

These define WHAT the system needs without specifying HOW. Infrastructure
modules provide concrete implementations. Application services depend only
on these protocols, never on concrete classes.

Using typing.Protocol (structural typing) instead of ABC: any class that
implements the methods satisfies the port without explicit inheritance.
"""

from __future__ import annotations

from datetime import date, datetime
from pathlib import Path
from typing import Callable, Optional, Protocol, Union, runtime_checkable

from inbody_tracker.domain.models import ExtractionResult
from inbody_tracker.domain.entities import AttendanceRecord, BodyCompositionRecord


# Raw report payload: file bytes or a path on disk.
ReportPayload = Union[bytes, str, Path]

# Receives recognition progress as an integer percentage (0-100).
ProgressCallback = Callable[[int], None]


# ---------------------------------------------------------------------------
# Recognition
# ---------------------------------------------------------------------------

@runtime_checkable
class OCRProvider(Protocol):
    """Extract InBody metrics from an image or PDF report.

    Implementations must not raise for recoverable failures; they return
    ExtractionResult.empty() instead.
    """

    name: str

    async def extract_inbody_data(
        self,
        payload: ReportPayload,
        on_progress: Optional[ProgressCallback] = None,
    ) -> ExtractionResult: ...


# ---------------------------------------------------------------------------
# Clock
# ---------------------------------------------------------------------------

@runtime_checkable
class Clock(Protocol):
    """Supplies 'now' (timezone-aware) for rolling-window computations."""

    def now(self) -> datetime: ...


# ---------------------------------------------------------------------------
# Repository Ports
# ---------------------------------------------------------------------------

@runtime_checkable
class BodyCompositionRepository(Protocol):
    """Upsert-by-date storage for body-composition records.

    All methods raise StorageUnavailable when the backing store fails.
    """

    async def upsert_by_date(self, record: BodyCompositionRecord) -> BodyCompositionRecord: ...
    async def list_ordered_by_date(self, owner_id: str) -> list[BodyCompositionRecord]: ...
    async def get_by_date(self, owner_id: str, day: date) -> BodyCompositionRecord | None: ...


@runtime_checkable
class AttendanceRepository(Protocol):
    """Upsert-by-date storage for daily attendance status."""

    async def upsert_by_date(self, record: AttendanceRecord) -> AttendanceRecord: ...
    async def list_between(
        self, owner_id: str, start: date, end: date,
    ) -> list[AttendanceRecord]: ...
