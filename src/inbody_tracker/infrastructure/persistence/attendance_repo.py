"""
infrastructure.persistence.attendance_repo - SQLite attendance repository.

Implements AttendanceRepository. Re-logging a date replaces its status.
"""

from __future__ import annotations

import logging
import uuid
from datetime import date, datetime, timezone

from inbody_tracker.domain.entities import AttendanceRecord
from inbody_tracker.domain.models import AttendanceStatus
from inbody_tracker.infrastructure.persistence.connection import AsyncSQLiteConnection

logger = logging.getLogger(__name__)


class SQLiteAttendanceRepository:
    """Async SQLite implementation of AttendanceRepository."""

    def __init__(self, connection: AsyncSQLiteConnection):
        self._conn = connection

    async def upsert_by_date(self, record: AttendanceRecord) -> AttendanceRecord:
        now = datetime.now(timezone.utc).isoformat()
        async with self._conn.acquire() as conn:
            await conn.execute(
                """INSERT INTO attendance (id, owner_id, date, status, notes, created_at)
                   VALUES (?, ?, ?, ?, ?, ?)
                   ON CONFLICT (owner_id, date) DO UPDATE SET
                       status = excluded.status,
                       notes = excluded.notes""",
                (uuid.uuid4().hex, record.owner_id, record.date.isoformat(),
                 record.status.value, record.notes, now),
            )
            rows = await conn.execute_fetchall(
                "SELECT id, owner_id, date, status, notes, created_at "
                "FROM attendance WHERE owner_id = ? AND date = ?",
                (record.owner_id, record.date.isoformat()),
            )
        return self._row_to_record(rows[0])

    async def list_between(
        self, owner_id: str, start: date, end: date,
    ) -> list[AttendanceRecord]:
        """Records with start <= date <= end, newest first."""
        async with self._conn.acquire() as conn:
            rows = await conn.execute_fetchall(
                """SELECT id, owner_id, date, status, notes, created_at
                   FROM attendance
                   WHERE owner_id = ? AND date >= ? AND date <= ?
                   ORDER BY date DESC""",
                (owner_id, start.isoformat(), end.isoformat()),
            )
            return [self._row_to_record(r) for r in rows]

    @staticmethod
    def _row_to_record(row) -> AttendanceRecord:
        return AttendanceRecord(
            id=row[0],
            owner_id=row[1],
            date=date.fromisoformat(row[2]),
            status=AttendanceStatus(row[3]),
            notes=row[4] or "",
            created_at=row[5] or "",
        )
