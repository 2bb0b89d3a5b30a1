"""
infrastructure.persistence.body_composition_repo - SQLite InBody record repository.

Implements BodyCompositionRepository. Upserts use the (owner_id, date)
unique key, so a second save for the same day replaces the measured values
in a single statement while id and created_at keep their first values.
"""

from __future__ import annotations

import logging
import uuid
from datetime import date, datetime, timezone

from inbody_tracker.domain.entities import BodyCompositionRecord
from inbody_tracker.infrastructure.persistence.connection import AsyncSQLiteConnection

logger = logging.getLogger(__name__)

_COLUMNS = (
    "id, owner_id, date, weight_kg, skeletal_muscle_kg, "
    "body_fat_percentage, source, created_at"
)


class SQLiteBodyCompositionRepository:
    """Async SQLite implementation of BodyCompositionRepository."""

    def __init__(self, connection: AsyncSQLiteConnection):
        self._conn = connection

    async def upsert_by_date(self, record: BodyCompositionRecord) -> BodyCompositionRecord:
        now = datetime.now(timezone.utc).isoformat()
        async with self._conn.acquire() as conn:
            await conn.execute(
                """INSERT INTO inbody_records
                   (id, owner_id, date, weight_kg, skeletal_muscle_kg,
                    body_fat_percentage, source, created_at, updated_at)
                   VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                   ON CONFLICT (owner_id, date) DO UPDATE SET
                       weight_kg = excluded.weight_kg,
                       skeletal_muscle_kg = excluded.skeletal_muscle_kg,
                       body_fat_percentage = excluded.body_fat_percentage,
                       source = excluded.source,
                       updated_at = excluded.updated_at""",
                (uuid.uuid4().hex, record.owner_id, record.date.isoformat(),
                 record.weight_kg, record.skeletal_muscle_kg,
                 record.body_fat_percentage, record.source, now, now),
            )
            rows = await conn.execute_fetchall(
                f"SELECT {_COLUMNS} FROM inbody_records WHERE owner_id = ? AND date = ?",
                (record.owner_id, record.date.isoformat()),
            )
        stored = self._row_to_record(rows[0])
        logger.debug("Upserted InBody record %s for %s on %s", stored.id, stored.owner_id, stored.date)
        return stored

    async def list_ordered_by_date(self, owner_id: str) -> list[BodyCompositionRecord]:
        async with self._conn.acquire() as conn:
            rows = await conn.execute_fetchall(
                f"SELECT {_COLUMNS} FROM inbody_records WHERE owner_id = ? ORDER BY date ASC",
                (owner_id,),
            )
            return [self._row_to_record(r) for r in rows]

    async def get_by_date(self, owner_id: str, day: date) -> BodyCompositionRecord | None:
        async with self._conn.acquire() as conn:
            rows = await conn.execute_fetchall(
                f"SELECT {_COLUMNS} FROM inbody_records WHERE owner_id = ? AND date = ?",
                (owner_id, day.isoformat()),
            )
            return self._row_to_record(rows[0]) if rows else None

    @staticmethod
    def _row_to_record(row) -> BodyCompositionRecord:
        return BodyCompositionRecord(
            id=row[0],
            owner_id=row[1],
            date=date.fromisoformat(row[2]),
            weight_kg=float(row[3]),
            skeletal_muscle_kg=float(row[4]),
            body_fat_percentage=float(row[5]),
            source=row[6] or "manual",
            created_at=row[7] or "",
        )
