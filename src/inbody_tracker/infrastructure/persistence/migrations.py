"""
infrastructure.persistence.migrations - Database schema creation.

Called once at startup by the adapter or factory.
"""

from __future__ import annotations

import logging

from inbody_tracker.infrastructure.persistence.connection import AsyncSQLiteConnection

logger = logging.getLogger(__name__)

_TABLES = [
    """CREATE TABLE IF NOT EXISTS inbody_records (
        id TEXT PRIMARY KEY,
        owner_id TEXT NOT NULL,
        date TEXT NOT NULL,
        weight_kg REAL NOT NULL CHECK (weight_kg BETWEEN 20 AND 300),
        skeletal_muscle_kg REAL NOT NULL CHECK (skeletal_muscle_kg > 0 AND skeletal_muscle_kg <= 150),
        body_fat_percentage REAL NOT NULL CHECK (body_fat_percentage BETWEEN 3 AND 60),
        source TEXT NOT NULL DEFAULT 'manual',
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL,
        UNIQUE (owner_id, date)
    )""",
    """CREATE TABLE IF NOT EXISTS attendance (
        id TEXT PRIMARY KEY,
        owner_id TEXT NOT NULL,
        date TEXT NOT NULL,
        status TEXT NOT NULL CHECK (status IN ('trained', 'rest', 'missed')),
        notes TEXT NOT NULL DEFAULT '',
        created_at TEXT NOT NULL,
        UNIQUE (owner_id, date)
    )""",
    "CREATE INDEX IF NOT EXISTS idx_inbody_owner_date ON inbody_records(owner_id, date)",
    "CREATE INDEX IF NOT EXISTS idx_attendance_owner_date ON attendance(owner_id, date)",
]


async def run_migrations(connection: AsyncSQLiteConnection) -> None:
    """Create all tables if they don't exist.

    Safe to call multiple times (uses IF NOT EXISTS).
    """
    async with connection.acquire() as conn:
        for ddl in _TABLES:
            await conn.execute(ddl)
    logger.info("All tables created (or already exist).")
