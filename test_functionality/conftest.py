"""
Shared fixtures for the InBody tracker tests.

Async code is driven with asyncio.run() the same way the entry points do it.
"""

from __future__ import annotations

import asyncio
from datetime import date, datetime, timezone
from typing import Optional

import pytest
from fastapi.testclient import TestClient
from jose import jwt

from inbody_tracker.adapters.rest.app import create_app
from inbody_tracker.application.services.record_store import RecordStore
from inbody_tracker.domain.entities import BodyCompositionRecord
from inbody_tracker.domain.exceptions import StorageUnavailable
from inbody_tracker.domain.models import ExtractionResult
from inbody_tracker.factory import ServiceFactory
from inbody_tracker.infrastructure.config import Settings

JWT_SECRET = "test-secret"
NOW = datetime(2024, 3, 20, 12, 0, tzinfo=timezone.utc)


class FixedClock:
    def __init__(self, now: datetime = NOW):
        self._now = now

    def now(self) -> datetime:
        return self._now

    def set(self, now: datetime) -> None:
        self._now = now


class FakeOCRProvider:
    """Returns canned results; payloads listed in gates wait for their event."""

    name = "Fake"

    def __init__(self, result: Optional[ExtractionResult] = None):
        self.result = result or ExtractionResult.empty()
        self.results: dict[bytes, ExtractionResult] = {}
        self.gates: dict[bytes, asyncio.Event] = {}
        self.calls: list = []

    async def extract_inbody_data(self, payload, on_progress=None):
        self.calls.append(payload)
        if on_progress:
            on_progress(0)
        gate = self.gates.get(payload)
        if gate is not None:
            await gate.wait()
        if on_progress:
            on_progress(100)
        return self.results.get(payload, self.result)


class InMemoryBodyCompositionRepository:
    def __init__(self):
        self.rows: dict[tuple[str, date], BodyCompositionRecord] = {}
        self.fail_writes = False
        self.upserts = 0

    async def upsert_by_date(self, record):
        self.upserts += 1
        if self.fail_writes:
            raise StorageUnavailable("database is locked")
        key = (record.owner_id, record.date)
        existing = self.rows.get(key)
        stored = BodyCompositionRecord(
            owner_id=record.owner_id,
            date=record.date,
            weight_kg=record.weight_kg,
            skeletal_muscle_kg=record.skeletal_muscle_kg,
            body_fat_percentage=record.body_fat_percentage,
            source=record.source,
            id=existing.id if existing else f"rec-{len(self.rows) + 1}",
            created_at=existing.created_at if existing else NOW.isoformat(),
        )
        self.rows[key] = stored
        return stored

    async def list_ordered_by_date(self, owner_id):
        return sorted(
            (r for (owner, _), r in self.rows.items() if owner == owner_id),
            key=lambda r: r.date,
        )

    async def get_by_date(self, owner_id, day):
        return self.rows.get((owner_id, day))


def make_record(day: str, weight: float, muscle: float = 35.0, fat: float = 20.0,
                owner: str = "alice") -> BodyCompositionRecord:
    return BodyCompositionRecord(
        owner_id=owner,
        date=date.fromisoformat(day),
        weight_kg=weight,
        skeletal_muscle_kg=muscle,
        body_fat_percentage=fat,
    )


def make_token(owner_id: str, secret: str = JWT_SECRET) -> str:
    return jwt.encode({"sub": owner_id, "role": "client"}, secret, algorithm="HS256")


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def ocr_provider() -> FakeOCRProvider:
    return FakeOCRProvider()


@pytest.fixture
def memory_repo() -> InMemoryBodyCompositionRepository:
    return InMemoryBodyCompositionRepository()


@pytest.fixture
def memory_store_factory(memory_repo, clock):
    def _factory(owner_id: str) -> RecordStore:
        return RecordStore(owner_id=owner_id, repository=memory_repo, clock=clock)
    return _factory


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        project_root=tmp_path,
        db_path=str(tmp_path / "inbody-test.db"),
        jwt_secret=JWT_SECRET,
        upload_max_bytes=4096,
    )


@pytest.fixture
def factory(settings, clock, ocr_provider) -> ServiceFactory:
    service_factory = ServiceFactory(settings, clock=clock, ocr_provider=ocr_provider)
    asyncio.run(service_factory.initialize())
    return service_factory


@pytest.fixture
def client(factory):
    with TestClient(create_app(factory)) as test_client:
        yield test_client


@pytest.fixture
def auth_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token('alice')}"}
