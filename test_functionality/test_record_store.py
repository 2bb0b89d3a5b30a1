"""
Test the per-owner record store
"""
import asyncio

import pytest

from conftest import make_record
from inbody_tracker.application.services.record_store import RecordStore
from inbody_tracker.domain.exceptions import StorageUnavailable, ValidationError
from inbody_tracker.domain.models import Insight, Trend

pytestmark = pytest.mark.unit


@pytest.fixture
def store(memory_store_factory) -> RecordStore:
    return memory_store_factory("alice")


def test_single_manual_entry_has_no_insight(store):
    record = asyncio.run(store.save("2024-03-01", "82.0", "35.0", "21.0"))

    assert record.source == "manual"
    assert len(store.records) == 1
    assert store.get_insights() == Insight(None, None, None, 0)


def test_two_entries_two_weeks_apart(store):
    async def main():
        await store.save("2024-03-15", 80.0, 35.0, 21.0)
        await store.save("2024-03-01", 82.0, 35.0, 21.0)

    asyncio.run(main())

    assert [r.date.day for r in store.records] == [1, 15]
    insight = store.get_insights()
    assert insight.weight_change == -2.0
    assert insight.period_days == 14


def test_same_date_replaces_cached_record(store):
    async def main():
        await store.save("2024-03-01", 82.0, 35.0, 21.0)
        await store.save("2024-03-01", 81.5, 35.0, 21.0)

    asyncio.run(main())

    assert [r.weight_kg for r in store.records] == [81.5]


def test_invalid_input_never_reaches_repository(store, memory_repo):
    with pytest.raises(ValidationError):
        asyncio.run(store.save("2024-03-01", 500, 35.0, 21.0))

    assert memory_repo.upserts == 0
    assert store.records == ()


def test_storage_failure_leaves_cache_untouched(store, memory_repo):
    asyncio.run(store.save("2024-03-01", 82.0, 35.0, 21.0))
    before = store.records

    memory_repo.fail_writes = True
    with pytest.raises(StorageUnavailable):
        asyncio.run(store.save("2024-03-02", 81.0, 35.0, 21.0))

    assert store.records == before


def test_load_replaces_cache(store, memory_repo):
    async def main():
        await memory_repo.upsert_by_date(make_record("2024-02-01", 85.0))
        await memory_repo.upsert_by_date(make_record("2024-02-01", 60.0, owner="bob"))
        return await store.load()

    records = asyncio.run(main())

    assert [r.weight_kg for r in records] == [85.0]


def test_windows_use_injected_clock(store):
    # Clock is fixed at 2024-03-20 12:00 UTC.
    async def main():
        await store.save("2024-01-10", 90.0, 33.0, 28.0)
        await store.save("2024-03-02", 86.0, 34.0, 26.0)
        await store.save("2024-03-18", 85.0, 34.1, 25.0)

    asyncio.run(main())

    assert store.insights_for("range").weight_change == -5.0
    assert store.insights_for("rolling").weight_change == -1.0
    calendar = store.insights_for("calendar_month")
    assert calendar.weight_change == -1.0
    assert calendar.period_days == 19
    assert store.get_trends("rolling").skeletal_muscle is Trend.STABLE
    assert store.get_trends("range").skeletal_muscle is Trend.UP


def test_unknown_window(store):
    with pytest.raises(ValueError):
        store.insights_for("weekly")
