"""
Test the wall clock and local "today"
"""
import asyncio
from datetime import date, datetime, timedelta, timezone

import pytest

from inbody_tracker.application.services.record_store import RecordStore
from inbody_tracker.domain.exceptions import ValidationError
from inbody_tracker.infrastructure.clock import SystemClock

pytestmark = pytest.mark.unit


def test_system_clock_is_local_and_aware():
    now = SystemClock().now()

    assert now.utcoffset() is not None
    assert now.utcoffset() == datetime.now().astimezone().utcoffset()
    assert now.date() in (date.today(), date.today() + timedelta(days=1))


def test_local_today_is_not_in_the_future(memory_repo, clock):
    # 23:30 in UTC-5 is already the next day in UTC.
    local = timezone(timedelta(hours=-5))
    clock.set(datetime(2024, 3, 20, 23, 30, tzinfo=local))
    store = RecordStore(owner_id="alice", repository=memory_repo, clock=clock)

    record = asyncio.run(store.save("2024-03-20", 80.0, 35.0, 21.0))
    assert record.date == date(2024, 3, 20)

    with pytest.raises(ValidationError) as exc:
        asyncio.run(store.save("2024-03-21", 80.0, 35.0, 21.0))
    assert "date" in exc.value.field_errors
