"""
Pytest configuration and shared fixtures.

This module provides:
- An in-memory readings source whose initial fetch can be held back
- Helpers for building readings
"""
import asyncio
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Optional

# Add server directory to path
server_root = Path(__file__).parent.parent
sys.path.insert(0, str(server_root))

import pytest

from database.source import DataSourceUnavailable, Subscriptions
from models.schemas import Reading

BASE_TIME = datetime(2026, 5, 1, 12, 0, tzinfo=timezone.utc)


def make_reading(
    index: int,
    temperature: Optional[float] = 34.0,
    humidity: Optional[float] = 60.0,
    sound_value: Optional[float] = 200.0,
    timestamped: bool = True,
) -> Reading:
    """Reading with id ``index``, captured ``index`` minutes after BASE_TIME"""
    return Reading(
        id=index,
        temperature=temperature,
        humidity=humidity,
        sound_value=sound_value,
        created_at=BASE_TIME + timedelta(minutes=index) if timestamped else None,
    )


def newest_first(count: int, start: int = 1) -> list[Reading]:
    """Readings ``start``..``start+count-1`` as the backend returns them"""
    return [make_reading(i) for i in reversed(range(start, start + count))]


class FakeReadingsSource:
    """
    In-memory readings backend.

    With ``hold_fetch=True`` the initial fetch waits until ``release()``.
    """

    def __init__(self, rows=None, fail_fetch=False, fail_insert=False, hold_fetch=False,
                 fetch_exception=None):
        self.rows = list(rows or [])
        self.fail_fetch = fail_fetch
        self.fail_insert = fail_insert
        self.hold_fetch = hold_fetch
        self.fetch_exception = fetch_exception
        self.subscriptions = Subscriptions()
        self.fetch_calls = 0
        self.unsubscribe_calls = 0
        self._gate = None
        self._next_id = 1000

    def release(self):
        self.hold_fetch = False
        if self._gate is not None:
            self._gate.set()

    async def fetch_recent(self, limit: int) -> list[Reading]:
        self.fetch_calls += 1
        if self.hold_fetch:
            self._gate = asyncio.Event()
            await self._gate.wait()
        if self.fetch_exception is not None:
            raise self.fetch_exception
        if self.fail_fetch:
            raise DataSourceUnavailable("backend offline")
        return self.rows[:limit]

    async def subscribe_inserts(self, on_insert, on_status=None):
        release = self.subscriptions.add(on_insert, on_status)

        def unsubscribe():
            self.unsubscribe_calls += 1
            release()

        return unsubscribe

    async def insert(self, reading: Reading) -> Reading:
        if self.fail_insert:
            raise DataSourceUnavailable("backend offline")
        self._next_id += 1
        stored = reading.model_copy(update={"id": self._next_id})
        self.push(stored)
        return stored

    async def count(self) -> int:
        return len(self.rows)

    def push(self, reading: Reading):
        """Simulate a row inserted by another writer"""
        self.rows.insert(0, reading)
        self.subscriptions.notify(reading)


@pytest.fixture
def fake_source():
    return FakeReadingsSource(rows=newest_first(5))
