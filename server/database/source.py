"""Contract between the live feed and the readings backend"""
from typing import Callable, Optional, Protocol

from models.schemas import Reading

SUBSCRIBED = "SUBSCRIBED"
CLOSED = "CLOSED"

InsertCallback = Callable[[Reading], None]
StatusCallback = Callable[[str], None]
Unsubscribe = Callable[[], None]


class DataSourceUnavailable(Exception):
    """The backend could not be reached or queried"""


class ReadingsSource(Protocol):
    async def fetch_recent(self, limit: int) -> list[Reading]:
        """Up to ``limit`` most recent readings, newest first"""
        ...

    async def subscribe_inserts(
        self,
        on_insert: InsertCallback,
        on_status: Optional[StatusCallback] = None,
    ) -> Unsubscribe:
        ...

    async def insert(self, reading: Reading) -> Reading:
        ...

    async def count(self) -> int:
        ...


class Subscriptions:
    """Insert listeners of a source; each handle releases its entry once"""

    def __init__(self):
        self._listeners: dict[int, tuple[InsertCallback, Optional[StatusCallback]]] = {}
        self._next_key = 0

    def add(self, on_insert: InsertCallback, on_status: Optional[StatusCallback] = None) -> Unsubscribe:
        key = self._next_key
        self._next_key += 1
        self._listeners[key] = (on_insert, on_status)
        if on_status:
            on_status(SUBSCRIBED)

        def unsubscribe():
            entry = self._listeners.pop(key, None)
            if entry and entry[1]:
                entry[1](CLOSED)

        return unsubscribe

    def notify(self, reading: Reading):
        for on_insert, _ in list(self._listeners.values()):
            on_insert(reading)

    def __len__(self) -> int:
        return len(self._listeners)
