"""Bounded rolling window of the most recent readings (in-memory only)"""
from collections import deque
from typing import Iterable, Optional

from config.settings import MAX_POINTS
from models.schemas import Reading


class LiveWindow:
    """
    FIFO buffer holding at most ``capacity`` readings, oldest first.

    Readings are kept in append order and never re-sorted by timestamp.
    """

    def __init__(self, capacity: int = MAX_POINTS):
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.capacity = capacity
        self._readings: deque = deque(maxlen=capacity)

    def load_initial(self, readings: Iterable[Reading]):
        """Replace contents with a newest-first batch, stored oldest-first"""
        batch = list(readings)[:self.capacity]
        self._readings = deque(reversed(batch), maxlen=self.capacity)

    def append(self, reading: Reading):
        """Add the newest reading; a full window drops its oldest one"""
        self._readings.append(reading)

    def snapshot(self) -> tuple[Reading, ...]:
        """Independent chronological copy of the window"""
        return tuple(self._readings)

    def latest(self) -> Optional[Reading]:
        return self._readings[-1] if self._readings else None

    def contains_id(self, reading_id: Optional[int]) -> bool:
        if reading_id is None:
            return False
        return any(r.id == reading_id for r in self._readings)

    def __len__(self) -> int:
        return len(self._readings)
