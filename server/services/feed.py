"""Live feed: binds a live window to a readings source"""
from collections import deque
from typing import Callable, Optional

from config.logger import get_logger
from config.settings import MAX_POINTS
from database.source import (
    CLOSED,
    SUBSCRIBED,
    DataSourceUnavailable,
    ReadingsSource,
    Unsubscribe,
)
from models.schemas import FeedStatus, Reading, ViewModel
from services.live_window import LiveWindow
from services.metrics import MetricsFacade

logger = get_logger("feed")

STATUS_WARMING = "Warming hive monitors…"
STATUS_SYNCING = f"Syncing last {MAX_POINTS} readings…"
STATUS_STREAMING = "Live telemetry streaming"
STATUS_LOST = "Connection lost"
STATUS_CLOSED = "Live feed closed"
LOAD_ERROR = "Unable to load hive data. Check data source connection."

ChangeListener = Callable[["LiveFeed"], None]


class LiveFeed:
    """
    Owns the live window for one consumer.

    ``start()`` subscribes to inserts and then loads the most recent
    readings. Inserts that arrive while the load is in flight are held back
    and appended after the loaded batch. Once ``close()`` has run the feed
    never touches the window again.

    Usage:
        async with LiveFeed(source) as feed:
            view = feed.view()
    """

    def __init__(self, source: ReadingsSource, window: Optional[LiveWindow] = None):
        self.source = source
        self.window = window if window is not None else LiveWindow()
        self.metrics = MetricsFacade(self.window)
        self.status = STATUS_WARMING
        self.error: Optional[str] = None
        self.connected = False
        self.loaded = False
        self._mounted = False
        self._pending: deque = deque(maxlen=self.window.capacity)
        self._unsubscribe: Optional[Unsubscribe] = None
        self._listeners: list[ChangeListener] = []

    @property
    def mounted(self) -> bool:
        return self._mounted

    async def __aenter__(self) -> "LiveFeed":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb):
        self.close()

    def add_listener(self, listener: ChangeListener):
        self._listeners.append(listener)

    def remove_listener(self, listener: ChangeListener):
        if listener in self._listeners:
            self._listeners.remove(listener)

    async def start(self):
        """Subscribe to inserts, then load the initial window"""
        self._mounted = True
        self.status = STATUS_SYNCING

        unsubscribe = await self.source.subscribe_inserts(self._on_insert, self._on_status)
        if not self._mounted:
            # Torn down while subscribing
            unsubscribe()
            return
        self._unsubscribe = unsubscribe

        try:
            batch = await self.source.fetch_recent(self.window.capacity)
        except DataSourceUnavailable as e:
            if not self._mounted:
                return
            logger.error(f"Initial load failed: {e}")
            self.error = LOAD_ERROR
            self.status = STATUS_LOST
            self._finish_load([])
            return
        except BaseException:
            # Cancelled or failed unexpectedly: nothing else will release it
            self.close()
            raise

        if not self._mounted:
            logger.info("Initial load resolved after teardown, discarding")
            return

        self._finish_load(batch)
        self.status = STATUS_STREAMING
        logger.info(f"Loaded {len(self.window)} readings")

    def close(self):
        """Release the subscription; safe to call more than once"""
        self._mounted = False
        self._pending.clear()
        unsubscribe, self._unsubscribe = self._unsubscribe, None
        if unsubscribe is not None:
            unsubscribe()
            logger.info("Insert subscription released")
        self.connected = False
        self.status = STATUS_CLOSED

    def view(self) -> ViewModel:
        return self.metrics.compute_view()

    def state(self) -> FeedStatus:
        return FeedStatus(
            status=self.status,
            error=self.error,
            connected=self.connected,
            loaded=self.loaded,
            window_size=len(self.window),
        )

    def _finish_load(self, batch: list[Reading]):
        self.window.load_initial(batch)
        pending = list(self._pending)
        self._pending.clear()
        for reading in pending:
            # A row inserted between subscribing and querying shows up twice
            if not self.window.contains_id(reading.id):
                self.window.append(reading)
        self.loaded = True
        self._notify()

    def _on_insert(self, reading: Reading):
        if not self._mounted:
            return
        if not self.loaded:
            self._pending.append(reading)
            return
        self.window.append(reading)
        self._notify()

    def _on_status(self, status: str):
        if not self._mounted:
            return
        if status == SUBSCRIBED:
            self.connected = True
            if self.error is None:
                self.status = STATUS_STREAMING
        elif status == CLOSED:
            self.connected = False
            self.status = STATUS_CLOSED

    def _notify(self):
        for listener in list(self._listeners):
            listener(self)
