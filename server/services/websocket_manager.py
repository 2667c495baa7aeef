"""WebSocket connection manager for dashboards"""
import asyncio
import json
from typing import Set

from config.logger import get_logger
from fastapi import WebSocket, WebSocketDisconnect
from services.feed import LiveFeed

logger = get_logger("ws")

# Set of active WebSocket connections (dashboards)
active_connections: Set[WebSocket] = set()


def add_connection(websocket: WebSocket):
    """Add a WebSocket connection (dashboard)"""
    active_connections.add(websocket)


def remove_connection(websocket: WebSocket):
    """Remove a WebSocket connection (dashboard)"""
    active_connections.discard(websocket)


def get_connection_count() -> int:
    """Get number of active connections"""
    return len(active_connections)


def feed_message(feed: LiveFeed, message_type: str) -> str:
    """Serialize feed status and current view for dashboards"""
    return json.dumps({
        "type": message_type,
        "status": feed.state().model_dump(mode="json"),
        "view": feed.view().model_dump(mode="json"),
    })


async def broadcast_to_dashboards(message: str):
    """Broadcast message to all connected dashboards"""
    disconnected = set()
    for connection in list(active_connections):
        try:
            await connection.send_text(message)
        except (WebSocketDisconnect, RuntimeError, OSError) as e:
            logger.debug(f"Dropping dashboard after send failure: {e}")
            disconnected.add(connection)

    # Remove disconnected connections
    active_connections.difference_update(disconnected)


class ViewBroadcaster:
    """
    Pushes the current view to every dashboard after the window changes.

    Changes arriving faster than a broadcast completes are coalesced into
    one push of the latest view.
    """

    def __init__(self, feed: LiveFeed):
        self.feed = feed
        self._changed = asyncio.Event()
        self._task = None

    def _on_change(self, feed: LiveFeed):
        self._changed.set()

    def start(self):
        self.feed.add_listener(self._on_change)
        self._task = asyncio.create_task(self._run())

    async def stop(self):
        self.feed.remove_listener(self._on_change)
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None

    async def _run(self):
        while True:
            await self._changed.wait()
            self._changed.clear()
            if active_connections:
                await broadcast_to_dashboards(feed_message(self.feed, "view"))
