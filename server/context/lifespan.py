"""Application lifespan management"""
from contextlib import asynccontextmanager

from config import settings
from config.logger import logger
from database.db import SQLiteReadingsSource
from database.source import DataSourceUnavailable
from services.feed import LiveFeed
from services.websocket_manager import ViewBroadcaster


@asynccontextmanager
async def lifespan(app):
    """
    Manage application lifespan (startup and shutdown).

    Builds the readings source, starts the live feed and the dashboard
    broadcaster, and releases the insert subscription on shutdown.
    """
    logger.info("Starting application...")
    source = app.state.source or SQLiteReadingsSource(settings.DB_PATH)
    if isinstance(source, SQLiteReadingsSource):
        try:
            await source.init_db()
        except DataSourceUnavailable as e:
            logger.error(f"Readings database unavailable: {e}")

    feed = LiveFeed(source)
    broadcaster = ViewBroadcaster(feed)
    app.state.source = source
    app.state.feed = feed

    async with feed:
        broadcaster.start()
        logger.info(f"Application started ({feed.status})")
        try:
            yield
        finally:
            logger.info("Shutting down application...")
            await broadcaster.stop()

    logger.info("Application shut down successfully")
