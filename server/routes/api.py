"""API routes"""
from datetime import datetime

from database.source import DataSourceUnavailable
from fastapi import APIRouter, HTTPException, Query, Request, status
from models.schemas import (
    ApiInfoResponse,
    Band,
    FeedStatus,
    HealthResponse,
    LatestReadingsResponse,
    Reading,
    ReadingIn,
    StatsResponse,
    ViewModel,
)
from services.bands import SOUND_BANDS
from services.feed import LiveFeed
from services.websocket_manager import get_connection_count

router = APIRouter()


def get_feed(request: Request) -> LiveFeed:
    return request.app.state.feed


@router.get("/", response_model=ApiInfoResponse)
async def home():
    """API info endpoint"""
    return {
        "message": "Hive Telemetry Server",
        "websocket": "/ws",
        "dashboard": "/ws-dashboard",
        "status": "running"
    }


@router.get("/health", response_model=HealthResponse)
async def health(request: Request):
    """Health check endpoint"""
    feed = get_feed(request)
    return {
        "status": "ok",
        "timestamp": datetime.now().isoformat(),
        "active_connections": get_connection_count(),
        "window_size": len(feed.window),
        "feed_status": feed.status,
    }


@router.get("/status", response_model=FeedStatus)
async def feed_status(request: Request):
    return get_feed(request).state()


@router.get("/view", response_model=ViewModel)
async def view(request: Request):
    """Current dashboard view model"""
    return get_feed(request).view()


@router.get("/readings/latest", response_model=LatestReadingsResponse)
async def latest_readings(request: Request, count: int = Query(10, ge=1)):
    """Get the latest N readings of the live window, oldest first"""
    data = list(get_feed(request).window.snapshot())[-count:]
    return {
        "count": len(data),
        "data": data
    }


@router.post("/readings", response_model=Reading, status_code=status.HTTP_201_CREATED)
async def ingest_reading(payload: ReadingIn, request: Request):
    """Store a reading; subscribers (the live feed included) see it immediately"""
    try:
        return await request.app.state.source.insert(payload.to_reading())
    except DataSourceUnavailable as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))


@router.get("/bands", response_model=list[Band])
async def bands():
    return list(SOUND_BANDS)


@router.get("/data/stats", response_model=StatsResponse)
async def get_stats(request: Request):
    """Statistics about current data"""
    feed = get_feed(request)
    try:
        total_records = await request.app.state.source.count()
    except DataSourceUnavailable as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))
    return {
        "total_records": total_records,
        "window_size": len(feed.window),
        "window_capacity": feed.window.capacity,
        "active_dashboard_connections": get_connection_count()
    }
