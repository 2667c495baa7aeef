"""WebSocket routes"""
import asyncio
import json
from datetime import datetime

from config.logger import logger
from config.settings import HEARTBEAT_INTERVAL_SECONDS
from database.source import DataSourceUnavailable
from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from models.schemas import ReadingIn
from pydantic import ValidationError
from services.websocket_manager import (
    add_connection,
    feed_message,
    get_connection_count,
    remove_connection,
)

router = APIRouter()


async def heartbeat(websocket: WebSocket):
    """Send periodic heartbeat to keep connection alive"""
    try:
        while True:
            await asyncio.sleep(HEARTBEAT_INTERVAL_SECONDS)
            await websocket.send_text(json.dumps({
                "type": "heartbeat",
                "timestamp": datetime.now().isoformat()
            }))
    except (asyncio.CancelledError, WebSocketDisconnect, RuntimeError):
        pass


@router.websocket("/ws")
async def websocket_sensor(websocket: WebSocket):
    """
    WebSocket endpoint for hive sensors.
    Each text frame is one JSON reading; every frame gets an ack.
    """
    client_host = websocket.client.host if websocket.client else "Unknown"
    source = websocket.app.state.source
    await websocket.accept()
    logger.info(f"Sensor CONNECTED from {client_host}")
    await websocket.send_text(json.dumps({"status": "connected", "message": "Welcome!"}))

    heartbeat_task = asyncio.create_task(heartbeat(websocket))
    try:
        while True:
            message = await websocket.receive()

            # Check for disconnect
            if message.get("type") == "websocket.disconnect":
                logger.info(f"Sensor {client_host} disconnected gracefully")
                break

            # Readings are JSON text; binary frames get an error ack
            data = message.get("text")
            if data is None:
                logger.warning(f"Binary frame from {client_host} ignored")
                await websocket.send_text(json.dumps({
                    "status": "error",
                    "message": "Expected a JSON text frame",
                }))
                continue
            logger.debug(f"Received from [{client_host}]: {data[:150]}")

            try:
                payload = ReadingIn.model_validate_json(data)
            except ValidationError as e:
                logger.warning(f"Invalid reading from {client_host}: {data[:100]}")
                await websocket.send_text(json.dumps({
                    "status": "error",
                    "message": f"Invalid reading: {e.error_count()} error(s)",
                }))
                continue

            try:
                stored = await source.insert(payload.to_reading())
            except DataSourceUnavailable as e:
                logger.error(f"Could not store reading from {client_host}: {e}")
                await websocket.send_text(json.dumps({"status": "error", "message": "Storage unavailable"}))
                continue

            await websocket.send_text(json.dumps({"status": "stored", "id": stored.id}))

    except WebSocketDisconnect:
        logger.info(f"Sensor DISCONNECTED from {client_host}")
    finally:
        heartbeat_task.cancel()
        try:
            await heartbeat_task
        except asyncio.CancelledError:
            pass


@router.websocket("/ws-dashboard")
async def websocket_dashboard(websocket: WebSocket):
    """
    WebSocket endpoint for dashboards.
    Sends the current view on connect, then a new view after every change.
    """
    client_host = websocket.client.host if websocket.client else "Unknown"
    feed = websocket.app.state.feed

    await websocket.accept()
    add_connection(websocket)
    logger.info(f"Dashboard CONNECTED from {client_host} (Total: {get_connection_count()})")
    try:
        await websocket.send_text(feed_message(feed, "initial_data"))

        # Dashboards only listen; incoming frames are logged and dropped
        while True:
            data = await websocket.receive_text()
            logger.debug(f"Received from Dashboard [{client_host}]: {data[:100]}")

    except WebSocketDisconnect:
        logger.info(f"Dashboard DISCONNECTED from {client_host}")
    finally:
        remove_connection(websocket)
        logger.info(f"Active dashboards: {get_connection_count()}")
