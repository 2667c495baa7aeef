"""Main FastAPI application"""
from typing import Optional

from context.lifespan import lifespan
from database.source import ReadingsSource
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from middleware.logging import log_requests
from routes import api_router, websocket_router


def create_app(source: Optional[ReadingsSource] = None) -> FastAPI:
    """Build the app; without a source the lifespan opens the SQLite backend"""
    app = FastAPI(
        title="Hive Telemetry Server",
        version="1.0.0",
        lifespan=lifespan
    )
    app.state.source = source

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Request logging middleware
    app.middleware("http")(log_requests)

    # Include routers
    app.include_router(api_router)
    app.include_router(websocket_router)
    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
