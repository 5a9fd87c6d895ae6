"""
WebRTC Signaling Relay - Main Application

This is the entry point for the FastAPI application.
It handles:
- HTTP liveness endpoints
- WebSocket connections carrying signaling events
- Wiring of the room registry into the relay
"""
from contextlib import asynccontextmanager
import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from signaling import __version__
from signaling.api import router as api_router
from signaling.api.websocket import router as ws_router
from signaling.config.settings import Settings, settings as default_settings
from signaling.services.rooms import RoomRegistry
from signaling.services.signaling.relay import SignalingRelay

# Configure logging
logging.basicConfig(
    level=default_settings.LOG_LEVEL.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Room state is volatile: it starts empty and is discarded on shutdown.
    """
    # === STARTUP ===
    logger.info(f"🚀 Starting {app.state.settings.APP_NAME}...")
    logger.info(f"✅ Allowed origins: {app.state.settings.ALLOWED_ORIGINS}")

    yield  # Application runs here

    # === SHUTDOWN ===
    registry = app.state.relay.registry
    logger.info(
        f"🛑 Shutting down with {registry.room_count()} room(s), "
        f"{registry.connection_count()} joined connection(s)"
    )


def create_app(
    settings: Optional[Settings] = None,
    registry: Optional[RoomRegistry] = None
) -> FastAPI:
    """Build the application around an owned RoomRegistry."""
    settings = settings or default_settings

    app = FastAPI(
        title=settings.APP_NAME,
        description="Room-scoped relay for WebRTC offers, answers and ICE candidates",
        version=__version__,
        lifespan=lifespan
    )
    app.state.settings = settings
    app.state.relay = SignalingRelay(registry or RoomRegistry())

    # CORS configuration
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    app.include_router(api_router)
    app.include_router(ws_router)

    @app.get("/")
    async def root():
        """Root endpoint."""
        return {
            "name": settings.APP_NAME,
            "version": __version__,
            "status": "running"
        }

    return app


app = create_app()
