"""
FastAPI Application Entry Point for pokersim.

This module creates and configures the FastAPI application with:
- HTTP routes for the single-table game
- WebSocket endpoint for real-time play with server-side pacing
- Static file serving for a frontend, when one is present
- CORS middleware for development
"""

from contextlib import asynccontextmanager
import os
import logging

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from fastapi.middleware.cors import CORSMiddleware

from pokersim import __version__
from pokersim.server.routes import router
from pokersim.server.websocket import websocket_endpoint, game_manager

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

STATIC_DIR = os.environ.get(
    "POKERSIM_STATIC_DIR",
    os.path.join(os.path.dirname(__file__), "..", "..", "client", "static"),
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("pokersim server starting up...")
    yield
    for room in game_manager.rooms.values():
        room.stop()
    logger.info("pokersim server shutting down...")


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance
    """
    app = FastAPI(
        title="pokersim",
        description="Texas Hold'em against scripted bots, with HTTP and WebSocket APIs",
        version=__version__,
        lifespan=lifespan,
    )

    # CORS middleware for development
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure appropriately for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include HTTP routes
    app.include_router(router)

    # WebSocket endpoint
    app.websocket("/ws")(websocket_endpoint)

    # Mount static files
    if os.path.exists(STATIC_DIR):
        app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")
        logger.info(f"Mounted static files from {STATIC_DIR}")
    else:
        logger.debug(f"Static directory not found: {STATIC_DIR}")

    return app


# Create the application instance
app = create_app()
