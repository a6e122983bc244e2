"""Main FastAPI application for the ranked clicker service."""

from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, WebSocket
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

# Load environment variables
try:
    from dotenv import load_dotenv
    load_dotenv()
except ImportError:
    pass

from clicker.config import APP_VERSION

from .api.rest.routes import get_release_feed, get_rng, get_store
from .api.rest.routes import router as game_router
from .api.websocket.handlers import handle_match_websocket
from .application.use_cases.check_updates import CheckUpdatesUseCase

logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO"))
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup: one version check, failures are non-fatal
    if os.environ.get("CLICKER_CHECK_UPDATES", "1") != "0":
        result = await CheckUpdatesUseCase(get_store(), get_release_feed()).execute()
        if result.has_update:
            logger.info(f"New version available: {result.latest_version}")
    yield
    # Shutdown


app = FastAPI(
    title="Ranked Clicker API",
    description="Competitive clicking game: ranked matches, tournaments and the RCCS championship",
    version=APP_VERSION,
    lifespan=lifespan,
)

# CORS configuration for frontend integration
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:5173",  # Vite dev server
        "http://localhost:3000",  # Alternative dev port
        "*",  # Allow all for development
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    version: str
    data_dir: str


@app.get("/", tags=["meta"])
async def root():
    """API root with information and available endpoints."""
    return {
        "name": "Ranked Clicker API",
        "version": APP_VERSION,
        "docs": "/docs",
        "endpoints": {
            "health": "GET /health",
            "player": "GET /api/player",
            "prepare": "POST /api/matches/prepare",
            "complete": "POST /api/matches/complete",
            "tournaments": "GET /api/tournaments",
            "rccs": "GET /api/rccs",
            "leaderboard": "GET /api/leaderboard/{mode}",
            "news": "GET /api/news",
            "websocket": "WS /ws/match",
        },
    }


@app.get("/health", response_model=HealthResponse, tags=["meta"])
async def health_check():
    """Check API health and where state is stored."""
    return HealthResponse(
        status="healthy",
        version=APP_VERSION,
        data_dir=os.environ.get("CLICKER_DATA_DIR", ".cache/clicker"),
    )


# Include REST routes
app.include_router(game_router)


@app.websocket("/ws/match")
async def websocket_match(websocket: WebSocket, store=Depends(get_store), rng=Depends(get_rng)):
    """WebSocket endpoint for a live match.

    Connect and send {"action": "start", "mode": "1v1"}, then
    {"action": "click"} for every click. Snapshots arrive once per
    second of play and a final "completed" message carries the MMR change.
    """
    await handle_match_websocket(websocket, store, rng)
