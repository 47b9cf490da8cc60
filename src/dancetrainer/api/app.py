"""DanceTrainer API - FastAPI application.

Exposes the session controller to a browser or other UI: start/stop,
status polling and a WebSocket feed of state changes.
"""

import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ..library.music import MusicLibrary
from ..library.styles import StyleLibrary
from ..session.controller import SessionController
from .hub import SessionStateHub
from .routes import router

logger = logging.getLogger(__name__)


def create_app(
    controller: SessionController,
    styles: StyleLibrary,
    music: Optional[MusicLibrary] = None,
) -> FastAPI:
    """Build the API around an existing controller and libraries."""
    app = FastAPI(
        title="DanceTrainer API",
        description="Start and watch dance practice sessions",
        version="0.1.0",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:5173", "http://localhost:3000"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.controller = controller
    app.state.styles = styles
    app.state.music = music
    app.state.hub = SessionStateHub(controller)

    app.include_router(router, prefix="/api", tags=["session"])

    @app.on_event("shutdown")
    async def shutdown():
        """Stop any running session on shutdown."""
        logger.info("Shutting down DanceTrainer API...")
        controller.stop()
        app.state.hub.close()

    return app
