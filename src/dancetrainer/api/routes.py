"""Session and catalogue endpoints.

- POST /session/start - Start a training session
- POST /session/stop - Stop the current session (always succeeds)
- GET /session/status - Current session state
- WebSocket /session/ws - Live state updates
- GET /styles, GET /tracks - Catalogue listings
"""

import asyncio
import logging
from typing import List, Optional

from fastapi import APIRouter, HTTPException, Request, WebSocket, WebSocketDisconnect
from pydantic import BaseModel, Field

from ..core.enums import MoveLevel
from ..core.errors import SessionAlreadyRunning, StyleNotFound, ValidationError
from ..core.models import SessionConfig

logger = logging.getLogger(__name__)

router = APIRouter()


class StartSessionRequest(BaseModel):
    """Request body for starting a session."""
    style_id: str
    track_id: Optional[str] = None
    interval_seconds: float = Field(10.0, description="Seconds between announcements (5-20)")


class MoveResponse(BaseModel):
    id: str
    name: str
    level: str
    description: Optional[str] = None
    media_ref: Optional[str] = None


class SessionStatusResponse(BaseModel):
    """Response for session status."""
    phase: str
    countdown_value: Optional[int] = None
    current_move: Optional[MoveResponse] = None
    style_id: Optional[str] = None
    style_name: Optional[str] = None
    track_title: Optional[str] = None
    interval_seconds: Optional[float] = None
    announce_count: int = 0


class StyleResponse(BaseModel):
    id: str
    name: str
    description: str = ""
    moves: List[MoveResponse] = []


class TrackResponse(BaseModel):
    id: str
    title: str
    artist: str
    dance_style: str
    level: Optional[str] = None
    duration_seconds: float = 0.0


def _status(request: Request) -> SessionStatusResponse:
    return SessionStatusResponse(**request.app.state.controller.state.to_dict())


@router.post("/session/start", response_model=SessionStatusResponse)
async def start_session(body: StartSessionRequest, request: Request):
    """Start a session. The countdown begins immediately."""
    controller = request.app.state.controller
    try:
        controller.start(
            SessionConfig(
                style_id=body.style_id,
                track_id=body.track_id,
                interval_seconds=body.interval_seconds,
            )
        )
    except StyleNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except SessionAlreadyRunning as e:
        raise HTTPException(status_code=409, detail=str(e))

    return _status(request)


@router.post("/session/stop", response_model=SessionStatusResponse)
async def stop_session(request: Request):
    """Stop the current session. Stopping an idle session is a no-op."""
    request.app.state.controller.stop()
    return _status(request)


@router.get("/session/status", response_model=SessionStatusResponse)
async def get_session_status(request: Request):
    return _status(request)


@router.websocket("/session/ws")
async def session_websocket(websocket: WebSocket):
    """Stream session state.

    Clients receive JSON messages with:
    - type: 'state' | 'heartbeat'
    - data: SessionState payload
    """
    hub = websocket.app.state.hub
    await hub.connect(websocket)

    try:
        while True:
            try:
                data = await asyncio.wait_for(websocket.receive_text(), timeout=30.0)
                if data == "ping":
                    await websocket.send_text("pong")
            except asyncio.TimeoutError:
                await websocket.send_json({"type": "heartbeat"})
    except WebSocketDisconnect:
        pass
    finally:
        hub.disconnect(websocket)


@router.get("/styles", response_model=List[StyleResponse])
async def list_styles(request: Request):
    return [StyleResponse(**s.to_dict()) for s in request.app.state.styles.list_styles()]


@router.get("/tracks", response_model=List[TrackResponse])
async def list_tracks(
    request: Request,
    level: Optional[MoveLevel] = None,
    dance_style: Optional[str] = None,
    sort_by: str = "title",
):
    music = request.app.state.music
    if music is None:
        return []
    try:
        tracks = music.list_tracks(level=level, dance_style=dance_style, sort_by=sort_by)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return [TrackResponse(**t.to_dict()) for t in tracks]
