"""WebSocket hub pushing session state snapshots to connected clients."""

import asyncio
import logging
from typing import Callable, List, Optional

from fastapi import WebSocket

from ..core.models import SessionState
from ..session.controller import SessionController

logger = logging.getLogger(__name__)


class SessionStateHub:
    """Fans every SessionState change out to all WebSocket clients."""

    def __init__(self, controller: SessionController):
        self.controller = controller
        self.connections: List[WebSocket] = []
        self._unsubscribe: Optional[Callable[[], None]] = controller.subscribe(self._on_state)
        self._pending: set = set()

    async def connect(self, websocket: WebSocket) -> None:
        await websocket.accept()
        self.connections.append(websocket)
        logger.info(f"WebSocket client connected. Total: {len(self.connections)}")
        await websocket.send_json(self._message(self.controller.state))

    def disconnect(self, websocket: WebSocket) -> None:
        if websocket in self.connections:
            self.connections.remove(websocket)
            logger.info(f"WebSocket client disconnected. Total: {len(self.connections)}")

    def close(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    async def broadcast(self, state: SessionState) -> None:
        message = self._message(state)
        disconnected = []
        for ws in self.connections:
            try:
                await ws.send_json(message)
            except Exception:
                disconnected.append(ws)

        for ws in disconnected:
            self.disconnect(ws)

    def _on_state(self, state: SessionState) -> None:
        if not self.connections:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        task = loop.create_task(self.broadcast(state))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    @staticmethod
    def _message(state: SessionState) -> dict:
        return {"type": "state", "data": state.to_dict()}
