"""HTTP/WebSocket surface for the session controller."""

from .app import create_app

__all__ = ["create_app"]
