"""Training session orchestration: countdown, announce cycle, teardown."""

from .scheduler import MoveScheduler
from .controller import SessionController, StyleSource, TrackSource

__all__ = ["MoveScheduler", "SessionController", "StyleSource", "TrackSource"]
