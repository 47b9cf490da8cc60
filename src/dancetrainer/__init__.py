"""DanceTrainer - practice sessions that call out random dance moves.

A session counts down 3-2-1, then keeps announcing a randomly chosen move
from a dance style at a steady interval while optional background music
loops underneath.

Usage:
    from dancetrainer import SessionController, SessionConfig

    controller = SessionController(style_library, music_library)
    controller.start(SessionConfig(style_id="salsa-1", interval_seconds=10))
    ...
    controller.stop()
"""

from .core.config import TrainerConfig
from .core.enums import MoveLevel, SessionPhase
from .core.errors import (
    TrainerError,
    ValidationError,
    EmptyStyle,
    StyleNotFound,
    InvalidInterval,
    SessionAlreadyRunning,
    TrackUnavailable,
    SpeechPlatformUnavailable,
)
from .core.models import Move, DanceStyle, Track, SessionConfig, SessionState
from .session.controller import SessionController
from .session.scheduler import MoveScheduler
from .voice.speech_channel import SpeechChannel
from .audio.player import AudioPlayer

__version__ = "0.1.0"

__all__ = [
    "TrainerConfig",
    "MoveLevel",
    "SessionPhase",
    "TrainerError",
    "ValidationError",
    "EmptyStyle",
    "StyleNotFound",
    "InvalidInterval",
    "SessionAlreadyRunning",
    "TrackUnavailable",
    "SpeechPlatformUnavailable",
    "Move",
    "DanceStyle",
    "Track",
    "SessionConfig",
    "SessionState",
    "SessionController",
    "MoveScheduler",
    "SpeechChannel",
    "AudioPlayer",
]
