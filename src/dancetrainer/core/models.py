"""Data models for dance styles, tracks and training sessions.

Catalogue entities (Move, DanceStyle, Track) are frozen: a session works on
the snapshot it fetched at start() and never sees later library edits.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from .enums import MoveLevel, SessionPhase


@dataclass(frozen=True)
class Move:
    """A single named figure within a dance style."""

    id: str
    name: str
    level: MoveLevel = MoveLevel.BEGINNER
    description: Optional[str] = None
    media_ref: Optional[str] = None  # image/video URL or local path

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "level": self.level.value,
            "description": self.description,
            "media_ref": self.media_ref,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Move":
        return cls(
            id=data["id"],
            name=data["name"],
            level=MoveLevel(data.get("level", MoveLevel.BEGINNER.value)),
            description=data.get("description"),
            media_ref=data.get("media_ref"),
        )


@dataclass(frozen=True)
class DanceStyle:
    """A dance style and its ordered move list.

    A style with no moves is a valid catalogue entry but cannot be used to
    start a session.
    """

    id: str
    name: str
    description: str = ""
    moves: Tuple[Move, ...] = ()

    @property
    def has_moves(self) -> bool:
        return len(self.moves) > 0

    def find_move(self, move_id: str) -> Optional[Move]:
        for move in self.moves:
            if move.id == move_id:
                return move
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "moves": [m.to_dict() for m in self.moves],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DanceStyle":
        return cls(
            id=data["id"],
            name=data["name"],
            description=data.get("description", ""),
            moves=tuple(Move.from_dict(m) for m in data.get("moves", [])),
        )


@dataclass(frozen=True)
class Track:
    """A locally stored music track usable as session background audio."""

    id: str
    title: str
    audio_source: str  # path to the audio file
    artist: str = "Unknown"
    dance_style: str = "General"
    level: Optional[MoveLevel] = None
    duration_seconds: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "audio_source": self.audio_source,
            "artist": self.artist,
            "dance_style": self.dance_style,
            "level": self.level.value if self.level else None,
            "duration_seconds": self.duration_seconds,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Track":
        level = data.get("level")
        return cls(
            id=data["id"],
            title=data["title"],
            audio_source=data["audio_source"],
            artist=data.get("artist", "Unknown"),
            dance_style=data.get("dance_style", "General"),
            level=MoveLevel(level) if level else None,
            duration_seconds=float(data.get("duration_seconds", 0.0)),
        )


@dataclass(frozen=True)
class SessionConfig:
    """Parameters supplied to start(); fixed for the lifetime of a session."""

    style_id: str
    track_id: Optional[str] = None
    interval_seconds: float = 10.0


@dataclass(frozen=True)
class SessionState:
    """Snapshot of what the UI should show.

    Invariant: current_move is only set while phase is ACTIVE, and
    countdown_value only while phase is COUNTDOWN.
    """

    phase: SessionPhase = SessionPhase.IDLE
    countdown_value: Optional[int] = None
    current_move: Optional[Move] = None
    style_id: Optional[str] = None
    style_name: Optional[str] = None
    track_title: Optional[str] = None
    interval_seconds: Optional[float] = None
    announce_count: int = 0

    @property
    def is_idle(self) -> bool:
        return self.phase is SessionPhase.IDLE

    def to_dict(self) -> Dict[str, Any]:
        return {
            "phase": self.phase.value,
            "countdown_value": self.countdown_value,
            "current_move": self.current_move.to_dict() if self.current_move else None,
            "style_id": self.style_id,
            "style_name": self.style_name,
            "track_title": self.track_title,
            "interval_seconds": self.interval_seconds,
            "announce_count": self.announce_count,
        }


IDLE_STATE = SessionState()
