"""Enumerations for session phases, move levels and speech outcomes."""

from enum import Enum


class SessionPhase(Enum):
    """Macro-state of a training session."""

    IDLE = "idle"
    COUNTDOWN = "countdown"
    ACTIVE = "active"


class MoveLevel(str, Enum):
    """Difficulty level of a dance move."""

    BEGINNER = "Beginner"
    INTERMEDIATE = "Intermediate"
    ADVANCED = "Advanced"


class SpeechOutcomeKind(Enum):
    """How a single utterance settled."""

    COMPLETED = "completed"
    ERRORED = "errored"
    TIMED_OUT = "timed_out"
    INTERRUPTED = "interrupted"  # cancelled by us or reported as interrupted/canceled
    UNAVAILABLE = "unavailable"  # no speech platform present
