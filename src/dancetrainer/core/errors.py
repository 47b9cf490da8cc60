"""Exception hierarchy for DanceTrainer.

Only validation failures and SessionAlreadyRunning ever reach the caller of
SessionController.start(). Speech and audio errors are absorbed where they
happen so the announce cycle keeps running.
"""

from typing import Optional


class TrainerError(Exception):
    """Base class for all DanceTrainer errors."""


class ValidationError(TrainerError):
    """A session or catalogue request was rejected before anything changed."""


class EmptyStyle(ValidationError):
    """The requested style has no moves to announce."""

    def __init__(self, style_id: str, style_name: Optional[str] = None):
        self.style_id = style_id
        self.style_name = style_name
        label = style_name or style_id
        super().__init__(f"Style '{label}' has no moves; add at least one move first")


class StyleNotFound(ValidationError):
    """No style with the given id exists in the library."""

    def __init__(self, style_id: str):
        self.style_id = style_id
        super().__init__(f"Unknown dance style: {style_id}")


class InvalidInterval(ValidationError):
    """The announce interval is outside the allowed range."""

    def __init__(self, interval_seconds: float, minimum: float, maximum: float):
        self.interval_seconds = interval_seconds
        super().__init__(
            f"Interval must be between {minimum:g} and {maximum:g} seconds, "
            f"got {interval_seconds:g}"
        )


class SessionAlreadyRunning(TrainerError):
    """start() was called while a session is counting down or active."""


class TrackUnavailable(TrainerError):
    """A background track could not be found or loaded."""

    def __init__(self, track_id: str, reason: str = ""):
        self.track_id = track_id
        self.reason = reason
        message = f"Track unavailable: {track_id}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)


class SpeechPlatformUnavailable(TrainerError):
    """No text-to-speech engine could be initialized."""
