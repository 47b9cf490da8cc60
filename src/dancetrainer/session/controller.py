"""Session controller: the single entry point for training sessions.

State machine:
    IDLE --start()--> COUNTDOWN --3 ticks--> ACTIVE --stop()--> IDLE
    COUNTDOWN --stop()--> IDLE

Every start() mints a new session token and every stop() retires it.
Timers and speech callbacks capture the token when they are armed and do
nothing once it is no longer current, so a late result from an old
session can never touch the state of a new one.
"""

import asyncio
import logging
import random
from dataclasses import replace
from typing import Callable, List, Optional, Protocol

from ..audio.player import AudioPlayer
from ..core.clock import Clock, LoopClock
from ..core.config import TrainerConfig
from ..core.enums import SessionPhase
from ..core.errors import EmptyStyle, SessionAlreadyRunning, TrackUnavailable
from ..core.models import IDLE_STATE, DanceStyle, Move, SessionConfig, SessionState, Track
from ..voice.speech_channel import SpeechChannel
from .scheduler import MoveScheduler

logger = logging.getLogger(__name__)

StateListener = Callable[[SessionState], None]


class StyleSource(Protocol):
    """Read access to the dance style catalogue."""

    def get_style(self, style_id: str) -> DanceStyle:
        ...


class TrackSource(Protocol):
    """Read access to the music collection."""

    def get_track(self, track_id: str) -> Track:
        ...

    def get_track_audio_source(self, track_id: str) -> str:
        ...


class SessionController:
    """Owns one speech channel, one audio player and one move scheduler."""

    def __init__(
        self,
        styles: StyleSource,
        tracks: Optional[TrackSource] = None,
        speech: Optional[SpeechChannel] = None,
        audio: Optional[AudioPlayer] = None,
        config: Optional[TrainerConfig] = None,
        clock: Optional[Clock] = None,
        rng: Optional[random.Random] = None,
    ):
        """Initialize the controller.

        Args:
            styles: Style catalogue (get_style)
            tracks: Music collection; None disables background music
            speech: Speech channel shared by all sessions of this controller
            audio: Background audio player
            config: Trainer configuration (defaults if None)
            clock: Time source for countdown and cycle timers
            rng: Random source for move selection
        """
        self.config = config or TrainerConfig()
        self.clock = clock or LoopClock()
        self.styles = styles
        self.tracks = tracks
        self.speech = speech or SpeechChannel.from_config(None, self.config, clock=self.clock)
        self.audio = audio or AudioPlayer()
        self.scheduler = MoveScheduler(
            self.speech,
            current_token=lambda: self._token,
            on_move=self._on_move,
            clock=self.clock,
            rng=rng,
        )

        self._token = 0
        self._state: SessionState = IDLE_STATE
        self._session: Optional[SessionConfig] = None
        self._countdown_task: Optional[asyncio.Task] = None
        self._listeners: List[StateListener] = []
        self._idle = asyncio.Event()
        self._idle.set()

    # ------------------------------------------------------------------
    # Observation
    # ------------------------------------------------------------------

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def token(self) -> int:
        return self._token

    @property
    def session_config(self) -> Optional[SessionConfig]:
        return self._session

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Call `listener` with every new state. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def wait_until_idle(self) -> None:
        await self._idle.wait()

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def start(self, session: SessionConfig) -> int:
        """Start a session: countdown, then the announce cycle.

        Must be called from a running event loop. Nothing changes if
        validation fails.

        Returns:
            The new session token

        Raises:
            SessionAlreadyRunning: If a session is counting down or active
            InvalidInterval: If the interval is out of range
            StyleNotFound: If the style does not exist
            EmptyStyle: If the style has no moves
        """
        if not self._state.is_idle:
            raise SessionAlreadyRunning(
                f"A session is already {self._state.phase.value}; stop it first"
            )

        interval = self.config.validate_interval(session.interval_seconds)
        style = self.styles.get_style(session.style_id)
        if not style.has_moves:
            raise EmptyStyle(style.id, style.name)

        track, source = self._resolve_track(session.track_id)
        # Engines may finish loading voices after the first session
        self.speech.refresh_voices()

        self._token += 1
        token = self._token
        self._session = session
        self._idle.clear()

        self._set_state(
            SessionState(
                phase=SessionPhase.COUNTDOWN,
                countdown_value=self.config.countdown_from,
                style_id=style.id,
                style_name=style.name,
                track_title=track.title if track else None,
                interval_seconds=interval,
            )
        )
        logger.info(
            f"Session {token} starting: {style.name} ({len(style.moves)} moves), "
            f"every {interval:g}s" + (f", music: {track.title}" if track else "")
        )

        if source is not None:
            self.audio.start(source)

        self._countdown_task = asyncio.get_running_loop().create_task(
            self._run_countdown(token, style, interval)
        )
        return token

    def stop(self) -> None:
        """Tear the session down from any phase. No-op when already idle."""
        if self._state.is_idle and self._countdown_task is None and not self.scheduler.is_running:
            return

        stopped = self._token
        self._token += 1

        if self._countdown_task is not None and not self._countdown_task.done():
            self._countdown_task.cancel()
        self._countdown_task = None

        self.scheduler.stop()
        self.speech.stop()
        self.audio.stop()

        self._session = None
        self._set_state(IDLE_STATE)
        self._idle.set()
        logger.info(f"Session {stopped} stopped")

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _resolve_track(self, track_id: Optional[str]):
        if not track_id:
            return None, None
        if self.tracks is None:
            logger.warning(f"No music library configured; ignoring track {track_id}")
            return None, None
        try:
            track = self.tracks.get_track(track_id)
            source = self.tracks.get_track_audio_source(track_id)
        except TrackUnavailable as e:
            logger.warning(f"{e}; continuing without music")
            return None, None
        return track, source

    async def _run_countdown(self, token: int, style: DanceStyle, interval: float) -> None:
        for value in range(self.config.countdown_from, 0, -1):
            if token != self._token:
                return
            if self._state.countdown_value != value:
                self._set_state(replace(self._state, countdown_value=value))
            await self.clock.sleep(self.config.countdown_step_seconds)

        if token != self._token:
            return

        self._countdown_task = None
        self._set_state(replace(self._state, phase=SessionPhase.ACTIVE, countdown_value=None))
        if token != self._token:
            return  # a listener stopped the session
        logger.info(f"Session {token} active")
        self.scheduler.start(token, style.moves, interval)

    def _on_move(self, token: int, move: Move) -> None:
        if token != self._token or self._state.phase is not SessionPhase.ACTIVE:
            return
        self._set_state(
            replace(self._state, current_move=move, announce_count=self._state.announce_count + 1)
        )
        logger.info(f"Move: {move.name} ({move.level.value})")

    def _set_state(self, state: SessionState) -> None:
        self._state = state
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                logger.exception("Session state listener failed")
