"""Cancellable speech channel for move announcements.

SpeechChannel owns at most one outstanding utterance. speak() never raises
for platform problems: it always settles with a SpeechOutcome, either when
the engine reports completion or an error, or when the safety timeout
fires. Engines are unreliable about completion callbacks, and a speak()
that never returned would stall the announce cycle forever.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import List, Optional

from ..core.config import TrainerConfig
from ..core.enums import SpeechOutcomeKind
from ..core.clock import Clock, LoopClock
from .platform import INTERRUPTION_ERRORS, PlatformVoice, SpeechPlatform, Utterance
from .voice_library import (
    DEFAULT_FALLBACK_LANGUAGE,
    DEFAULT_VOICE_PROFILE,
    parse_voice_profile,
    select_voice,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SpeechOutcome:
    """How one speak() call settled."""

    kind: SpeechOutcomeKind
    reason: str = ""
    voice_id: Optional[str] = None

    @property
    def completed(self) -> bool:
        return self.kind is SpeechOutcomeKind.COMPLETED


class SpeechChannel:
    """Speaks short phrases through a SpeechPlatform with safe cancellation."""

    def __init__(
        self,
        platform: Optional[SpeechPlatform],
        clock: Optional[Clock] = None,
        voice_profile: str = DEFAULT_VOICE_PROFILE,
        fallback_language: str = DEFAULT_FALLBACK_LANGUAGE,
        rate: float = 0.9,
        pitch: float = 1.0,
        timeout_seconds: float = 10.0,
        cancel_settle_seconds: float = 0.05,
    ):
        """Initialize the channel.

        Args:
            platform: Speech engine, or None when no engine is available
            clock: Time source for the safety timeout (defaults to the loop clock)
            voice_profile: Default "<language>-<gender>" profile
            fallback_language: Language code tried when the profile's language is missing
            rate: Speech rate relative to normal
            pitch: Speech pitch relative to normal
            timeout_seconds: Settle speak() after this long even without a callback
            cancel_settle_seconds: Pause after cancelling before the next utterance
        """
        self.platform = platform
        self.clock = clock or LoopClock()
        self.voice_profile = voice_profile
        self.fallback_language = fallback_language
        self.rate = rate
        self.pitch = pitch
        self.timeout_seconds = timeout_seconds
        self.cancel_settle_seconds = cancel_settle_seconds

        self._voices: List[PlatformVoice] = []
        self._pending: Optional[asyncio.Future] = None

        if platform is None:
            logger.warning("No speech platform available; announcements will be silent")

    @classmethod
    def from_config(
        cls,
        platform: Optional[SpeechPlatform],
        config: TrainerConfig,
        clock: Optional[Clock] = None,
    ) -> "SpeechChannel":
        return cls(
            platform,
            clock=clock,
            voice_profile=config.voice_profile,
            fallback_language=config.fallback_language,
            rate=config.speech_rate,
            pitch=config.speech_pitch,
            timeout_seconds=config.speech_timeout_seconds,
            cancel_settle_seconds=config.cancel_settle_seconds,
        )

    @property
    def is_speaking(self) -> bool:
        return self._pending is not None and not self._pending.done()

    def refresh_voices(self) -> List[PlatformVoice]:
        """Re-read the engine's voice list; keeps the old list if it comes back empty."""
        if self.platform is None:
            return []
        try:
            voices = list(self.platform.get_voices())
        except Exception as e:
            logger.warning(f"Could not list speech voices: {e}")
            voices = []
        if voices:
            self._voices = voices
        return self._voices

    def resolve_voice(self, voice_profile: Optional[str] = None):
        """Return (voice, language tag) for a profile using the fallback chain."""
        profile = parse_voice_profile(voice_profile or self.voice_profile, self.fallback_language)
        # Voice lists may load asynchronously; retry until we have one
        voices = self._voices or self.refresh_voices()
        voice = select_voice(voices, profile, self.fallback_language)
        if voice is not None:
            return voice, voice.lang
        return None, profile.language_tag

    async def speak(self, text: str, voice_profile: Optional[str] = None) -> SpeechOutcome:
        """Speak `text`, cancelling anything still outstanding first.

        Always returns a SpeechOutcome; platform failures are logged, not raised.
        """
        if self.platform is None:
            outcome = SpeechOutcome(SpeechOutcomeKind.UNAVAILABLE, "no speech platform")
            self._log_outcome(text, outcome)
            return outcome

        if self._cancel_current() and self.cancel_settle_seconds > 0:
            await self.clock.sleep(self.cancel_settle_seconds)

        voice, lang = self.resolve_voice(voice_profile)
        utterance = Utterance(text=text, voice=voice, lang=lang, rate=self.rate, pitch=self.pitch)
        voice_id = voice.id if voice else None

        loop = asyncio.get_running_loop()
        future = loop.create_future()
        self._pending = future

        def settle(outcome: SpeechOutcome) -> None:
            if not future.done():
                future.set_result(outcome)

        def post(outcome: SpeechOutcome) -> None:
            # Engine callbacks may arrive on a worker thread
            try:
                loop.call_soon_threadsafe(settle, outcome)
            except RuntimeError:
                pass  # loop already closed

        def on_end() -> None:
            post(SpeechOutcome(SpeechOutcomeKind.COMPLETED, voice_id=voice_id))

        def on_error(reason: str) -> None:
            if str(reason).lower() in INTERRUPTION_ERRORS:
                post(SpeechOutcome(SpeechOutcomeKind.INTERRUPTED, str(reason), voice_id))
            else:
                post(SpeechOutcome(SpeechOutcomeKind.ERRORED, str(reason), voice_id))

        try:
            self.platform.speak(utterance, on_end, on_error)
        except Exception as e:
            settle(SpeechOutcome(SpeechOutcomeKind.ERRORED, str(e), voice_id))

        timer = asyncio.ensure_future(self.clock.sleep(self.timeout_seconds))
        try:
            await asyncio.wait({future, timer}, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            # Caller abandoned us; don't leave the engine talking
            if self._pending is future:
                self._cancel_current()
            raise
        finally:
            timer.cancel()

        if future.done():
            outcome = future.result()
        else:
            outcome = SpeechOutcome(
                SpeechOutcomeKind.TIMED_OUT,
                f"no completion after {self.timeout_seconds:g}s",
                voice_id,
            )
            settle(outcome)

        if self._pending is future:
            self._pending = None

        self._log_outcome(text, outcome)
        return outcome

    def stop(self) -> None:
        """Cancel the current utterance immediately. Safe to call when silent."""
        if self._cancel_current():
            logger.debug("Speech cancelled")

    def _cancel_current(self) -> bool:
        """Cancel the outstanding utterance; True if something was cancelled."""
        pending = self._pending
        outstanding = pending is not None and not pending.done()
        if not outstanding and not self._platform_speaking():
            return False

        self._pending = None
        try:
            self.platform.cancel()
        except Exception as e:
            logger.warning(f"Speech cancel failed: {e}")

        if outstanding:
            pending.set_result(SpeechOutcome(SpeechOutcomeKind.INTERRUPTED, "cancelled"))
        return True

    def _platform_speaking(self) -> bool:
        if self.platform is None:
            return False
        try:
            return bool(self.platform.is_speaking)
        except Exception:
            return False

    def _log_outcome(self, text: str, outcome: SpeechOutcome) -> None:
        if outcome.kind is SpeechOutcomeKind.ERRORED:
            logger.error(f"Speech error while saying '{text}': {outcome.reason}")
        elif outcome.kind is SpeechOutcomeKind.TIMED_OUT:
            logger.warning(f"Speech safety timeout fired for '{text}'")
        elif outcome.kind is SpeechOutcomeKind.UNAVAILABLE:
            logger.warning(f"Speech unavailable, skipped '{text}'")
        else:
            logger.debug(f"Speech {outcome.kind.value}: '{text}'")
