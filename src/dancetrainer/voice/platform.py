"""Platform speech capability.

SpeechChannel talks to the engine only through the SpeechPlatform protocol
so tests can inject a scripted platform. The shipped backend wraps pyttsx3,
which drives the operating system's offline voices (SAPI5, NSSpeech,
eSpeak).

Completion is reported through callbacks, possibly from a worker thread;
the channel is responsible for getting back onto the event loop.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Callable, List, Optional, Protocol, runtime_checkable

import pyttsx3

from ..core.errors import SpeechPlatformUnavailable

logger = logging.getLogger(__name__)

# Error reasons that mean "cancelled on purpose", not a failure
INTERRUPTION_ERRORS = frozenset({"interrupted", "canceled", "cancelled"})


@dataclass(frozen=True)
class PlatformVoice:
    """A voice as reported by the speech engine."""

    id: str
    name: str
    lang: str = ""  # BCP-47-ish tag, e.g. "es-ES"
    gender: Optional[str] = None  # "female"/"male" when the engine reports it


@dataclass(frozen=True)
class Utterance:
    """One request to vocalize a string."""

    text: str
    voice: Optional[PlatformVoice] = None
    lang: str = ""
    rate: float = 1.0  # relative to the engine's normal rate
    pitch: float = 1.0


@runtime_checkable
class SpeechPlatform(Protocol):
    """What the trainer needs from a text-to-speech engine."""

    @property
    def is_speaking(self) -> bool:
        ...

    def get_voices(self) -> List[PlatformVoice]:
        """Available voices. May be empty until the engine finishes loading."""
        ...

    def speak(
        self,
        utterance: Utterance,
        on_end: Callable[[], None],
        on_error: Callable[[str], None],
    ) -> None:
        """Start speaking; exactly one of the callbacks fires, or none at all."""
        ...

    def cancel(self) -> None:
        """Stop the current utterance, if any."""
        ...


def _normalize_language(raw) -> str:
    """Turn an engine language entry into a tag like "es-ES".

    eSpeak reports languages as bytes with a leading priority byte
    (b"\\x05es"), SAPI5 as LCID strings, NSSpeech as "es_ES".
    """
    if isinstance(raw, bytes):
        raw = raw.decode("utf-8", errors="ignore")
    text = "".join(ch for ch in str(raw) if ch.isprintable()).strip()
    return text.replace("_", "-")


class _SpeechJob:
    """One utterance and the worker thread speaking it."""

    def __init__(
        self,
        utterance: Utterance,
        on_end: Callable[[], None],
        on_error: Callable[[str], None],
    ):
        self.utterance = utterance
        self.on_end = on_end
        self.on_error = on_error
        self.cancelled = threading.Event()
        self.thread: Optional[threading.Thread] = None


class Pyttsx3SpeechPlatform:
    """SpeechPlatform backed by pyttsx3.

    Each utterance runs engine.runAndWait() on its own worker thread so the
    event loop never blocks. The engine lock lets only one of them talk at
    a time. Cancel state is kept per utterance: a cancelled thread that is
    slow to return never masks the utterance queued behind it.
    """

    def __init__(self, driver_name: Optional[str] = None):
        try:
            self._engine = pyttsx3.init(driverName=driver_name)
        except (ImportError, RuntimeError, OSError) as e:
            raise SpeechPlatformUnavailable(f"Could not initialize pyttsx3: {e}") from e

        base_rate = self._engine.getProperty("rate")
        self._base_rate = int(base_rate) if isinstance(base_rate, (int, float)) else 200
        self._default_voice = self._engine.getProperty("voice")
        self._engine_lock = threading.Lock()
        self._jobs_lock = threading.Lock()
        self._jobs: List[_SpeechJob] = []  # started and not yet finished

        logger.info(f"pyttsx3 speech engine ready (base rate {self._base_rate} wpm)")

    @property
    def is_speaking(self) -> bool:
        with self._jobs_lock:
            return bool(self._jobs)

    def get_voices(self) -> List[PlatformVoice]:
        voices = []
        for voice in self._engine.getProperty("voices") or []:
            languages = [_normalize_language(lang) for lang in (voice.languages or [])]
            voices.append(
                PlatformVoice(
                    id=voice.id,
                    name=voice.name or voice.id,
                    lang=next((lang for lang in languages if lang), ""),
                    gender=(voice.gender or "").lower() or None,
                )
            )
        return voices

    def speak(
        self,
        utterance: Utterance,
        on_end: Callable[[], None],
        on_error: Callable[[str], None],
    ) -> None:
        job = _SpeechJob(utterance, on_end, on_error)
        job.thread = threading.Thread(target=self._run, args=(job,), daemon=True)
        with self._jobs_lock:
            self._jobs.append(job)
        job.thread.start()

    def cancel(self) -> None:
        """Cancel every unfinished utterance and stop the engine."""
        with self._jobs_lock:
            jobs = list(self._jobs)
        if not jobs:
            return
        for job in jobs:
            job.cancelled.set()
        self._engine.stop()

    def _run(self, job: _SpeechJob) -> None:
        error: Optional[Exception] = None
        try:
            with self._engine_lock:
                # Cancelled while queued behind another utterance
                if not job.cancelled.is_set():
                    utterance = job.utterance
                    voice_id = utterance.voice.id if utterance.voice else self._default_voice
                    self._engine.setProperty("voice", voice_id)
                    self._engine.setProperty("rate", int(self._base_rate * utterance.rate))
                    self._engine.say(utterance.text)
                    self._engine.runAndWait()
        except Exception as e:
            # "run loop already started", driver and COM failures
            logger.debug(f"pyttsx3 failed while speaking: {e}")
            error = e
        finally:
            with self._jobs_lock:
                if job in self._jobs:
                    self._jobs.remove(job)

        if job.cancelled.is_set():
            job.on_error("interrupted")
        elif error is not None:
            job.on_error(str(error) or type(error).__name__)
        else:
            job.on_end()
