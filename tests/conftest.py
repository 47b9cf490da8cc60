"""Pytest configuration and fixtures."""

import asyncio
import heapq
import itertools
import random

import pytest

from dancetrainer.audio.player import AudioPlayer
from dancetrainer.core.config import TrainerConfig
from dancetrainer.core.enums import MoveLevel
from dancetrainer.core.errors import TrackUnavailable
from dancetrainer.core.models import DanceStyle, Move
from dancetrainer.library.styles import StyleLibrary
from dancetrainer.session.controller import SessionController
from dancetrainer.voice.platform import PlatformVoice
from dancetrainer.voice.speech_channel import SpeechChannel


class VirtualClock:
    """Deterministic clock: time only moves when a test advances it."""

    def __init__(self, start: float = 0.0):
        self._now = start
        self._timers = []
        self._seq = itertools.count()

    def now(self) -> float:
        return self._now

    async def sleep(self, seconds: float) -> None:
        future = asyncio.get_running_loop().create_future()
        heapq.heappush(self._timers, (self._now + max(0.0, seconds), next(self._seq), future))
        await future

    @property
    def pending_timers(self) -> int:
        return sum(1 for _, _, future in self._timers if not future.done())

    async def settle(self, rounds: int = 50) -> None:
        """Let every ready task run until the loop goes quiet."""
        for _ in range(rounds):
            await asyncio.sleep(0)

    async def advance(self, seconds: float) -> None:
        await self.advance_to(self._now + seconds)

    async def advance_to(self, target: float) -> None:
        await self.settle()
        while True:
            while self._timers and self._timers[0][2].done():
                heapq.heappop(self._timers)
            if not self._timers or self._timers[0][0] > target:
                break
            when, _, future = heapq.heappop(self._timers)
            self._now = max(self._now, when)
            future.set_result(None)
            await self.settle()
        self._now = max(self._now, target)
        await self.settle()


class FakeSpeechPlatform:
    """Scripted speech engine.

    duration: seconds until on_end fires (0 = immediately)
    error: reason passed to on_error instead of finishing
    respond: False simulates an engine that never calls back
    honor_cancel: False lets a cancelled utterance still report completion later
    """

    def __init__(self, clock, duration=0.0, voices=None, error=None, respond=True, honor_cancel=True):
        self.clock = clock
        self.duration = duration
        self.voices = list(voices or [])
        self.error = error
        self.respond = respond
        self.honor_cancel = honor_cancel
        self.utterances = []
        self.started_at = []
        self.cancel_calls = 0
        self._callbacks = None
        self._task = None

    @property
    def is_speaking(self) -> bool:
        return self._callbacks is not None

    def get_voices(self):
        return list(self.voices)

    def speak(self, utterance, on_end, on_error):
        self.utterances.append(utterance)
        self.started_at.append(self.clock.now())
        if not self.respond:
            self._callbacks = (on_end, on_error)
            return
        if self.error:
            on_error(self.error)
            return
        if self.duration <= 0:
            on_end()
            return
        self._callbacks = (on_end, on_error)
        self._task = asyncio.ensure_future(self._finish(on_end))

    async def _finish(self, on_end):
        await self.clock.sleep(self.duration)
        self._callbacks = None
        self._task = None
        on_end()

    def cancel(self):
        self.cancel_calls += 1
        if not self.honor_cancel:
            return
        if self._task is not None:
            self._task.cancel()
            self._task = None
        if self._callbacks is not None:
            _, on_error = self._callbacks
            self._callbacks = None
            on_error("interrupted")


class FakeAudioBackend:
    """Records calls instead of producing sound."""

    def __init__(self, fail_load: bool = False):
        self.fail_load = fail_load
        self.calls = []
        self.loaded = None

    def load(self, source):
        self.calls.append(("load", source))
        if self.fail_load:
            raise TrackUnavailable(source, "cannot decode")
        self.loaded = source

    def play(self, loop=True):
        self.calls.append(("play", loop))

    def pause(self):
        self.calls.append(("pause",))

    def release(self):
        self.calls.append(("release",))
        self.loaded = None


class ScriptedRandom(random.Random):
    """Random source that returns a fixed sequence of indices."""

    def __init__(self, indices):
        super().__init__(0)
        self._indices = list(indices)

    def randrange(self, *args, **kwargs):
        return self._indices.pop(0)


@pytest.fixture
def clock():
    return VirtualClock()


@pytest.fixture
def trainer_config():
    return TrainerConfig()


@pytest.fixture
def moves():
    return (
        Move("a", "A", MoveLevel.BEGINNER),
        Move("b", "B", MoveLevel.INTERMEDIATE),
        Move("c", "C", MoveLevel.ADVANCED),
    )


@pytest.fixture
def style_library(moves):
    """In-memory library with one usable and one empty style."""
    return StyleLibrary(
        path=None,
        seed=[
            DanceStyle(id="abc", name="ABC", moves=moves),
            DanceStyle(id="empty", name="Empty"),
        ],
    )


@pytest.fixture
def voices():
    return [
        PlatformVoice(id="es-f", name="Mónica", lang="es-ES", gender="female"),
        PlatformVoice(id="es-m", name="Jorge", lang="es-ES", gender="male"),
        PlatformVoice(id="ru-f", name="Milena", lang="ru-RU", gender="female"),
        PlatformVoice(id="ru-m", name="Yuri", lang="ru-RU", gender="male"),
    ]


@pytest.fixture
def speech_platform(clock):
    return FakeSpeechPlatform(clock)


@pytest.fixture
def audio_backend():
    return FakeAudioBackend()


@pytest.fixture
def make_controller(clock, trainer_config, style_library, audio_backend):
    """Factory building a controller on the virtual clock."""

    def build(platform=None, rng=None, tracks=None):
        speech = SpeechChannel.from_config(platform, trainer_config, clock=clock)
        return SessionController(
            style_library,
            tracks=tracks,
            speech=speech,
            audio=AudioPlayer(audio_backend),
            config=trainer_config,
            clock=clock,
            rng=rng,
        )

    return build
