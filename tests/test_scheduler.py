"""Tests for MoveScheduler: drift compensation, randomness, stale tokens."""

import random
from collections import Counter

import pytest

from dancetrainer.session.scheduler import MoveScheduler
from dancetrainer.voice.speech_channel import SpeechChannel

from conftest import FakeSpeechPlatform, ScriptedRandom


class Harness:
    """Scheduler wired to a mutable token and an announce log."""

    def __init__(self, clock, platform, rng=None):
        self.clock = clock
        self.token = 1
        self.announced = []  # (time, token, move name)
        self.speech = SpeechChannel(platform, clock=clock)
        self.scheduler = MoveScheduler(
            self.speech,
            current_token=lambda: self.token,
            on_move=self._on_move,
            clock=clock,
            rng=rng or random.Random(7),
        )

    def _on_move(self, token, move):
        self.announced.append((self.clock.now(), token, move.name))

    @property
    def times(self):
        return [t for t, _, _ in self.announced]


@pytest.mark.asyncio
async def test_zero_latency_speech_announces_on_the_interval(clock, moves):
    """Moves [A,B,C], interval 10, instant speech, run to t=35."""
    harness = Harness(clock, FakeSpeechPlatform(clock))

    harness.scheduler.start(1, moves, 10)
    await clock.advance_to(35)

    assert harness.times == [0, 10, 20, 30]


@pytest.mark.asyncio
@pytest.mark.parametrize("interval", [5, 7.5, 12, 20])
async def test_cycle_n_starts_at_n_times_interval(clock, moves, interval):
    harness = Harness(clock, FakeSpeechPlatform(clock))

    harness.scheduler.start(1, moves, interval)
    await clock.advance_to(interval * 5 + 0.5)

    assert harness.times == pytest.approx([n * interval for n in range(6)])


@pytest.mark.asyncio
async def test_speech_duration_does_not_add_to_spacing(clock, moves):
    harness = Harness(clock, FakeSpeechPlatform(clock, duration=4.0))

    harness.scheduler.start(1, moves, 10)
    await clock.advance_to(41)

    assert harness.times == pytest.approx([0, 10, 20, 30, 40])


@pytest.mark.asyncio
async def test_long_speech_starts_next_cycle_immediately(clock, moves):
    harness = Harness(clock, FakeSpeechPlatform(clock, duration=7.0))

    harness.scheduler.start(1, moves, 5)
    await clock.advance_to(29)

    # Delay floors at zero: each cycle follows the previous one's speech
    assert harness.times == pytest.approx([0, 7, 14, 21, 28])


@pytest.mark.asyncio
async def test_speech_never_calling_back_is_bounded_by_timeout(clock, moves):
    platform = FakeSpeechPlatform(clock, respond=False)
    harness = Harness(clock, platform)

    harness.scheduler.start(1, moves, 5)
    await clock.advance_to(25)

    # 10 s safety timeout, then the next speak() cancels the stuck utterance
    assert len(harness.announced) == 3
    assert harness.times[:2] == pytest.approx([0, 10])
    assert harness.scheduler.is_running


@pytest.mark.asyncio
async def test_failed_speech_does_not_stop_the_cycle(clock, moves):
    harness = Harness(clock, FakeSpeechPlatform(clock, error="audio-busy"))

    harness.scheduler.start(1, moves, 5)
    await clock.advance_to(21)

    assert harness.times == [0, 5, 10, 15, 20]


@pytest.mark.asyncio
async def test_token_change_stops_cycle_after_speech(clock, moves):
    harness = Harness(clock, FakeSpeechPlatform(clock, duration=3.0))

    harness.scheduler.start(1, moves, 10)
    await clock.advance(1.0)
    harness.token = 2  # session replaced while speaking
    await clock.advance_to(30)

    assert len(harness.announced) == 1
    assert not harness.scheduler.is_running
    assert clock.pending_timers == 0


@pytest.mark.asyncio
async def test_stale_cycle_never_selects_a_move(clock, moves):
    harness = Harness(clock, FakeSpeechPlatform(clock))
    harness.token = 5

    delay = await harness.scheduler.run_cycle(4, moves, 10)

    assert delay is None
    assert harness.announced == []


@pytest.mark.asyncio
async def test_stop_cancels_pending_timer(clock, moves):
    harness = Harness(clock, FakeSpeechPlatform(clock))

    harness.scheduler.start(1, moves, 10)
    await clock.advance(1.0)
    harness.scheduler.stop()
    harness.scheduler.stop()
    await clock.advance_to(50)

    assert harness.times == [0]
    assert not harness.scheduler.is_running


@pytest.mark.asyncio
async def test_injected_random_source_controls_sequence(clock, moves):
    rng = ScriptedRandom([2, 2, 0, 1])
    harness = Harness(clock, FakeSpeechPlatform(clock), rng=rng)

    harness.scheduler.start(1, moves, 5)
    await clock.advance_to(16)

    # Repeats on consecutive draws are allowed
    assert [name for _, _, name in harness.announced] == ["C", "C", "A", "B"]


def test_move_selection_is_uniform(moves):
    scheduler = MoveScheduler(
        speech=None,
        current_token=lambda: 1,
        on_move=lambda token, move: None,
        rng=random.Random(2024),
    )
    draws = [scheduler.pick(moves).name for _ in range(30000)]
    counts = Counter(draws)

    assert set(counts) == {"A", "B", "C"}
    for name in "ABC":
        assert counts[name] == pytest.approx(10000, rel=0.05)

    # No bias against repeating the previous move
    repeats = sum(1 for prev, cur in zip(draws, draws[1:]) if prev == cur)
    assert repeats / (len(draws) - 1) == pytest.approx(1 / 3, abs=0.02)


def test_start_requires_moves(clock):
    scheduler = MoveScheduler(speech=None, current_token=lambda: 1, on_move=lambda t, m: None)
    with pytest.raises(ValueError):
        scheduler.start(1, (), 10)
