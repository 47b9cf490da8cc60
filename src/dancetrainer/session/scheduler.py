"""Drift-compensated announce cycle.

Each cycle picks a random move, shows it, waits for the announcement to be
spoken, then sleeps for whatever is left of the interval. Announce starts
therefore stay `interval` apart no matter how long speech takes; if speech
outlasts the interval the next cycle starts immediately.

Every cycle carries the session token it was started with and stops as
soon as the controller's current token differs.
"""

import asyncio
import logging
import random
from typing import Callable, Optional, Sequence

from ..core.clock import Clock, LoopClock
from ..core.models import Move
from ..voice.speech_channel import SpeechChannel

logger = logging.getLogger(__name__)


class MoveScheduler:
    """Repeatedly selects and announces moves for one session token at a time."""

    def __init__(
        self,
        speech: SpeechChannel,
        current_token: Callable[[], int],
        on_move: Callable[[int, Move], None],
        clock: Optional[Clock] = None,
        rng: Optional[random.Random] = None,
    ):
        """
        Args:
            speech: Channel used to announce move names
            current_token: Returns the controller's current session token
            on_move: Called with (token, move) when a move is selected
            clock: Time source (defaults to the loop clock)
            rng: Random source for move selection
        """
        self.speech = speech
        self.clock = clock or LoopClock()
        self.rng = rng or random.Random()
        self._current_token = current_token
        self._on_move = on_move
        self._task: Optional[asyncio.Task] = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self, token: int, moves: Sequence[Move], interval_seconds: float) -> None:
        """Arm the cycle for `token`. The first announcement happens right away."""
        if not moves:
            raise ValueError("MoveScheduler needs at least one move")
        self.stop()
        self._task = asyncio.get_running_loop().create_task(
            self._run(token, tuple(moves), float(interval_seconds))
        )
        self._task.add_done_callback(self._report_failure)

    def stop(self) -> None:
        """Cancel the pending timer (or in-flight cycle). Idempotent."""
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    def pick(self, moves: Sequence[Move]) -> Move:
        """Independent uniform draw; repeats are allowed."""
        return moves[self.rng.randrange(len(moves))]

    async def run_cycle(self, token: int, moves: Sequence[Move], interval_seconds: float) -> Optional[float]:
        """Run one announce cycle.

        Returns:
            Seconds to wait before the next cycle, or None if the token went stale
        """
        started_at = self.clock.now()
        if self._current_token() != token:
            return None

        move = self.pick(moves)
        self._on_move(token, move)
        await self.speech.speak(move.name)

        if self._current_token() != token:
            logger.debug(f"Dropping stale cycle for session {token}")
            return None

        elapsed = self.clock.now() - started_at
        return max(0.0, interval_seconds - elapsed)

    async def _run(self, token: int, moves: Sequence[Move], interval_seconds: float) -> None:
        while True:
            delay = await self.run_cycle(token, moves, interval_seconds)
            if delay is None:
                return
            await self.clock.sleep(delay)

    @staticmethod
    def _report_failure(task: asyncio.Task) -> None:
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error("Announce cycle crashed", exc_info=error)
