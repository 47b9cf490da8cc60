"""Looping background music for a session.

Runs independently of the announce cycle; the two only share the session
lifecycle. A track that cannot be loaded never blocks a session.
"""

import logging
from typing import Optional

from ..core.errors import TrackUnavailable
from .backend import AudioBackend

logger = logging.getLogger(__name__)


class AudioPlayer:
    """Plays at most one background track on loop."""

    def __init__(self, backend: Optional[AudioBackend] = None):
        self.backend = backend
        self._source: Optional[str] = None

    @property
    def is_playing(self) -> bool:
        return self._source is not None

    @property
    def source(self) -> Optional[str]:
        return self._source

    def start(self, source: str) -> bool:
        """Load `source` and play it on loop.

        Returns:
            True if playback started, False if the track was unavailable
        """
        self.stop()
        if self.backend is None:
            logger.warning("No audio backend configured; playing without music")
            return False

        try:
            self.backend.load(source)
            self.backend.play(loop=True)
        except TrackUnavailable as e:
            logger.warning(f"Background track skipped: {e}")
            self._release()
            return False

        self._source = source
        logger.info(f"Background music started: {source}")
        return True

    def stop(self) -> None:
        """Pause playback and release the track. Safe to call repeatedly."""
        if self._source is None:
            return
        try:
            self.backend.pause()
        finally:
            self._release()
        logger.info("Background music stopped")

    def _release(self) -> None:
        self._source = None
        if self.backend is not None:
            self.backend.release()
