"""Platform audio capability for background tracks.

The shipped backend uses pygame.mixer.music, which streams the file from
disk and supports endless looping.
"""

import logging
from typing import Optional, Protocol, runtime_checkable

import pygame

from ..core.errors import TrackUnavailable

logger = logging.getLogger(__name__)


@runtime_checkable
class AudioBackend(Protocol):
    """Minimal playback surface used by AudioPlayer."""

    def load(self, source: str) -> None:
        """Prepare `source` for playback; raise TrackUnavailable on failure."""
        ...

    def play(self, loop: bool = True) -> None:
        ...

    def pause(self) -> None:
        ...

    def release(self) -> None:
        """Free whatever load() acquired."""
        ...


class PygameAudioBackend:
    """AudioBackend using pygame's streaming music channel."""

    def __init__(self, volume: float = 0.8):
        self.volume = max(0.0, min(1.0, volume))
        self._loaded: Optional[str] = None

    def _ensure_mixer(self) -> None:
        if pygame.mixer.get_init():
            return
        try:
            pygame.mixer.init()
        except pygame.error as e:
            raise TrackUnavailable("mixer", f"audio device unavailable: {e}") from e

    def load(self, source: str) -> None:
        self._ensure_mixer()
        try:
            pygame.mixer.music.load(source)
        except (pygame.error, FileNotFoundError) as e:
            raise TrackUnavailable(source, str(e)) from e
        pygame.mixer.music.set_volume(self.volume)
        self._loaded = source
        logger.debug(f"Loaded background track {source}")

    def play(self, loop: bool = True) -> None:
        if self._loaded is None:
            return
        pygame.mixer.music.play(loops=-1 if loop else 0)

    def pause(self) -> None:
        if self._loaded is not None and pygame.mixer.get_init():
            pygame.mixer.music.pause()

    def release(self) -> None:
        if self._loaded is None:
            return
        if pygame.mixer.get_init():
            pygame.mixer.music.stop()
            pygame.mixer.music.unload()
        self._loaded = None
