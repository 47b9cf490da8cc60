"""Background music playback."""

from .backend import AudioBackend, PygameAudioBackend
from .player import AudioPlayer

__all__ = ["AudioBackend", "PygameAudioBackend", "AudioPlayer"]
