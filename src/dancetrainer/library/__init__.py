"""Style catalogue and music collection used by sessions."""

from .defaults import INITIAL_STYLES, LEVEL_LABELS, level_label
from .styles import StyleLibrary
from .music import MusicLibrary, probe_duration

__all__ = [
    "INITIAL_STYLES",
    "LEVEL_LABELS",
    "level_label",
    "StyleLibrary",
    "MusicLibrary",
    "probe_duration",
]
