"""Local music collection.

Tracks stay where they are on disk; the library keeps a JSON index of
their metadata next to the configured index path. Durations are probed
with pydub (which needs ffmpeg for compressed formats).
"""

import json
import logging
import time
from pathlib import Path
from typing import Dict, List, Optional, Union

from pydub import AudioSegment
from pydub.exceptions import CouldntDecodeError

from ..core.enums import MoveLevel
from ..core.errors import TrackUnavailable, ValidationError
from ..core.models import Track

logger = logging.getLogger(__name__)

SORT_KEYS = {
    "title": lambda t: t.title.lower(),
    "artist": lambda t: (t.artist.lower(), t.title.lower()),
    "duration": lambda t: t.duration_seconds,
    "level": lambda t: (t.level is None, list(MoveLevel).index(t.level) if t.level else 0),
}


def probe_duration(path: Union[str, Path]) -> float:
    """Length of an audio file in seconds, or 0.0 if it cannot be decoded."""
    try:
        segment = AudioSegment.from_file(str(path))
    except (CouldntDecodeError, OSError, IndexError) as e:
        logger.warning(f"Could not read duration of {path}: {e}")
        return 0.0
    return round(segment.duration_seconds, 2)


class MusicLibrary:
    """Index of locally stored tracks usable as session background music."""

    def __init__(self, index_path: Optional[Union[str, Path]] = "data/music/index.json"):
        self.index_path = Path(index_path) if index_path is not None else None
        self._tracks: Dict[str, Track] = {}
        self._load()

    def _load(self) -> None:
        if self.index_path is None or not self.index_path.exists():
            return
        with open(self.index_path, encoding="utf-8") as f:
            data = json.load(f)
        for entry in data.get("tracks", []):
            track = Track.from_dict(entry)
            self._tracks[track.id] = track
        logger.debug(f"Loaded {len(self._tracks)} tracks from {self.index_path}")

    def _save(self) -> None:
        if self.index_path is None:
            return
        self.index_path.parent.mkdir(parents=True, exist_ok=True)
        payload = {"tracks": [t.to_dict() for t in self._tracks.values()]}
        with open(self.index_path, "w", encoding="utf-8") as f:
            json.dump(payload, f, ensure_ascii=False, indent=2)

    def list_tracks(
        self,
        level: Optional[MoveLevel] = None,
        dance_style: Optional[str] = None,
        sort_by: str = "title",
    ) -> List[Track]:
        """Tracks filtered by level and/or dance style, sorted by `sort_by`."""
        if sort_by not in SORT_KEYS:
            raise ValidationError(f"Cannot sort tracks by '{sort_by}'")
        tracks = list(self._tracks.values())
        if level is not None:
            tracks = [t for t in tracks if t.level == MoveLevel(level)]
        if dance_style is not None:
            wanted = dance_style.lower()
            tracks = [t for t in tracks if t.dance_style.lower() == wanted]
        return sorted(tracks, key=SORT_KEYS[sort_by])

    def get_track(self, track_id: str) -> Track:
        try:
            return self._tracks[track_id]
        except KeyError:
            raise TrackUnavailable(track_id, "not in library") from None

    def get_track_audio_source(self, track_id: str) -> str:
        """Path to the track's audio file; raises TrackUnavailable if it is gone."""
        track = self.get_track(track_id)
        if not Path(track.audio_source).is_file():
            raise TrackUnavailable(track_id, f"file missing: {track.audio_source}")
        return track.audio_source

    def add_track(
        self,
        path: Union[str, Path],
        title: Optional[str] = None,
        artist: str = "Unknown",
        dance_style: str = "General",
        level: Optional[MoveLevel] = None,
    ) -> Track:
        """Register an audio file. Title defaults to the file name without extension."""
        source = Path(path)
        if not source.is_file():
            raise TrackUnavailable(str(path), "file not found")

        track_id = f"song-{int(time.time() * 1000)}"
        suffix = 1
        while track_id in self._tracks:
            suffix += 1
            track_id = f"song-{int(time.time() * 1000)}-{suffix}"

        track = Track(
            id=track_id,
            title=(title or source.stem).strip() or source.stem,
            audio_source=str(source.resolve()),
            artist=artist,
            dance_style=dance_style,
            level=MoveLevel(level) if level else None,
            duration_seconds=probe_duration(source),
        )
        self._tracks[track.id] = track
        self._save()
        logger.info(f"Added track '{track.title}' ({track.duration_seconds:g}s)")
        return track

    def delete_track(self, track_id: str) -> None:
        self.get_track(track_id)
        del self._tracks[track_id]
        self._save()
        logger.info(f"Deleted track {track_id}")
