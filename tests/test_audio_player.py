"""Tests for AudioPlayer and the pygame backend (mixer stubbed out)."""

from types import SimpleNamespace

import pytest

from dancetrainer.audio import backend as backend_module
from dancetrainer.audio.backend import PygameAudioBackend
from dancetrainer.audio.player import AudioPlayer
from dancetrainer.core.errors import TrackUnavailable

from conftest import FakeAudioBackend


class TestAudioPlayer:
    def test_start_loads_and_loops(self, audio_backend):
        player = AudioPlayer(audio_backend)

        assert player.start("/music/a.mp3") is True
        assert player.is_playing
        assert player.source == "/music/a.mp3"
        assert audio_backend.calls == [("load", "/music/a.mp3"), ("play", True)]

    def test_stop_pauses_then_releases(self, audio_backend):
        player = AudioPlayer(audio_backend)
        player.start("/music/a.mp3")

        player.stop()
        player.stop()

        assert audio_backend.calls[2:] == [("pause",), ("release",)]
        assert not player.is_playing
        assert audio_backend.loaded is None

    def test_start_replaces_previous_track(self, audio_backend):
        player = AudioPlayer(audio_backend)
        player.start("/music/a.mp3")
        player.start("/music/b.mp3")

        assert audio_backend.calls[2:] == [
            ("pause",),
            ("release",),
            ("load", "/music/b.mp3"),
            ("play", True),
        ]
        assert player.source == "/music/b.mp3"

    def test_unloadable_track_is_absorbed(self):
        backend = FakeAudioBackend(fail_load=True)
        player = AudioPlayer(backend)

        assert player.start("/music/broken.mp3") is False
        assert not player.is_playing
        assert backend.calls[-1] == ("release",)

    def test_no_backend(self):
        player = AudioPlayer()

        assert player.start("/music/a.mp3") is False
        player.stop()
        assert not player.is_playing


class FakeMusic:
    def __init__(self, fail=False):
        self.fail = fail
        self.calls = []

    def load(self, source):
        if self.fail:
            raise FakePygameError("Unrecognized audio format")
        self.calls.append(("load", source))

    def set_volume(self, volume):
        self.calls.append(("set_volume", volume))

    def play(self, loops=0):
        self.calls.append(("play", loops))

    def pause(self):
        self.calls.append(("pause",))

    def stop(self):
        self.calls.append(("stop",))

    def unload(self):
        self.calls.append(("unload",))


class FakePygameError(Exception):
    pass


@pytest.fixture
def fake_pygame(monkeypatch):
    state = {"initialized": False}
    music = FakeMusic()

    def init():
        state["initialized"] = True

    fake = SimpleNamespace(
        error=FakePygameError,
        mixer=SimpleNamespace(
            get_init=lambda: state["initialized"],
            init=init,
            music=music,
        ),
    )
    monkeypatch.setattr(backend_module, "pygame", fake)
    return fake


class TestPygameAudioBackend:
    def test_plays_forever_when_looping(self, fake_pygame):
        backend = PygameAudioBackend(volume=0.5)

        backend.load("/music/a.mp3")
        backend.play(loop=True)

        assert fake_pygame.mixer.music.calls == [
            ("load", "/music/a.mp3"),
            ("set_volume", 0.5),
            ("play", -1),
        ]

    def test_release_stops_and_unloads(self, fake_pygame):
        backend = PygameAudioBackend()
        backend.load("/music/a.mp3")
        backend.play()
        backend.pause()
        backend.release()
        backend.release()

        assert fake_pygame.mixer.music.calls[-3:] == [("pause",), ("stop",), ("unload",)]

    def test_decode_failure_raises_track_unavailable(self, fake_pygame):
        fake_pygame.mixer.music.fail = True
        backend = PygameAudioBackend()

        with pytest.raises(TrackUnavailable):
            backend.load("/music/broken.xyz")

        backend.play()
        assert fake_pygame.mixer.music.calls == []

    def test_volume_is_clamped(self):
        assert PygameAudioBackend(volume=3).volume == 1.0
        assert PygameAudioBackend(volume=-1).volume == 0.0
