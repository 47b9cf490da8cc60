"""Tests for the command-line entry point and logging setup."""

import json
import logging

import pytest

from dancetrainer import __main__ as cli
from dancetrainer.core.errors import SpeechPlatformUnavailable
from dancetrainer.library import music as music_module
from dancetrainer.utils.logger import setup_logger


@pytest.fixture
def workspace(tmp_path, monkeypatch):
    """Point storage at tmp_path and keep the CLI away from real devices."""
    monkeypatch.setenv("DANCETRAINER_STYLES_PATH", str(tmp_path / "styles.json"))
    monkeypatch.setenv("DANCETRAINER_MUSIC_INDEX_PATH", str(tmp_path / "music" / "index.json"))
    monkeypatch.setattr(cli, "setup_logger", lambda **kwargs: logging.getLogger())

    def no_engine():
        raise SpeechPlatformUnavailable("no engine in tests")

    monkeypatch.setattr(cli, "Pyttsx3SpeechPlatform", no_engine)
    monkeypatch.setattr(music_module, "probe_duration", lambda path: 190.0)
    return tmp_path


def test_styles_command_seeds_catalogue(workspace):
    assert cli.main(["styles", "--labels", "ru"]) == 0
    assert (workspace / "styles.json").exists()


def test_music_add_and_list(workspace):
    song = workspace / "song.mp3"
    song.write_bytes(b"\x00")

    assert cli.main(["music", "--add", str(song), "--title", "Valió la Pena", "--style", "Salsa",
                     "--level", "Advanced"]) == 0
    assert cli.main(["music", "--sort", "duration"]) == 0

    index = json.loads((workspace / "music" / "index.json").read_text(encoding="utf-8"))
    assert index["tracks"][0]["title"] == "Valió la Pena"
    assert index["tracks"][0]["level"] == "Advanced"
    assert index["tracks"][0]["duration_seconds"] == 190.0


def test_music_add_missing_file_fails(workspace):
    assert cli.main(["music", "--add", str(workspace / "nope.mp3")]) == 1


def test_train_unknown_style_fails(workspace):
    assert cli.main(["train", "tango"]) == 1


def test_train_stops_after_duration(workspace):
    assert cli.main(["train", "salsa-1", "--duration", "0.2", "--interval", "5"]) == 0


def test_voice_override(workspace, monkeypatch):
    seen = {}
    real_build = cli.build_controller

    def spy(config, styles, music):
        seen["voice"] = config.voice_profile
        return real_build(config, styles, music)

    monkeypatch.setattr(cli, "build_controller", spy)
    cli.main(["train", "salsa-1", "--duration", "0.1", "--voice", "russian-male"])

    assert seen["voice"] == "russian-male"


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


def test_console_shows_only_trainer_records(capsys, restore_root_logger):
    setup_logger()

    logging.getLogger("dancetrainer.session").info("Session 1 active")
    logging.getLogger("pydub.converter").info("ffmpeg noise")
    logging.getLogger("dancetrainer.voice").debug("hidden unless verbose")

    out = capsys.readouterr().out
    assert "Session 1 active" in out
    assert "ffmpeg noise" not in out
    assert "hidden unless verbose" not in out


def test_log_file(tmp_path, restore_root_logger):
    setup_logger(verbose=True, save_to_file=True, log_dir=str(tmp_path / "logs"))
    logging.getLogger("dancetrainer.session").debug("written to file")
    for handler in logging.getLogger().handlers:
        handler.flush()

    files = list((tmp_path / "logs").glob("session_*.log"))
    assert len(files) == 1
    assert "written to file" in files[0].read_text(encoding="utf-8")
