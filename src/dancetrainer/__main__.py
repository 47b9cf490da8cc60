"""Command-line entry point for DanceTrainer.

    python -m dancetrainer styles
    python -m dancetrainer music [--add song.mp3 --title "..." --style Salsa]
    python -m dancetrainer train salsa-1 [--track ID] [--interval 10] [--duration 120]
    python -m dancetrainer serve [--host 127.0.0.1] [--port 8000]
"""

import argparse
import asyncio
import logging
import sys
from typing import Optional

from .audio.backend import PygameAudioBackend
from .audio.player import AudioPlayer
from .core.config import TrainerConfig
from .core.enums import MoveLevel, SessionPhase
from .core.errors import SpeechPlatformUnavailable, TrainerError
from .core.models import SessionConfig, SessionState
from .library.defaults import level_label
from .library.music import MusicLibrary
from .library.styles import StyleLibrary
from .session.controller import SessionController
from .utils.logger import setup_logger
from .voice.platform import Pyttsx3SpeechPlatform
from .voice.speech_channel import SpeechChannel

logger = logging.getLogger(__name__)


def build_controller(
    config: TrainerConfig, styles: StyleLibrary, music: Optional[MusicLibrary]
) -> SessionController:
    """Wire the controller to the real speech engine and audio output."""
    try:
        platform = Pyttsx3SpeechPlatform()
    except SpeechPlatformUnavailable as e:
        logger.warning(f"⚠️  {e}. Moves will be shown but not spoken.")
        platform = None

    return SessionController(
        styles,
        tracks=music,
        speech=SpeechChannel.from_config(platform, config),
        audio=AudioPlayer(PygameAudioBackend()),
        config=config,
    )


def cmd_styles(args, config: TrainerConfig) -> int:
    styles = StyleLibrary(config.styles_path)
    for style in styles.list_styles():
        logger.info(f"{style.id}: {style.name} ({len(style.moves)} moves)")
        for move in style.moves:
            logger.info(f"    - {move.name} [{level_label(move.level, args.labels)}]")
    return 0


def cmd_music(args, config: TrainerConfig) -> int:
    music = MusicLibrary(config.music_index_path)
    if args.add:
        track = music.add_track(
            args.add,
            title=args.title,
            artist=args.artist,
            dance_style=args.style,
            level=MoveLevel(args.level) if args.level else None,
        )
        logger.info(f"✓ Added {track.id}: {track.title}")
        return 0

    tracks = music.list_tracks(sort_by=args.sort)
    if not tracks:
        logger.info("No tracks yet. Add one with: python -m dancetrainer music --add FILE")
    for track in tracks:
        logger.info(f"{track.id}: {track.title} - {track.artist} [{track.dance_style}]")
    return 0


async def run_training(args, config: TrainerConfig) -> int:
    styles = StyleLibrary(config.styles_path)
    music = MusicLibrary(config.music_index_path)
    controller = build_controller(config, styles, music)

    def render(state: SessionState) -> None:
        if state.phase is SessionPhase.COUNTDOWN and state.countdown_value:
            logger.info(f"   {state.countdown_value}...")

    controller.subscribe(render)
    controller.start(
        SessionConfig(
            style_id=args.style_id,
            track_id=args.track,
            interval_seconds=args.interval or config.default_interval_seconds,
        )
    )

    try:
        await asyncio.wait_for(controller.wait_until_idle(), timeout=args.duration)
    except asyncio.TimeoutError:
        logger.info("Session time is up")
    finally:
        controller.stop()
    return 0


def cmd_serve(args, config: TrainerConfig) -> int:
    import uvicorn

    from .api.app import create_app

    styles = StyleLibrary(config.styles_path)
    music = MusicLibrary(config.music_index_path)
    app = create_app(build_controller(config, styles, music), styles, music)
    uvicorn.run(app, host=args.host, port=args.port)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dancetrainer", description="Dance practice sessions with spoken move calls"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    parser.add_argument("--env-file", help="Path to a .env file")
    sub = parser.add_subparsers(dest="command", required=True)

    styles = sub.add_parser("styles", help="List dance styles and their moves")
    styles.add_argument("--labels", choices=["en", "ru"], default="en")

    music = sub.add_parser("music", help="List or add music tracks")
    music.add_argument("--add", metavar="FILE", help="Audio file to add")
    music.add_argument("--title")
    music.add_argument("--artist", default="Unknown")
    music.add_argument("--style", default="General", help="Dance style the track suits")
    music.add_argument("--level", choices=[lvl.value for lvl in MoveLevel])
    music.add_argument("--sort", default="title", choices=["title", "artist", "duration", "level"])

    train = sub.add_parser("train", help="Run a training session in the terminal")
    train.add_argument("style_id")
    train.add_argument("--track", help="Background track id")
    train.add_argument("--interval", type=float, help="Seconds between moves (5-20)")
    train.add_argument("--duration", type=float, help="Stop after this many seconds")
    train.add_argument("--voice", help='Voice profile, e.g. "spanish-female"')

    serve = sub.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)

    return parser


def main(argv=None) -> int:
    """Main entry point for DanceTrainer."""
    args = build_parser().parse_args(argv)
    config = TrainerConfig.from_env(args.env_file)
    if args.verbose:
        config.verbose = True
    if getattr(args, "voice", None):
        config.voice_profile = args.voice

    setup_logger(verbose=config.verbose, save_to_file=config.log_to_file, log_dir=config.log_dir)

    try:
        if args.command == "styles":
            return cmd_styles(args, config)
        if args.command == "music":
            return cmd_music(args, config)
        if args.command == "train":
            return asyncio.run(run_training(args, config))
        if args.command == "serve":
            return cmd_serve(args, config)
    except KeyboardInterrupt:
        logger.info("\n⚠️  Session interrupted by user")
        return 130
    except TrainerError as e:
        logger.error(f"❌ {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
