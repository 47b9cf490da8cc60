"""Trainer configuration dataclass.

Defaults: a 3-2-1 countdown, a move every 10 seconds, a Spanish female
voice preferred with a Russian fallback, and speech slightly slower than
normal for clarity.
"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from .errors import InvalidInterval


ENV_PREFIX = "DANCETRAINER_"


@dataclass
class TrainerConfig:
    """Configuration for sessions, speech and storage."""

    # ===========================================
    # ANNOUNCE CADENCE
    # ===========================================
    default_interval_seconds: float = 10.0
    min_interval_seconds: float = 5.0
    max_interval_seconds: float = 20.0

    # ===========================================
    # COUNTDOWN
    # ===========================================
    countdown_from: int = 3
    countdown_step_seconds: float = 1.0

    # ===========================================
    # SPEECH
    # ===========================================
    voice_profile: str = "spanish-female"  # "<language>-<gender>"
    fallback_language: str = "ru"
    speech_rate: float = 0.9  # slower than normal for clarity
    speech_pitch: float = 1.0
    speech_timeout_seconds: float = 10.0  # safety net for engines that never call back
    cancel_settle_seconds: float = 0.05  # pause between cancel() and the next utterance

    # ===========================================
    # STORAGE
    # ===========================================
    styles_path: str = "data/styles.json"
    music_index_path: str = "data/music/index.json"

    # ===========================================
    # LOGGING
    # ===========================================
    verbose: bool = False
    log_to_file: bool = False
    log_dir: str = "data/logs"

    def validate_interval(self, interval_seconds: float) -> float:
        """Check an announce interval against the configured bounds.

        Raises:
            InvalidInterval: If the interval is outside [min, max]
        """
        if not (self.min_interval_seconds <= interval_seconds <= self.max_interval_seconds):
            raise InvalidInterval(
                interval_seconds, self.min_interval_seconds, self.max_interval_seconds
            )
        return float(interval_seconds)

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> "TrainerConfig":
        """Build a config from DANCETRAINER_* environment variables.

        Loads a .env file first (if present). Unset variables keep defaults.
        """
        load_dotenv(env_file)
        config = cls()

        for name, default in list(vars(config).items()):
            raw = os.getenv(ENV_PREFIX + name.upper())
            if raw is None:
                continue
            if isinstance(default, bool):
                value = raw.strip().lower() in ("1", "true", "yes", "on")
            elif isinstance(default, int):
                value = int(raw)
            elif isinstance(default, float):
                value = float(raw)
            else:
                value = raw
            setattr(config, name, value)

        return config
