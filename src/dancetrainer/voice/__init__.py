"""Speech output for move announcements.

Usage:
    from dancetrainer.voice import SpeechChannel, Pyttsx3SpeechPlatform

    channel = SpeechChannel(Pyttsx3SpeechPlatform())
    outcome = await channel.speak("Cross Body Lead")
"""

from .platform import (
    INTERRUPTION_ERRORS,
    PlatformVoice,
    Utterance,
    SpeechPlatform,
    Pyttsx3SpeechPlatform,
)
from .voice_library import (
    LANGUAGE_CODES,
    DEFAULT_LANGUAGE_TAGS,
    DEFAULT_VOICE_PROFILE,
    DEFAULT_FALLBACK_LANGUAGE,
    VoiceProfile,
    is_female,
    is_male,
    parse_voice_profile,
    select_voice,
)
from .speech_channel import SpeechChannel, SpeechOutcome

__all__ = [
    "INTERRUPTION_ERRORS",
    "PlatformVoice",
    "Utterance",
    "SpeechPlatform",
    "Pyttsx3SpeechPlatform",
    "LANGUAGE_CODES",
    "DEFAULT_LANGUAGE_TAGS",
    "DEFAULT_VOICE_PROFILE",
    "DEFAULT_FALLBACK_LANGUAGE",
    "VoiceProfile",
    "is_female",
    "is_male",
    "parse_voice_profile",
    "select_voice",
    "SpeechChannel",
    "SpeechOutcome",
]
