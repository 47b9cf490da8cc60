"""Voice profiles and the voice fallback chain.

A voice profile key has the form "<language>-<gender>", e.g.
"spanish-female". Engines name their voices inconsistently, so gender is
taken from the engine when it reports one and otherwise guessed from
well-known voice names.
"""

import re
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from .platform import PlatformVoice


# =============================================================================
# LANGUAGES
# =============================================================================

LANGUAGE_CODES = {
    "spanish": "es",
    "russian": "ru",
    "english": "en",
}

# Tag used when no installed voice matches and only a language can be set
DEFAULT_LANGUAGE_TAGS = {
    "es": "es-ES",
    "ru": "ru-RU",
    "en": "en-US",
}

DEFAULT_VOICE_PROFILE = "spanish-female"
DEFAULT_FALLBACK_LANGUAGE = "ru"


# =============================================================================
# GENDER DETECTION
# =============================================================================

# Voice names seen on Chrome, Edge, macOS and Android for es/ru voices
FEMALE_VOICE_PATTERN = re.compile(
    r"female|женский|mujer|paulina|mónica|milena|kore|zephyr|alena|google", re.IGNORECASE
)
MALE_VOICE_PATTERN = re.compile(r"male|мужской|hombre|puck|charon|yuri", re.IGNORECASE)


def is_female(voice: PlatformVoice) -> bool:
    if voice.gender:
        return voice.gender.lower() == "female"
    return bool(FEMALE_VOICE_PATTERN.search(voice.name))


def is_male(voice: PlatformVoice) -> bool:
    if voice.gender:
        return voice.gender.lower() == "male"
    # "male" is a substring of "female"
    return bool(MALE_VOICE_PATTERN.search(voice.name)) and not is_female(voice)


def matches_language(voice: PlatformVoice, language_code: str) -> bool:
    return voice.lang.lower().startswith(language_code.lower())


# =============================================================================
# PROFILES
# =============================================================================

@dataclass(frozen=True)
class VoiceProfile:
    """A requested voice: language code plus preferred gender."""

    language_code: str
    gender: str = "female"

    @property
    def language_tag(self) -> str:
        return language_tag_for(self.language_code)


def language_tag_for(language_code: str) -> str:
    return DEFAULT_LANGUAGE_TAGS.get(language_code, language_code)


def parse_voice_profile(
    key: str, fallback_language: str = DEFAULT_FALLBACK_LANGUAGE
) -> VoiceProfile:
    """Parse "spanish-female" style keys.

    Unknown languages map to the fallback language; a missing or unknown
    gender defaults to female.
    """
    language, _, gender = key.strip().lower().partition("-")
    code = LANGUAGE_CODES.get(language)
    if code is None:
        # Accept bare codes like "es-male" too
        code = language if language in DEFAULT_LANGUAGE_TAGS else fallback_language
    if gender not in ("female", "male"):
        gender = "female"
    return VoiceProfile(language_code=code, gender=gender)


def voice_checks(
    profile: VoiceProfile, fallback_language: str = DEFAULT_FALLBACK_LANGUAGE
) -> List[Callable[[PlatformVoice], bool]]:
    """Ordered, increasingly permissive voice predicates."""
    wants_gender = is_female if profile.gender == "female" else is_male
    return [
        # 1. Exact language and gender
        lambda v: matches_language(v, profile.language_code) and wants_gender(v),
        # 2. Any voice in the requested language
        lambda v: matches_language(v, profile.language_code),
        # 3. Female voice in the fallback language
        lambda v: matches_language(v, fallback_language) and is_female(v),
        # 4. Any voice in the fallback language
        lambda v: matches_language(v, fallback_language),
    ]


def select_voice(
    voices: Sequence[PlatformVoice],
    profile: VoiceProfile,
    fallback_language: str = DEFAULT_FALLBACK_LANGUAGE,
) -> Optional[PlatformVoice]:
    """Pick a voice using the fallback chain; None lets the engine decide."""
    for check in voice_checks(profile, fallback_language):
        for voice in voices:
            if check(voice):
                return voice
    return None
