"""Built-in catalogue shipped with a fresh install."""

from typing import Dict, List

from ..core.enums import MoveLevel
from ..core.models import DanceStyle, Move

_PLACEHOLDER_MEDIA = "https://picsum.photos/400/225"


INITIAL_STYLES: List[DanceStyle] = [
    DanceStyle(
        id="salsa-1",
        name="Salsa",
        description="An energetic, joyful social dance born in the Caribbean.",
        moves=(
            Move("s1", "Basic Step", MoveLevel.BEGINNER, media_ref=_PLACEHOLDER_MEDIA),
            Move("s2", "Right Turn", MoveLevel.BEGINNER, media_ref=_PLACEHOLDER_MEDIA),
            Move("s3", "Cross Body Lead", MoveLevel.INTERMEDIATE, media_ref=_PLACEHOLDER_MEDIA),
            Move("s4", "Dile Que No", MoveLevel.INTERMEDIATE, media_ref=_PLACEHOLDER_MEDIA),
        ),
    ),
    DanceStyle(
        id="bachata-1",
        name="Bachata",
        description="A sensual, rhythmic dance from the Dominican Republic.",
        moves=(
            Move("b1", "Side Basic", MoveLevel.BEGINNER, media_ref=_PLACEHOLDER_MEDIA),
            Move("b2", "Box Step", MoveLevel.BEGINNER, media_ref=_PLACEHOLDER_MEDIA),
            Move("b3", "Sweetheart", MoveLevel.INTERMEDIATE, media_ref=_PLACEHOLDER_MEDIA),
        ),
    ),
]


LEVEL_LABELS: Dict[str, Dict[MoveLevel, str]] = {
    "en": {
        MoveLevel.BEGINNER: "Beginner",
        MoveLevel.INTERMEDIATE: "Intermediate",
        MoveLevel.ADVANCED: "Advanced",
    },
    "ru": {
        MoveLevel.BEGINNER: "Начинающий",
        MoveLevel.INTERMEDIATE: "Средний",
        MoveLevel.ADVANCED: "Профи",
    },
}


def level_label(level: MoveLevel, language: str = "en") -> str:
    labels = LEVEL_LABELS.get(language, LEVEL_LABELS["en"])
    return labels.get(level, level.value)
