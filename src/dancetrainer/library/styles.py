"""Dance style catalogue stored as a single JSON file.

A missing file is seeded with the built-in catalogue. Every change is
written back immediately. Pass path=None for a purely in-memory library.
"""

import json
import logging
import uuid
from dataclasses import replace
from pathlib import Path
from typing import Dict, List, Optional, Union

from ..core.enums import MoveLevel
from ..core.errors import StyleNotFound, ValidationError
from ..core.models import DanceStyle, Move
from .defaults import INITIAL_STYLES

logger = logging.getLogger(__name__)


def _new_id(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:8]}"


def _clean_name(name: str, what: str) -> str:
    cleaned = (name or "").strip()
    if not cleaned:
        raise ValidationError(f"{what} name must not be empty")
    return cleaned


class StyleLibrary:
    """CRUD access to dance styles and their moves."""

    def __init__(
        self,
        path: Optional[Union[str, Path]] = "data/styles.json",
        seed: Optional[List[DanceStyle]] = None,
    ):
        """Initialize StyleLibrary.

        Args:
            path: JSON file holding the catalogue, or None to keep it in memory
            seed: Styles used when the file does not exist yet
        """
        self.path = Path(path) if path is not None else None
        self._styles: Dict[str, DanceStyle] = {}
        self._load(INITIAL_STYLES if seed is None else seed)

    def _load(self, seed: List[DanceStyle]) -> None:
        if self.path is not None and self.path.exists():
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
            for entry in data.get("styles", []):
                style = DanceStyle.from_dict(entry)
                self._styles[style.id] = style
            logger.debug(f"Loaded {len(self._styles)} styles from {self.path}")
            return

        for style in seed:
            self._styles[style.id] = style
        self._save()

    def _save(self) -> None:
        if self.path is None:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = {"styles": [s.to_dict() for s in self._styles.values()]}
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(payload, f, ensure_ascii=False, indent=2)

    # ------------------------------------------------------------------
    # Styles
    # ------------------------------------------------------------------

    def list_styles(self) -> List[DanceStyle]:
        return list(self._styles.values())

    def get_style(self, style_id: str) -> DanceStyle:
        """Raises StyleNotFound for unknown ids."""
        try:
            return self._styles[style_id]
        except KeyError:
            raise StyleNotFound(style_id) from None

    def add_style(self, name: str, description: str = "") -> DanceStyle:
        style = DanceStyle(
            id=_new_id("style"),
            name=_clean_name(name, "Style"),
            description=description.strip(),
        )
        self._styles[style.id] = style
        self._save()
        logger.info(f"Added style '{style.name}' ({style.id})")
        return style

    def update_style(
        self, style_id: str, name: Optional[str] = None, description: Optional[str] = None
    ) -> DanceStyle:
        style = self.get_style(style_id)
        if name is not None:
            style = replace(style, name=_clean_name(name, "Style"))
        if description is not None:
            style = replace(style, description=description.strip())
        self._styles[style_id] = style
        self._save()
        return style

    def delete_style(self, style_id: str) -> None:
        self.get_style(style_id)
        del self._styles[style_id]
        self._save()
        logger.info(f"Deleted style {style_id}")

    # ------------------------------------------------------------------
    # Moves
    # ------------------------------------------------------------------

    def add_move(
        self,
        style_id: str,
        name: str,
        level: MoveLevel = MoveLevel.BEGINNER,
        description: Optional[str] = None,
        media_ref: Optional[str] = None,
    ) -> Move:
        style = self.get_style(style_id)
        move = Move(
            id=_new_id("move"),
            name=_clean_name(name, "Move"),
            level=MoveLevel(level),
            description=description,
            media_ref=media_ref,
        )
        self._styles[style_id] = replace(style, moves=style.moves + (move,))
        self._save()
        logger.info(f"Added move '{move.name}' to {style.name}")
        return move

    def update_move(
        self,
        style_id: str,
        move_id: str,
        name: Optional[str] = None,
        level: Optional[MoveLevel] = None,
        description: Optional[str] = None,
        media_ref: Optional[str] = None,
    ) -> Move:
        style = self.get_style(style_id)
        move = style.find_move(move_id)
        if move is None:
            raise ValidationError(f"Style {style_id} has no move {move_id}")

        changes = {}
        if name is not None:
            changes["name"] = _clean_name(name, "Move")
        if level is not None:
            changes["level"] = MoveLevel(level)
        if description is not None:
            changes["description"] = description
        if media_ref is not None:
            changes["media_ref"] = media_ref
        updated = replace(move, **changes)

        moves = tuple(updated if m.id == move_id else m for m in style.moves)
        self._styles[style_id] = replace(style, moves=moves)
        self._save()
        return updated

    def delete_move(self, style_id: str, move_id: str) -> None:
        style = self.get_style(style_id)
        if style.find_move(move_id) is None:
            raise ValidationError(f"Style {style_id} has no move {move_id}")
        moves = tuple(m for m in style.moves if m.id != move_id)
        self._styles[style_id] = replace(style, moves=moves)
        self._save()
