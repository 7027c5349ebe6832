from __future__ import annotations

"""Position sources: discrete movement steps and a toggleable sensor feed."""

import logging
from enum import Enum
from typing import TYPE_CHECKING, Tuple

if TYPE_CHECKING:
    from .game import Game

logger = logging.getLogger("geocoin.position")


class Direction(Enum):
    """One-cell steps as (di, dj); ``i`` grows northward, ``j`` eastward."""

    NORTH = (1, 0)
    SOUTH = (-1, 0)
    EAST = (0, 1)
    WEST = (0, -1)

    @property
    def delta(self) -> Tuple[int, int]:
        return self.value

    @classmethod
    def parse(cls, text: str) -> "Direction":
        """
        Accepts full names or their first letter, case-insensitively.
        Raises ValueError if invalid.
        """
        name = text.strip().lower()
        for d in cls:
            if name in (d.name.lower(), d.name[0].lower()):
                return d
        valid = ", ".join(d.name.lower() for d in cls)
        raise ValueError(f"Invalid direction '{text}'. Valid values: {valid}")


class PositionWatcher:
    """
    Forwards sensor fixes to a ``Game`` while switched on.

    Each accepted fix is a full move of the player (regenerate and save), so
    stopping the watcher between fixes never leaves half-applied state.
    """

    def __init__(self, game: "Game") -> None:
        self.game = game
        self._active = False

    @property
    def active(self) -> bool:
        return self._active

    def start(self) -> None:
        if not self._active:
            self._active = True
            logger.info("Position watching started")

    def stop(self) -> None:
        if self._active:
            self._active = False
            logger.info("Position watching stopped")

    def toggle(self) -> bool:
        if self._active:
            self.stop()
        else:
            self.start()
        return self._active

    def feed(self, lat: float, lng: float) -> bool:
        """Apply a sensor fix. Returns False if the watcher is stopped."""
        if not self._active:
            logger.debug("Ignoring position (%f, %f): watcher stopped", lat, lng)
            return False
        self.game.move_to(lat, lng)
        return True


__all__ = ["Direction", "PositionWatcher"]
