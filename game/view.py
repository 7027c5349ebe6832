from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from world.cells import Cell
    from world.grid import GridAddress, LatLng
    from .models import Cache


class CacheView:
    """
    Receiver for everything a front end needs to draw the game.

    The base class ignores every notification, so a ``Game`` can run headless.
    Front ends override only the hooks they care about.
    """

    def register(self, cell: "Cell") -> None:
        """Called once per cell, the first time the session builds it."""

    def show(self, cache: "Cache") -> None:
        """A cache became visible after a neighborhood regeneration."""

    def update(self, cache: "Cache") -> None:
        """A visible cache's coins changed."""

    def discard(self, address: "GridAddress") -> None:
        """The cache at ``address`` is no longer materialised."""

    def move_player(self, position: "LatLng", history: Sequence["LatLng"]) -> None:
        """The player moved; ``history`` is the full trail, oldest first."""

    def notify(self, message: str) -> None:
        """Status text, e.g. points or the last transferred coin."""


__all__ = ["CacheView"]
