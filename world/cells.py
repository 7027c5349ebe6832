from __future__ import annotations

"""
Flyweight registry of grid cells.

A ``Cell`` carries only what is intrinsic to an address: the address itself and
the rectangle it covers. Coin contents live in ``game.models.Cache`` and are
reconciled from the memento store whenever a cache is materialised, so cells can
be shared freely and never go stale.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Iterator, Optional

from .grid import GeoBounds, GridAddress, to_geo
from .settings import WorldSettings

logger = logging.getLogger("geocoin.cells")

CellHook = Callable[["Cell"], None]


@dataclass(frozen=True, eq=False)
class Cell:
    """Shared, immutable geometry for one grid address."""

    address: GridAddress
    bounds: GeoBounds

    @property
    def i(self) -> int:
        return self.address.i

    @property
    def j(self) -> int:
        return self.address.j

    def __repr__(self) -> str:
        return f"Cell({self.address.i}, {self.address.j})"


class CellRegistry:
    """
    Hands out at most one ``Cell`` per address for the registry's lifetime.

    Args:
        settings: Grid configuration used to compute cell bounds.
        on_create: Optional hook called exactly once per newly built cell,
            e.g. to register it with a view.
    """

    def __init__(self, settings: WorldSettings, on_create: Optional[CellHook] = None) -> None:
        self.settings = settings
        self.on_create = on_create
        self._cells: Dict[GridAddress, Cell] = {}

    def get(self, i: int, j: int) -> Cell:
        return self.get_address(GridAddress(i, j))

    def get_address(self, address: GridAddress) -> Cell:
        cell = self._cells.get(address)
        if cell is None:
            cell = Cell(address, to_geo(address, self.settings))
            self._cells[address] = cell
            logger.debug("Registered cell %s", address)
            if self.on_create is not None:
                self.on_create(cell)
        return cell

    def __contains__(self, address: object) -> bool:
        return address in self._cells

    def __len__(self) -> int:
        return len(self._cells)

    def __iter__(self) -> Iterator[Cell]:
        return iter(self._cells.values())

    def clear(self) -> None:
        """Drop every cell; used when a session is torn down."""
        self._cells.clear()


__all__ = ["Cell", "CellRegistry"]
