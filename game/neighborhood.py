from __future__ import annotations

"""
Neighborhood regeneration.

Every time the player changes cell, all materialised caches are dropped and
the square of cells around the player is rebuilt. A cell with a memento is
always restored from it, even if the spawn roll would now say otherwise; a
cell without one is generated and its memento written straight away.
"""

import logging
from typing import Dict, List, Optional

from world.cells import CellRegistry
from world.generation import generate_coins, should_spawn
from world.grid import GridAddress
from world.settings import WorldSettings
from .memento import MementoError, MementoStore
from .models import Cache
from .view import CacheView

logger = logging.getLogger("geocoin.neighborhood")


class Neighborhood:
    def __init__(
        self,
        settings: WorldSettings,
        cells: CellRegistry,
        mementos: MementoStore,
        view: Optional[CacheView] = None,
    ) -> None:
        self.settings = settings
        self.cells = cells
        self.mementos = mementos
        self.view = view or CacheView()
        self.center: Optional[GridAddress] = None
        self.caches: Dict[GridAddress, Cache] = {}

    def regenerate(self, center: GridAddress) -> Dict[GridAddress, Cache]:
        """
        Rebuild the visible caches around ``center``.

        Returns:
            Mapping of address to the freshly materialised ``Cache``.
        """
        self.discard_all()
        self.center = center

        for address in center.neighborhood(self.settings.neighborhood_size):
            cache = self._materialise(address)
            if cache is not None:
                self.caches[address] = cache

        for cache in self.caches.values():
            self.view.show(cache)
        logger.debug("Regenerated %d caches around %s", len(self.caches), center)
        return dict(self.caches)

    def discard_all(self) -> None:
        for address in list(self.caches):
            self.view.discard(address)
        self.caches.clear()
        self.center = None

    def cache_at(self, address: GridAddress) -> Optional[Cache]:
        return self.caches.get(address)

    def visible(self) -> List[Cache]:
        return list(self.caches.values())

    def _materialise(self, address: GridAddress) -> Optional[Cache]:
        if self.mementos.has(address):
            cell = self.cells.get_address(address)
            try:
                return Cache.from_memento(cell, self.mementos.get(address))
            except MementoError as e:
                logger.warning("Discarding corrupt memento at %s: %s", address, e)
                self.mementos.discard(address)

        if not should_spawn(address, self.settings):
            return None

        cell = self.cells.get_address(address)
        cache = Cache(cell=cell, coins=generate_coins(address, self.settings))
        self.mementos.set(address, cache.to_memento())
        return cache


__all__ = ["Neighborhood"]
