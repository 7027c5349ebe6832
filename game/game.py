import logging
from typing import List, Optional

from world.cells import CellRegistry
from world.grid import GridAddress, LatLng, to_geo, to_grid
from world.settings import WorldSettings
from .memento import MementoStore
from .models import Cache, PlayerInventory
from .neighborhood import Neighborhood
from .persistence import (
    GameLoadError,
    GameSaveError,
    GameState,
    load_state,
    save_state,
)
from .position import Direction
from .storage import KeyValueStore, MemoryStore
from .transfer import CoinTransfer, TransferResult
from .view import CacheView
from . import settings

logger = logging.getLogger("geocoin.Game")
logger.addHandler(logging.NullHandler())


class Game:
    """
    One play session. Owns every piece of mutable state:
      - the cell registry (one ``Cell`` per address)
      - the memento store (authoritative cache contents)
      - the player's inventory, position and movement trail
      - the visible neighborhood of materialised caches

    Every event handler (``move``, ``move_to``, ``collect``, ``deposit``,
    ``reset``) mutates state and then saves it before returning.
    """

    def __init__(
        self,
        world_settings: Optional[WorldSettings] = None,
        store: Optional[KeyValueStore] = None,
        view: Optional[CacheView] = None,
    ):
        self.world_settings = world_settings or WorldSettings()
        self.store: KeyValueStore = store if store is not None else MemoryStore()
        self.view = view or CacheView()

        self.cells = CellRegistry(self.world_settings, on_create=self.view.register)
        self.mementos = MementoStore()
        self.inventory = PlayerInventory()
        self.transfer = CoinTransfer(self.inventory, self.mementos)
        self.neighborhood = Neighborhood(
            self.world_settings, self.cells, self.mementos, self.view
        )

        self.position = LatLng(*settings.PLAYER_START)
        self.history: List[LatLng] = []
        self.last_result: Optional[TransferResult] = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def begin(self) -> None:
        """
        Restore the saved session (if any) and build the first neighborhood.
        An unreadable store is logged and the session starts fresh.
        """
        try:
            state = load_state(self.store)
        except GameLoadError as e:
            logger.warning("Failed to load saved state: %s. Starting fresh.", e)
            state = GameState()

        self._apply_state(state)
        logger.info(
            "Session started at %s with %d points and %d remembered caches",
            self.address, self.points, len(self.mementos),
        )
        self._refresh()
        self.save()

    def close(self) -> None:
        """Tear down in-memory state; the store is left untouched."""
        self.neighborhood.discard_all()
        self.cells.clear()

    def reset(self) -> None:
        """Forget every cache, coin and step taken, and start over."""
        self.mementos.clear()
        self.inventory.clear()
        self.history.clear()
        self.last_result = None
        self.position = LatLng(*settings.PLAYER_START)
        logger.info("Session reset")
        self._refresh()
        self.save()

    def _apply_state(self, state: GameState) -> None:
        self.mementos.clear()
        for address in state.mementos:
            self.mementos.set(address, state.mementos.get(address))
        self.inventory.replace(state.coins)
        self.position = state.position
        self.history = list(state.history)

    def snapshot(self) -> GameState:
        return GameState(
            position=self.position,
            points=self.points,
            history=list(self.history),
            mementos=self.mementos,
            coins=list(self.inventory.coins),
        )

    def save(self) -> None:
        try:
            save_state(self.snapshot(), self.store)
        except GameSaveError as e:
            logger.error("Failed to save game: %s", e)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    @property
    def address(self) -> GridAddress:
        return to_grid(self.position.lat, self.position.lng, self.world_settings)

    @property
    def points(self) -> int:
        return self.inventory.points

    @property
    def caches(self) -> List[Cache]:
        return self.neighborhood.visible()

    def cache_at(self, address: GridAddress) -> Optional[Cache]:
        return self.neighborhood.cache_at(address)

    def status(self) -> str:
        text = f"{self.points} points accumulated"
        if self.last_result is not None and self.last_result.ok:
            text += f" (last coin: {self.last_result.identity})"
        return text

    # ------------------------------------------------------------------
    # Movement
    # ------------------------------------------------------------------
    def move(self, direction: Direction) -> None:
        """Step one cell, landing on the centre of the neighbouring cell."""
        di, dj = direction.delta
        target = self.address.offset(di, dj)
        self._relocate(to_geo(target, self.world_settings).center)

    def move_to(self, lat: float, lng: float) -> None:
        """Jump to an absolute position, e.g. a sensor fix."""
        self._relocate(LatLng(lat, lng))

    def _relocate(self, position: LatLng) -> None:
        self.history.append(self.position)
        if len(self.history) > settings.MAX_HISTORY:
            del self.history[: len(self.history) - settings.MAX_HISTORY]
        self.position = position
        logger.debug("Player moved to %s (%f, %f)", self.address, position.lat, position.lng)
        self._refresh()
        self.save()

    def _refresh(self) -> None:
        self.neighborhood.regenerate(self.address)
        self.view.move_player(self.position, self.history)
        self.view.notify(self.status())

    # ------------------------------------------------------------------
    # Coin transfers
    # ------------------------------------------------------------------
    def collect(self, address: GridAddress) -> TransferResult:
        return self._transfer(address, self.transfer.collect)

    def deposit(self, address: GridAddress) -> TransferResult:
        return self._transfer(address, self.transfer.deposit)

    def _transfer(self, address: GridAddress, operation) -> TransferResult:
        cache = self.neighborhood.cache_at(address)
        if cache is None:
            raise KeyError(f"No visible cache at {address}")
        result = operation(cache)
        if result.ok:
            self.last_result = result
            self.save()
            self.view.update(cache)
            self.view.notify(self.status())
        return result


__all__ = ["Game"]
