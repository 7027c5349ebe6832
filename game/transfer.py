from __future__ import annotations

"""
Coin transfers between caches and the player.

Both directions move exactly one coin, top of stack to top of stack, so a
collect followed by a deposit on the same cache restores the previous state
exactly. Each transfer writes the cache's memento before returning.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from world.coins import Coin
from .memento import MementoStore
from .models import Cache, PlayerInventory

logger = logging.getLogger("geocoin.transfer")


class TransferStatus(Enum):
    TRANSFERRED = "transferred"
    # Source stack was empty; nothing changed and nothing was written.
    EMPTY = "empty"


@dataclass(frozen=True)
class TransferResult:
    status: TransferStatus
    coin: Optional[Coin] = None

    @property
    def ok(self) -> bool:
        return self.status is TransferStatus.TRANSFERRED

    @property
    def identity(self) -> Optional[str]:
        return self.coin.identity if self.coin is not None else None

    @classmethod
    def empty(cls) -> "TransferResult":
        return cls(TransferStatus.EMPTY)


class CoinTransfer:
    """Moves coins between ``inventory`` and caches, recording into ``mementos``."""

    def __init__(self, inventory: PlayerInventory, mementos: MementoStore) -> None:
        self.inventory = inventory
        self.mementos = mementos

    def collect(self, cache: Cache) -> TransferResult:
        """Move the top coin of ``cache`` to the player."""
        coin = cache.pop()
        if coin is None:
            logger.debug("Collect from %s skipped: cache is empty", cache.address)
            return TransferResult.empty()
        self.inventory.push(coin)
        self.mementos.set(cache.address, cache.to_memento())
        logger.debug("Collected %s from %s", coin.identity, cache.address)
        return TransferResult(TransferStatus.TRANSFERRED, coin)

    def deposit(self, cache: Cache) -> TransferResult:
        """Move the player's top coin into ``cache``."""
        coin = self.inventory.pop()
        if coin is None:
            logger.debug("Deposit into %s skipped: inventory is empty", cache.address)
            return TransferResult.empty()
        cache.push(coin)
        self.mementos.set(cache.address, cache.to_memento())
        logger.debug("Deposited %s into %s", coin.identity, cache.address)
        return TransferResult(TransferStatus.TRANSFERRED, coin)


__all__ = ["CoinTransfer", "TransferResult", "TransferStatus"]
