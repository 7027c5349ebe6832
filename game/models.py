from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from world.cells import Cell
from world.coins import Coin
from world.grid import GridAddress
from .memento import decode_coins, encode_coins


@dataclass
class Cache:
    """
    Working copy of the coins held at one cell.

    ``coins`` is a stack: the last element is the most recently deposited coin
    and the first one to be collected.
    """

    cell: Cell
    coins: List[Coin] = field(default_factory=list)

    @property
    def address(self) -> GridAddress:
        return self.cell.address

    @property
    def value(self) -> int:
        return len(self.coins)

    @property
    def is_empty(self) -> bool:
        return not self.coins

    def push(self, coin: Coin) -> None:
        self.coins.append(coin)

    def pop(self) -> Optional[Coin]:
        return self.coins.pop() if self.coins else None

    def peek(self) -> Optional[Coin]:
        return self.coins[-1] if self.coins else None

    def to_memento(self) -> str:
        return encode_coins(self.coins)

    @classmethod
    def from_memento(cls, cell: Cell, snapshot: str) -> "Cache":
        """Raises MementoError if ``snapshot`` cannot be decoded."""
        return cls(cell=cell, coins=decode_coins(snapshot))

    def __repr__(self) -> str:
        return f"Cache({self.address.i}, {self.address.j}, value={self.value})"


@dataclass
class PlayerInventory:
    """The player's coins, stack-ordered like a cache."""

    coins: List[Coin] = field(default_factory=list)

    @property
    def points(self) -> int:
        return len(self.coins)

    @property
    def is_empty(self) -> bool:
        return not self.coins

    def push(self, coin: Coin) -> None:
        self.coins.append(coin)

    def pop(self) -> Optional[Coin]:
        return self.coins.pop() if self.coins else None

    def replace(self, coins: Iterable[Coin]) -> None:
        self.coins = list(coins)

    def clear(self) -> None:
        self.coins.clear()

    def identities(self) -> List[str]:
        return [coin.identity for coin in self.coins]


__all__ = ["Cache", "Coin", "PlayerInventory"]
