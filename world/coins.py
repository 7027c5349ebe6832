from __future__ import annotations

"""Coin tokens minted into caches."""

from dataclasses import dataclass
from typing import List

from .grid import GridAddress


@dataclass(frozen=True)
class Coin:
    """
    A single coin, identified by the cell it was minted in and its serial.

    Coins never change once minted; transfers only move them between the
    stacks that hold them.
    """

    origin_i: int
    origin_j: int
    serial: int

    @property
    def origin(self) -> GridAddress:
        return GridAddress(self.origin_i, self.origin_j)

    @property
    def identity(self) -> str:
        """Display and lookup key, e.g. ``"369894:-1220628#7"``."""
        return f"{self.origin_i}:{self.origin_j}#{self.serial}"

    def to_json(self) -> List[int]:
        return [self.origin_i, self.origin_j, self.serial]

    @classmethod
    def from_json(cls, data: object) -> "Coin":
        """
        Rebuild a coin from ``[i, j, serial]``.

        Raises:
            ValueError if ``data`` is not a list of three integers.
        """
        if (
            not isinstance(data, (list, tuple))
            or len(data) != 3
            or not all(type(v) is int for v in data)
        ):
            raise ValueError(f"Invalid coin entry: {data!r}")
        return cls(data[0], data[1], data[2])

    def __str__(self) -> str:
        return self.identity


__all__ = ["Coin"]
