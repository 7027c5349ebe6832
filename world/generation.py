from __future__ import annotations

"""
Deterministic cache generation.

Whether a cell holds a cache, and how many coins it starts with, is a pure
function of the cell address: both come from ``luck`` keyed by the address.
Generating the same address twice therefore mints identical coins, which lets
"never visited" and "restored from memento" be treated the same way.
"""

import math
from typing import List

from .coins import Coin
from .grid import GridAddress
from .luck import luck
from .settings import WorldSettings

INITIAL_VALUE_SUFFIX = "initialValue"


def should_spawn(address: GridAddress, settings: WorldSettings) -> bool:
    """Return True if a cache exists at ``address``."""
    return luck(address.key) < settings.cache_spawn_probability


def initial_coin_count(address: GridAddress, settings: WorldSettings) -> int:
    roll = luck(f"{address.key},{INITIAL_VALUE_SUFFIX}")
    return math.floor(roll * settings.max_initial_coins)


def generate_coins(address: GridAddress, settings: WorldSettings) -> List[Coin]:
    """
    Mint the initial coins of the cache at ``address``.

    Serials run from 0 upward in minting order, so the highest serial is on
    top of the stack.
    """
    count = initial_coin_count(address, settings)
    return [Coin(address.i, address.j, serial) for serial in range(count)]


__all__ = ["generate_coins", "initial_coin_count", "should_spawn"]
