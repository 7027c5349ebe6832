from __future__ import annotations

from .cells import Cell, CellRegistry
from .coins import Coin
from .generation import generate_coins, initial_coin_count, should_spawn
from .grid import (
    GeoBounds,
    GridAddress,
    InvalidCoordinateError,
    LatLng,
    to_geo,
    to_grid,
)
from .luck import luck
from .settings import WorldSettings

__all__ = [
    "Cell",
    "CellRegistry",
    "Coin",
    "GeoBounds",
    "GridAddress",
    "InvalidCoordinateError",
    "LatLng",
    "WorldSettings",
    "generate_coins",
    "initial_coin_count",
    "luck",
    "should_spawn",
    "to_geo",
    "to_grid",
]
