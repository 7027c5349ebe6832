from __future__ import annotations

"""Configuration dataclass for the cache grid."""

from dataclasses import dataclass


@dataclass(frozen=True)
class WorldSettings:
    # Angular size of one grid cell, in degrees.
    tile_degrees: float = 1e-4
    # Chebyshev radius (in cells) of the neighborhood shown around the player.
    neighborhood_size: int = 8
    cache_spawn_probability: float = 0.1
    # Upper bound (exclusive) on the number of coins minted into a new cache.
    max_initial_coins: int = 100
    # Global origin of the grid; independent of where the player starts.
    origin_lat: float = 0.0
    origin_lng: float = 0.0

    def __post_init__(self) -> None:
        if self.tile_degrees <= 0:
            raise ValueError("tile_degrees must be positive")
        if self.neighborhood_size < 0:
            raise ValueError("neighborhood_size cannot be negative")
        if not 0.0 <= self.cache_spawn_probability <= 1.0:
            raise ValueError("cache_spawn_probability must lie in [0, 1]")
        if self.max_initial_coins < 0:
            raise ValueError("max_initial_coins cannot be negative")


__all__ = ["WorldSettings"]
