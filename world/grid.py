from __future__ import annotations

"""
Grid addressing for the cache world.

Geographic positions are mapped onto an axis-aligned grid of square cells
anchored at a fixed global origin (``WorldSettings.origin_lat/lng``), so a cell
address never depends on where the player happened to start.
"""

import math
from dataclasses import dataclass
from typing import Iterator

from .settings import WorldSettings


# ─────────────────────────────────────────────────────────────────────────────
# == CUSTOM EXCEPTIONS ==

class InvalidCoordinateError(ValueError):
    """Raised when a provided coordinate is not a finite (lat, lng) pair."""


# ─────────────────────────────────────────────────────────────────────────────
# == VALUE TYPES ==

@dataclass(frozen=True, order=True)
class GridAddress:
    """
    Integer address (i, j) of one grid cell.

    ``i`` counts cells along latitude, ``j`` along longitude. Equality and
    hashing are structural, so addresses are safe dictionary keys.
    """

    i: int
    j: int

    def __post_init__(self) -> None:
        if type(self.i) is not int or type(self.j) is not int:
            raise TypeError(f"GridAddress requires ints, got ({self.i!r}, {self.j!r})")

    @property
    def key(self) -> str:
        """Canonical ``"i,j"`` label, also the input of the spawn hash."""
        return f"{self.i},{self.j}"

    def offset(self, di: int, dj: int) -> "GridAddress":
        return GridAddress(self.i + di, self.j + dj)

    def chebyshev(self, other: "GridAddress") -> int:
        return max(abs(self.i - other.i), abs(self.j - other.j))

    def neighborhood(self, radius: int) -> Iterator["GridAddress"]:
        """Yield every address within ``radius`` (inclusive), row-major."""
        for di in range(-radius, radius + 1):
            for dj in range(-radius, radius + 1):
                yield GridAddress(self.i + di, self.j + dj)

    @classmethod
    def parse(cls, text: str) -> "GridAddress":
        """Parse an ``"i,j"`` label back into an address."""
        try:
            i_str, j_str = text.split(",")
            return cls(int(i_str), int(j_str))
        except (AttributeError, ValueError) as e:
            raise InvalidCoordinateError(f"Invalid grid address: {text!r}") from e

    def __str__(self) -> str:
        return self.key


@dataclass(frozen=True)
class LatLng:
    lat: float
    lng: float

    def __post_init__(self) -> None:
        if not (math.isfinite(self.lat) and math.isfinite(self.lng)):
            raise InvalidCoordinateError(f"Non-finite coordinate: ({self.lat}, {self.lng})")


@dataclass(frozen=True)
class GeoBounds:
    """Rectangle covered by one cell. Half-open on the north and east edges."""

    south: float
    west: float
    north: float
    east: float

    def contains(self, lat: float, lng: float) -> bool:
        return self.south <= lat < self.north and self.west <= lng < self.east

    @property
    def center(self) -> LatLng:
        return LatLng((self.south + self.north) / 2, (self.west + self.east) / 2)


# ─────────────────────────────────────────────────────────────────────────────
# == CONVERSIONS ==

def to_grid(lat: float, lng: float, settings: WorldSettings) -> GridAddress:
    """
    Return the address of the cell containing (lat, lng).

    ``math.floor`` rounds toward negative infinity, so cells south or west of
    the origin keep the same width as those north or east of it.
    """
    if not (math.isfinite(lat) and math.isfinite(lng)):
        raise InvalidCoordinateError(f"Non-finite coordinate: ({lat}, {lng})")
    tile = settings.tile_degrees
    i = _snap(math.floor((lat - settings.origin_lat) / tile), lat, settings.origin_lat, tile)
    j = _snap(math.floor((lng - settings.origin_lng) / tile), lng, settings.origin_lng, tile)
    return GridAddress(i, j)


def _snap(index: int, value: float, origin: float, tile: float) -> int:
    # Division can land one cell off near an edge; agree with to_geo's bounds.
    while value < origin + index * tile:
        index -= 1
    while value >= origin + (index + 1) * tile:
        index += 1
    return index


def to_geo(address: GridAddress, settings: WorldSettings) -> GeoBounds:
    """Return the bounding rectangle of the cell at ``address``."""
    tile = settings.tile_degrees
    return GeoBounds(
        south=settings.origin_lat + address.i * tile,
        west=settings.origin_lng + address.j * tile,
        north=settings.origin_lat + (address.i + 1) * tile,
        east=settings.origin_lng + (address.j + 1) * tile,
    )


__all__ = [
    "GeoBounds",
    "GridAddress",
    "InvalidCoordinateError",
    "LatLng",
    "to_geo",
    "to_grid",
]
