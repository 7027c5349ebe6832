from __future__ import annotations

"""
Durable snapshots of cache contents.

The ``MementoStore`` maps each visited grid address to a JSON snapshot of the
coins its cache currently holds. It, not the in-memory ``Cache`` objects, is
the source of truth: caches are thrown away on every neighborhood regeneration
and rebuilt from here.
"""

import json
import logging
from typing import Any, Dict, Iterable, Iterator, List

from world.coins import Coin
from world.grid import GridAddress

# -----------------------------------------------------------------------------
# Custom Exceptions
# -----------------------------------------------------------------------------
class MementoError(ValueError):
    """Raised when a snapshot cannot be decoded into coins."""


# -----------------------------------------------------------------------------
# Snapshot encoding
# -----------------------------------------------------------------------------
def encode_coins(coins: Iterable[Coin]) -> str:
    """Serialize coins, bottom of the stack first, as ``[[i, j, serial], ...]``."""
    return json.dumps([coin.to_json() for coin in coins], separators=(",", ":"))


def decode_coins(snapshot: str) -> List[Coin]:
    """
    Inverse of ``encode_coins``.

    Raises:
        MementoError if the snapshot is not valid JSON or holds a malformed coin.
    """
    try:
        raw = json.loads(snapshot)
    except (TypeError, json.JSONDecodeError) as e:
        raise MementoError(f"Unreadable cache snapshot: {e}") from e
    if not isinstance(raw, list):
        raise MementoError("Cache snapshot must be a list of coins")
    try:
        return [Coin.from_json(entry) for entry in raw]
    except ValueError as e:
        raise MementoError(str(e)) from e


# -----------------------------------------------------------------------------
# Store
# -----------------------------------------------------------------------------
class MementoStore:
    """
    Ordered mapping from ``GridAddress`` to cache snapshot.

    Insertion order is preserved so the persisted record list is stable.
    """

    def __init__(self) -> None:
        self._records: Dict[GridAddress, str] = {}

    def has(self, address: GridAddress) -> bool:
        return address in self._records

    def get(self, address: GridAddress) -> str:
        """Return the snapshot for ``address``. Raises KeyError if none exists."""
        return self._records[address]

    def set(self, address: GridAddress, snapshot: str) -> None:
        self._records[address] = snapshot

    def discard(self, address: GridAddress) -> None:
        self._records.pop(address, None)

    def clear(self) -> None:
        self._records.clear()

    def addresses(self) -> List[GridAddress]:
        return list(self._records)

    def coins(self, address: GridAddress) -> List[Coin]:
        """Decoded coins stored for ``address`` (see ``decode_coins``)."""
        return decode_coins(self.get(address))

    def __contains__(self, address: object) -> bool:
        return address in self._records

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[GridAddress]:
        return iter(self._records)

    # Persistence ------------------------------------------------------------
    def to_records(self) -> List[List[Any]]:
        """Return ``[[i, j, snapshot], ...]`` in insertion order."""
        return [[addr.i, addr.j, snapshot] for addr, snapshot in self._records.items()]

    @classmethod
    def from_records(cls, records: Any) -> "MementoStore":
        """
        Rebuild a store from ``to_records`` output.

        Records with a bad address or an undecodable snapshot are skipped with a
        warning; those addresses will be regenerated as if never visited.
        """
        store = cls()
        if not isinstance(records, list):
            if records is not None:
                logging.warning("Cache mementos are not a list; ignoring %r", type(records).__name__)
            return store

        for entry in records:
            if not isinstance(entry, list) or len(entry) != 3:
                logging.warning(f"Skipping invalid memento record: {entry!r}")
                continue
            i, j, snapshot = entry
            try:
                address = GridAddress(i, j)
                decode_coins(snapshot)
            except (TypeError, MementoError) as e:
                logging.warning(f"Skipping corrupt memento for ({i}, {j}): {e}")
                continue
            store.set(address, snapshot)
        return store


__all__ = ["MementoError", "MementoStore", "decode_coins", "encode_coins"]
