from __future__ import annotations

"""
Deterministic pseudo-randomness keyed by strings.

The same key always yields the same value, on every run and every machine,
which is what keeps the cache world identical between sessions. Python's
built-in ``hash()`` is salted per process and must not be used here.
"""

import hashlib

# 53 bits fit a float mantissa exactly, so the result never rounds up to 1.0.
_BITS = 53
_SCALE = float(2 ** _BITS)


def luck(key: str) -> float:
    """Map ``key`` to a reproducible float in [0.0, 1.0)."""
    digest = hashlib.blake2b(key.encode("utf-8"), digest_size=8).digest()
    return (int.from_bytes(digest, "big") >> (64 - _BITS)) / _SCALE


__all__ = ["luck"]
