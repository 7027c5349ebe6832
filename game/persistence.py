from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, TYPE_CHECKING

from world.coins import Coin
from world.grid import InvalidCoordinateError, LatLng
from .memento import MementoStore, encode_coins
from . import settings

if TYPE_CHECKING:
    from .storage import KeyValueStore


# -----------------------------------------------------------------------------
# Custom Exceptions
# -----------------------------------------------------------------------------
class GameSaveError(Exception):
    """Exception raised when saving the game state fails."""


class GameLoadError(Exception):
    """Exception raised when loading the game state fails."""


# -----------------------------------------------------------------------------
# Data Classes
# -----------------------------------------------------------------------------
def _start_position() -> LatLng:
    return LatLng(*settings.PLAYER_START)


@dataclass
class GameState:
    position: LatLng = field(default_factory=_start_position)
    points: int = 0
    history: List[LatLng] = field(default_factory=list)
    mementos: MementoStore = field(default_factory=MementoStore)
    coins: List[Coin] = field(default_factory=list)
    version: str = settings.SAVE_VERSION


# -----------------------------------------------------------------------------
# Serialization / Deserialization Helpers
# -----------------------------------------------------------------------------
def serialize_position(position: LatLng) -> str:
    return json.dumps({"lat": position.lat, "lng": position.lng})


def deserialize_position(data: Any) -> Optional[LatLng]:
    """Parse a saved ``{"lat": ..., "lng": ...}`` object; None if invalid."""
    if not isinstance(data, dict):
        return None
    try:
        return LatLng(float(data["lat"]), float(data["lng"]))
    except (KeyError, ValueError, TypeError, InvalidCoordinateError):
        logging.warning(f"Invalid player position in save: {data!r}")
        return None


def serialize_history(history: List[LatLng]) -> str:
    return json.dumps([[p.lat, p.lng] for p in history])


def deserialize_history(data: Any) -> List[LatLng]:
    result: List[LatLng] = []
    if not isinstance(data, list):
        return result
    for entry in data:
        if isinstance(entry, list) and len(entry) == 2:
            try:
                result.append(LatLng(float(entry[0]), float(entry[1])))
                continue
            except (ValueError, TypeError, InvalidCoordinateError):
                pass
        logging.warning(f"Skipping invalid history entry: {entry!r}")
    return result


def deserialize_coins(data: Any) -> List[Coin]:
    """Parse the player's saved coin stack, skipping malformed entries."""
    result: List[Coin] = []
    if not isinstance(data, list):
        return result
    seen = set()
    for entry in data:
        try:
            coin = Coin.from_json(entry)
        except ValueError:
            logging.warning(f"Skipping invalid coin entry: {entry!r}")
            continue
        if coin in seen:
            logging.warning(f"Skipping duplicate coin {coin.identity} in inventory")
            continue
        seen.add(coin)
        result.append(coin)
    return result


def _decode(raw: Optional[str], key: str) -> Any:
    if raw is None:
        return None
    try:
        return json.loads(raw)
    except (TypeError, json.JSONDecodeError):
        logging.warning(f"Unreadable value for '{key}' in save; using default")
        return None


# -----------------------------------------------------------------------------
# Loading and Saving State
# -----------------------------------------------------------------------------
def load_state(store: "KeyValueStore") -> GameState:
    """
    Read the session state from ``store``.

    Missing keys fall back to defaults and malformed entries are skipped, so a
    damaged save degrades to partially fresh state instead of failing.

    Raises:
        GameLoadError: if the store itself cannot be read.
    """
    keys = settings.STORAGE_KEYS
    state = GameState()

    version = store.load(keys["version"])
    if version is not None:
        state.version = version

    position = deserialize_position(_decode(store.load(keys["position"]), keys["position"]))
    if position is not None:
        state.position = position

    state.history = deserialize_history(_decode(store.load(keys["history"]), keys["history"]))
    state.mementos = MementoStore.from_records(_decode(store.load(keys["mementos"]), keys["mementos"]))
    state.coins = deserialize_coins(_decode(store.load(keys["coins"]), keys["coins"]))

    # Points are derived from the inventory; the saved figure is only checked.
    saved_points = _decode(store.load(keys["points"]), keys["points"])
    if saved_points is not None and saved_points != len(state.coins):
        logging.warning(
            f"Saved points ({saved_points!r}) disagree with inventory size ({len(state.coins)}); using inventory"
        )
    state.points = len(state.coins)
    return state


def save_state(state: GameState, store: "KeyValueStore") -> None:
    """
    Persist ``state`` into ``store``.

    Raises:
        GameSaveError: if the store fails to write.
    """
    keys = settings.STORAGE_KEYS
    data: Dict[str, str] = {
        keys["version"]: state.version,
        keys["position"]: serialize_position(state.position),
        keys["points"]: json.dumps(len(state.coins)),
        keys["history"]: serialize_history(state.history),
        keys["mementos"]: json.dumps(state.mementos.to_records()),
        keys["coins"]: encode_coins(state.coins),
    }
    store.save_many(data)


__all__ = [
    "GameLoadError",
    "GameSaveError",
    "GameState",
    "deserialize_coins",
    "deserialize_history",
    "deserialize_position",
    "load_state",
    "save_state",
    "serialize_history",
    "serialize_position",
]
