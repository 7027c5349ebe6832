"""Game package exposing the session and its building blocks."""

from .game import Game
from .memento import MementoError, MementoStore
from .models import Cache, Coin, PlayerInventory
from .neighborhood import Neighborhood
from .persistence import GameLoadError, GameSaveError, GameState, load_state, save_state
from .position import Direction, PositionWatcher
from .storage import JsonFileStore, KeyValueStore, MemoryStore
from .transfer import CoinTransfer, TransferResult, TransferStatus
from .view import CacheView

__all__ = [
    "Cache",
    "CacheView",
    "Coin",
    "CoinTransfer",
    "Direction",
    "Game",
    "GameLoadError",
    "GameSaveError",
    "GameState",
    "JsonFileStore",
    "KeyValueStore",
    "MementoError",
    "MementoStore",
    "MemoryStore",
    "Neighborhood",
    "PlayerInventory",
    "PositionWatcher",
    "TransferResult",
    "TransferStatus",
    "load_state",
    "save_state",
]
