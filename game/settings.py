# Settings for the game session

from pathlib import Path

# Where a fresh player starts: the Oakes College classroom, Santa Cruz.
PLAYER_START = (36.98949379578401, -122.06277128548504)

# Default location of the JSON save file
SAVE_FILE = Path("save.json")

# Save format version written alongside the data
SAVE_VERSION = "1.0"

# Keys used in the key-value store
STORAGE_KEYS = {
    "position": "playerPosition",
    "points": "points",
    "history": "movementHistory",
    "mementos": "cacheMementos",
    "coins": "playerCoins",
    "version": "version",
}

# Longest movement trail kept and persisted (oldest points are dropped first)
MAX_HISTORY = 1000
