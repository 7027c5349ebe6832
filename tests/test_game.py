import random

import pytest

from game.game import Game
from game.position import Direction
from game.storage import MemoryStore
from game.transfer import TransferStatus
from game import settings
from world import generation
from world.coins import Coin
from world.grid import GridAddress
from world.settings import WorldSettings

ORIGIN_CELL = GridAddress(0, 0)


class CountingStore(MemoryStore):
    def __init__(self):
        super().__init__()
        self.writes = 0

    def save_many(self, items):
        self.writes += 1
        super().save_many(items)


@pytest.fixture
def scenario_game(monkeypatch):
    """
    Game starting inside cell (0, 0), where the only cache in the world holds
    23 coins: luck("0,0") = 0.05 spawns and floor(0.23 * 100) = 23.
    """
    values = {"0,0": 0.05, "0,0,initialValue": 0.23}
    monkeypatch.setattr(generation, "luck", lambda key: values.get(key, 0.99))
    monkeypatch.setattr(settings, "PLAYER_START", (0.00005, 0.00005))
    store = CountingStore()
    game = Game(WorldSettings(neighborhood_size=1), store=store)
    game.begin()
    return game, store


def total_coins(game):
    held = list(game.inventory.coins)
    for address in game.mementos:
        held.extend(game.mementos.coins(address))
    return held


def test_scenario_collect_then_deposit(scenario_game):
    game, _ = scenario_game
    assert game.address == ORIGIN_CELL
    cache = game.cache_at(ORIGIN_CELL)
    assert cache.value == 23

    collected = game.collect(ORIGIN_CELL)
    assert collected.coin == Coin(0, 0, 22)
    assert cache.value == 22
    assert game.points == 1

    deposited = game.deposit(ORIGIN_CELL)
    assert deposited.coin == Coin(0, 0, 22)
    assert cache.value == 23
    assert game.points == 0
    assert cache.coins == [Coin(0, 0, s) for s in range(23)]


def test_moving_away_and_back_restores_memento(scenario_game):
    game, _ = scenario_game
    game.collect(ORIGIN_CELL)

    game.move(Direction.NORTH)
    game.move(Direction.NORTH)
    assert game.address == GridAddress(2, 0)
    assert game.cache_at(ORIGIN_CELL) is None

    game.move(Direction.SOUTH)
    game.move(Direction.SOUTH)
    assert game.address == ORIGIN_CELL
    assert game.cache_at(ORIGIN_CELL).value == 22
    assert game.points == 1


def test_transfers_persist_before_returning(scenario_game):
    game, store = scenario_game
    writes = store.writes
    game.collect(ORIGIN_CELL)
    assert store.writes == writes + 1
    assert store.load(settings.STORAGE_KEYS["coins"]) == "[[0,0,22]]"


def test_empty_transfers_do_not_write(scenario_game):
    game, store = scenario_game
    writes = store.writes
    result = game.deposit(ORIGIN_CELL)
    assert result.status is TransferStatus.EMPTY
    assert store.writes == writes


def test_transfer_on_invisible_cache_raises(scenario_game):
    game, _ = scenario_game
    with pytest.raises(KeyError):
        game.collect(GridAddress(7, 7))


def test_conservation_under_random_transfers(monkeypatch):
    monkeypatch.setattr(settings, "PLAYER_START", (36.98949379578401, -122.06277128548504))
    game = Game(WorldSettings())
    game.begin()
    rng = random.Random(1234)

    minted = sorted(total_coins(game), key=lambda c: (c.origin_i, c.origin_j, c.serial))
    assert minted, "expected at least one cache near the start"

    for step in range(300):
        if step % 50 == 49:
            game.move(rng.choice(list(Direction)))
            minted = sorted(
                set(minted) | set(total_coins(game)),
                key=lambda c: (c.origin_i, c.origin_j, c.serial),
            )
        caches = game.caches
        if not caches:
            continue
        cache = rng.choice(caches)
        if rng.random() < 0.5:
            game.collect(cache.address)
        else:
            game.deposit(cache.address)

        held = total_coins(game)
        assert len(held) == len(set(held))
        assert sorted(held, key=lambda c: (c.origin_i, c.origin_j, c.serial)) == minted


def test_regeneration_keeps_flyweight_cells(scenario_game):
    game, _ = scenario_game
    cell = game.cache_at(ORIGIN_CELL).cell
    game.move(Direction.EAST)
    game.move(Direction.WEST)
    assert game.cache_at(ORIGIN_CELL).cell is cell
    assert game.cells.get(0, 0) is cell


def test_move_records_history(scenario_game):
    game, _ = scenario_game
    start = game.position
    game.move(Direction.EAST)
    game.move_to(0.00015, 0.00015)
    assert len(game.history) == 2
    assert game.history[0] == start
    assert game.history[1].lat == pytest.approx(0.00005)
    assert game.history[1].lng == pytest.approx(0.00015)
    assert game.address == GridAddress(1, 1)


def test_status_mentions_last_coin(scenario_game):
    game, _ = scenario_game
    assert game.status() == "0 points accumulated"
    game.collect(ORIGIN_CELL)
    assert game.status() == "1 points accumulated (last coin: 0:0#22)"


def test_reset_forgets_everything(scenario_game):
    game, store = scenario_game
    game.collect(ORIGIN_CELL)
    game.move(Direction.NORTH)

    game.reset()

    assert game.points == 0
    assert game.history == []
    assert game.address == ORIGIN_CELL
    assert game.cache_at(ORIGIN_CELL).value == 23
    assert store.load(settings.STORAGE_KEYS["coins"]) == "[]"


def test_independent_sessions_share_nothing(scenario_game):
    game, _ = scenario_game
    game.collect(ORIGIN_CELL)

    other = Game(WorldSettings(neighborhood_size=1))
    other.begin()
    assert other.cache_at(ORIGIN_CELL).value == 23
    assert other.cells.get(0, 0) is not game.cells.get(0, 0)
