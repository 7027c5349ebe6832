from game.memento import MementoStore, encode_coins
from game.neighborhood import Neighborhood
from game.view import CacheView
from world import generation
from world.cells import CellRegistry
from world.coins import Coin
from world.grid import GridAddress
from world.settings import WorldSettings


def fake_luck(values, default=0.99):
    return lambda key: values.get(key, default)


class RecordingView(CacheView):
    def __init__(self):
        self.shown = []
        self.discarded = []

    def show(self, cache):
        self.shown.append(cache.address)

    def discard(self, address):
        self.discarded.append(address)


def make_neighborhood(radius=1, view=None):
    settings = WorldSettings(neighborhood_size=radius)
    mementos = MementoStore()
    return Neighborhood(settings, CellRegistry(settings), mementos, view), mementos


def test_spawn_worthy_addresses_are_generated_and_recorded(monkeypatch):
    monkeypatch.setattr(
        generation,
        "luck",
        fake_luck({"0,0": 0.05, "0,0,initialValue": 0.23, "1,-1": 0.01, "1,-1,initialValue": 0.5}),
    )
    hood, mementos = make_neighborhood()
    caches = hood.regenerate(GridAddress(0, 0))

    assert set(caches) == {GridAddress(0, 0), GridAddress(1, -1)}
    assert caches[GridAddress(0, 0)].value == 23
    assert caches[GridAddress(1, -1)].value == 50
    assert mementos.addresses() == [GridAddress(0, 0), GridAddress(1, -1)]


def test_regeneration_is_idempotent():
    settings = WorldSettings(neighborhood_size=4)
    mementos = MementoStore()
    hood = Neighborhood(settings, CellRegistry(settings), mementos)
    center = GridAddress(369894, -1220628)

    first = {a: list(c.coins) for a, c in hood.regenerate(center).items()}
    second = {a: list(c.coins) for a, c in hood.regenerate(center).items()}
    assert first == second


def test_memento_is_restored_instead_of_regenerating(monkeypatch):
    monkeypatch.setattr(generation, "luck", fake_luck({"0,0": 0.05, "0,0,initialValue": 0.23}))
    hood, mementos = make_neighborhood()
    mementos.set(GridAddress(0, 0), encode_coins([Coin(0, 0, 0), Coin(4, 4, 9)]))

    caches = hood.regenerate(GridAddress(0, 0))
    assert caches[GridAddress(0, 0)].coins == [Coin(0, 0, 0), Coin(4, 4, 9)]


def test_memento_wins_over_spawn_roll(monkeypatch):
    # (0, 1) would never spawn, but a memento exists there.
    monkeypatch.setattr(generation, "luck", fake_luck({}))
    hood, mementos = make_neighborhood()
    mementos.set(GridAddress(0, 1), encode_coins([Coin(0, 0, 3)]))

    caches = hood.regenerate(GridAddress(0, 0))
    assert list(caches) == [GridAddress(0, 1)]
    assert caches[GridAddress(0, 1)].coins == [Coin(0, 0, 3)]


def test_corrupt_memento_is_regenerated_fresh(monkeypatch):
    monkeypatch.setattr(generation, "luck", fake_luck({"0,0": 0.05, "0,0,initialValue": 0.23}))
    hood, mementos = make_neighborhood()
    mementos.set(GridAddress(0, 0), "{broken")

    caches = hood.regenerate(GridAddress(0, 0))
    assert caches[GridAddress(0, 0)].value == 23
    assert len(mementos.coins(GridAddress(0, 0))) == 23


def test_corrupt_memento_for_non_spawning_address_is_dropped(monkeypatch):
    monkeypatch.setattr(generation, "luck", fake_luck({}))
    hood, mementos = make_neighborhood()
    mementos.set(GridAddress(1, 1), "[[1]]")

    assert hood.regenerate(GridAddress(0, 0)) == {}
    assert not mementos.has(GridAddress(1, 1))


def test_previous_caches_are_discarded(monkeypatch):
    monkeypatch.setattr(
        generation,
        "luck",
        fake_luck({"0,0": 0.05, "0,0,initialValue": 0.23, "5,5": 0.05, "5,5,initialValue": 0.1}),
    )
    view = RecordingView()
    hood, _ = make_neighborhood(view=view)

    hood.regenerate(GridAddress(0, 0))
    assert view.shown == [GridAddress(0, 0)]

    caches = hood.regenerate(GridAddress(5, 5))
    assert view.discarded == [GridAddress(0, 0)]
    assert list(caches) == [GridAddress(5, 5)]
    assert hood.cache_at(GridAddress(0, 0)) is None


def test_cells_are_shared_across_regenerations(monkeypatch):
    monkeypatch.setattr(generation, "luck", fake_luck({"0,0": 0.05, "0,0,initialValue": 0.23}))
    hood, _ = make_neighborhood()
    first = hood.regenerate(GridAddress(0, 0))[GridAddress(0, 0)]
    second = hood.regenerate(GridAddress(0, 0))[GridAddress(0, 0)]
    assert first is not second
    assert first.cell is second.cell


def test_earlier_regeneration_result_survives_the_next_one(monkeypatch):
    monkeypatch.setattr(generation, "luck", fake_luck({"0,0": 0.05, "0,0,initialValue": 0.23}))
    hood, _ = make_neighborhood()

    before = hood.regenerate(GridAddress(0, 0))
    hood.regenerate(GridAddress(5, 5))

    assert set(before) == {GridAddress(0, 0)}
    assert before[GridAddress(0, 0)].value == 23
    assert hood.cache_at(GridAddress(0, 0)) is None
