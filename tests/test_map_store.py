"""Tests for the server-side map store."""

from py_gridmap.core.map_generator import MapGenerator, generate_map
from py_gridmap.core.map_store import MapStore


class TestMapStore:
    """Test map registry behaviour."""

    def setup_method(self):
        self.store = MapStore(MapGenerator(max_attempts=3))

    def test_generates_on_first_request(self):
        generated = self.store.get_or_generate("store-game", 20, 2)
        assert "store-game" in self.store
        assert len(self.store) == 1
        assert self.store.get("store-game") is generated

    def test_returns_stored_map(self):
        first = self.store.get_or_generate("store-game", 20, 2)
        second = self.store.get_or_generate("store-game", 20, 2)
        assert first is second

    def test_regenerates_on_parameter_change(self):
        first = self.store.get_or_generate("store-game", 20, 2)
        second = self.store.get_or_generate("store-game", 24, 2)
        assert second is not first
        assert second.size == 24
        assert self.store.get("store-game") is second
        assert len(self.store) == 1

    def test_players_joining_later_get_positions(self):
        lobby = self.store.get_or_generate("lobby", 20, 2)
        assert lobby.starting_positions == {}

        joined = self.store.get_or_generate("lobby", 20, 2, ["a", "b"])

        assert joined is not lobby
        assert set(joined.starting_positions) == {"a", "b"}
        assert (joined.grid.terrain == lobby.grid.terrain).all()
        for player, (x, y) in joined.starting_positions.items():
            assert joined.grid.owners[y, x] == player
        assert self.store.get_or_generate("lobby", 20, 2, ["a", "b"]) is joined

    def test_changed_players_do_not_inherit_owners(self):
        first = self.store.get_or_generate("owners", 20, 2, ["a", "b"])
        second = self.store.get_or_generate("owners", 20, 2, ["c", "d"])

        assert set(second.starting_positions) == {"c", "d"}
        owners = {owner for owner in second.grid.owners.ravel() if owner is not None}
        assert owners == {"c", "d"}
        assert set(first.starting_positions) == {"a", "b"}

    def test_put_replaces(self):
        first = generate_map("put-game", 20, 2)
        second = generate_map("put-game", 20, 2)
        self.store.put(first)
        self.store.put(second)
        assert self.store.get("put-game") is second

    def test_remove(self):
        self.store.get_or_generate("store-game", 20, 2)
        assert self.store.remove("store-game")
        assert not self.store.remove("store-game")
        assert self.store.get("store-game") is None

    def test_iteration_and_clear(self):
        self.store.get_or_generate("one", 20, 2)
        self.store.get_or_generate("two", 20, 2)
        assert self.store.game_ids() == ["one", "two"]
        assert [generated.game_id for generated in self.store] == ["one", "two"]
        self.store.clear()
        assert len(self.store) == 0
