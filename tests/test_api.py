"""Tests for the map generation API."""

from fastapi.testclient import TestClient

from py_gridmap.api.main import app, store
from py_gridmap.core.grid import Terrain
from py_gridmap.core.lcg_prng import create_seed


class TestMapAPI:
    """Test the HTTP endpoints."""

    def setup_method(self):
        """Set up test client."""
        store.clear()
        self.client = TestClient(app)

    def teardown_method(self):
        store.clear()

    def test_root(self):
        response = self.client.get("/")
        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "Grid Map Generator API"
        assert data["status"] == "running"

    def test_health(self):
        response = self.client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "stored_maps": 0}

    def test_terrain(self):
        response = self.client.get("/terrain")
        assert response.status_code == 200
        data = response.json()
        assert [entry["id"] for entry in data] == [kind.label for kind in Terrain]
        water = next(entry for entry in data if entry["id"] == "water")
        assert water["movement_cost"]["ground"] == -1

    def test_generate_map(self):
        response = self.client.post(
            "/maps/generate",
            json={"game_id": "demo-game", "size": 20, "player_count": 2, "player_ids": ["a", "b"]},
        )
        assert response.status_code == 200
        data = response.json()
        assert data["game_id"] == "demo-game"
        assert data["seed"] == create_seed("demo-game")
        assert data["validation"]["valid"] is True
        assert len(data["grid"]) == 20
        assert set(data["starting_positions"]) == {"a", "b"}

    def test_generate_is_idempotent(self):
        body = {"game_id": "same-game", "size": 20, "player_count": 2}
        first = self.client.post("/maps/generate", json=body).json()
        second = self.client.post("/maps/generate", json=body).json()
        assert first["generated_at"] == second["generated_at"]
        assert first["grid"] == second["grid"]

    def test_players_joining_after_generation(self):
        body = {"game_id": "lobby", "size": 20, "player_count": 2}
        first = self.client.post("/maps/generate", json=body).json()
        assert first["starting_positions"] == {}

        joined = self.client.post("/maps/generate", json={**body, "player_ids": ["a", "b"]}).json()

        assert set(joined["starting_positions"]) == {"a", "b"}
        assert joined["player_ids"] == ["a", "b"]
        for player, (x, y) in joined["starting_positions"].items():
            assert joined["grid"][y][x]["owner"] == player
        terrain = [[tile["terrain"] for tile in row] for row in joined["grid"]]
        assert terrain == [[tile["terrain"] for tile in row] for row in first["grid"]]

    def test_regenerate(self):
        body = {"game_id": "again", "size": 20, "player_count": 2}
        first = self.client.post("/maps/generate", json=body).json()
        second = self.client.post("/maps/generate", json={**body, "regenerate": True}).json()
        assert first["grid"] == second["grid"]
        assert second["generated_at"] >= first["generated_at"]

    def test_generate_rejects_out_of_range(self):
        assert self.client.post("/maps/generate", json={"game_id": "g", "size": 5}).status_code == 422
        assert self.client.post("/maps/generate", json={"game_id": "g", "player_count": 99}).status_code == 422
        assert self.client.post("/maps/generate", json={"game_id": ""}).status_code == 422

    def test_generate_rejects_blank_id(self):
        response = self.client.post("/maps/generate", json={"game_id": "   ", "size": 20})
        assert response.status_code == 422

    def test_list_and_get(self):
        self.client.post("/maps/generate", json={"game_id": "listed", "size": 20, "player_count": 2})

        response = self.client.get("/maps")
        assert response.status_code == 200
        summaries = response.json()
        assert len(summaries) == 1
        assert summaries[0]["game_id"] == "listed"
        assert summaries[0]["size"] == 20

        response = self.client.get("/maps/listed", params={"include_grid": False})
        assert response.status_code == 200
        assert "grid" not in response.json()

        response = self.client.get("/maps/listed/validation")
        assert response.status_code == 200
        assert set(response.json()) == {"valid", "issues", "stats"}

    def test_missing_map(self):
        assert self.client.get("/maps/nope").status_code == 404
        assert self.client.get("/maps/nope/validation").status_code == 404
        assert self.client.delete("/maps/nope").status_code == 404

    def test_delete(self):
        self.client.post("/maps/generate", json={"game_id": "doomed", "size": 20, "player_count": 2})
        response = self.client.delete("/maps/doomed")
        assert response.status_code == 200
        assert response.json() == {"game_id": "doomed", "deleted": True}
        assert self.client.get("/maps/doomed").status_code == 404
