"""HTTP surface tests via FastAPI's TestClient."""
import pytest
from fastapi.testclient import TestClient

from galaxy_genius.main import app
from galaxy_genius.services import puzzle_generator


@pytest.fixture
def client():
    return TestClient(app)


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["flow_templates"] == 10

    def test_root(self, client):
        assert client.get("/").json()["health"] == "/health"


class TestTemplates:
    def test_catalog(self, client):
        body = client.get("/api/v1/templates").json()
        assert body["flow"][0]["key"] == "add_sub"
        assert any(entry["key"] == "stars" for entry in body["puzzle"])


class TestFlowNext:
    def test_returns_item_and_history(self, client):
        response = client.post("/api/v1/flow/next", json={"rating": 1100, "seed": 7})
        assert response.status_code == 200
        body = response.json()
        item = body["item"]
        assert len(item["hints"]) == 3
        assert "shapeSignature" in item
        assert body["history"]["used_ids"] == [item["id"]]
        assert body["history"]["prev_difficulty"] == item["difficulty"]

    def test_seed_is_reproducible(self, client):
        first = client.post("/api/v1/flow/next", json={"rating": 1000, "seed": 3}).json()
        second = client.post("/api/v1/flow/next", json={"rating": 1000, "seed": 3}).json()
        assert first["item"]["id"] == second["item"]["id"]

    def test_history_round_trip(self, client):
        body = client.post("/api/v1/flow/next", json={"rating": 1000, "seed": 1}).json()
        again = client.post(
            "/api/v1/flow/next", json={"rating": 1000, "seed": 2, "history": body["history"]}
        ).json()
        assert len(again["history"]["used_ids"]) == 2
        assert again["item"]["id"] != body["item"]["id"]

    def test_allowed_templates_option(self, client):
        body = client.post(
            "/api/v1/flow/next", json={"rating": 1200, "seed": 5, "options": {"allowed_templates": ["ratio"]}}
        ).json()
        assert body["item"]["template"] == "ratio"

    def test_invalid_body(self, client):
        assert client.post("/api/v1/flow/next", json={"rating": "high"}).status_code == 422
        assert client.post("/api/v1/flow/next", json={}).status_code == 422


class TestPuzzleNext:
    def test_single_puzzle(self, client):
        body = client.post("/api/v1/puzzle/next", json={"rating": 1250, "seed": 4}).json()
        assert len(body["items"]) == 1
        puzzle = body["items"][0]
        assert len(puzzle["hint_ladder"]) == 3
        assert body["history"]["used_ids"] == [puzzle["id"]]

    def test_choices(self, client):
        body = client.post("/api/v1/puzzle/next", json={"rating": 1250, "seed": 4, "choices": 2}).json()
        ids = [puzzle["id"] for puzzle in body["items"]]
        assert len(set(ids)) == 2

    def test_choices_bounded(self, client):
        assert client.post("/api/v1/puzzle/next", json={"rating": 1250, "choices": 9}).status_code == 422

    def test_prev_difficulty_reaches_generator(self, client, monkeypatch):
        seen = []
        real = puzzle_generator.generate_adaptive_puzzle_item

        def spy(rating, used_ids, prev_difficulty=None, **kwargs):
            seen.append(prev_difficulty)
            return real(rating, used_ids, prev_difficulty, **kwargs)

        monkeypatch.setattr(puzzle_generator, "generate_adaptive_puzzle_item", spy)
        history = {"used_ids": ["stars-9"], "prev_difficulty": 1500}
        response = client.post(
            "/api/v1/puzzle/next", json={"rating": 1250, "seed": 4, "choices": 2, "history": history}
        )
        assert response.status_code == 200
        assert seen == [1500, 1500]


class TestRatingUpdate:
    def test_correct_answer_raises_rating(self, client):
        body = client.post(
            "/api/v1/rating/update",
            json={"rating": 1000, "difficulty": 1000, "correct": True, "correct_streak": 0},
        ).json()
        assert body["rating"] == 1004.0
        assert body["expected"] == 0.5
        assert body["tier"] == "Medium"

    def test_wrong_answer_lowers_rating(self, client):
        body = client.post(
            "/api/v1/rating/update", json={"rating": 1000, "difficulty": 900, "correct": False},
        ).json()
        assert body["rating"] < 1000

    def test_updated_rating_feeds_next_item(self, client):
        update = client.post(
            "/api/v1/rating/update", json={"rating": 1000, "difficulty": 1100, "correct": True},
        ).json()
        assert update["rating"] != int(update["rating"])

        flow = client.post("/api/v1/flow/next", json={"rating": update["rating"], "seed": 1})
        assert flow.status_code == 200
        puzzle = client.post("/api/v1/puzzle/next", json={"rating": update["rating"], "seed": 1})
        assert puzzle.status_code == 200

    def test_history_streak_drives_k_factor(self, client):
        body = client.post(
            "/api/v1/rating/update",
            json={"rating": 1000, "difficulty": 1000, "correct": True, "history": {"correct_streak": 4}},
        ).json()
        assert body["rating"] == 1006.0  # K = 12 at a streak of 4
        assert body["history"]["correct_streak"] == 5

        reset = client.post(
            "/api/v1/rating/update",
            json={"rating": 1000, "difficulty": 1000, "correct": False, "history": body["history"]},
        ).json()
        assert reset["history"]["correct_streak"] == 0

    def test_no_history_no_history_back(self, client):
        body = client.post(
            "/api/v1/rating/update", json={"rating": 1000, "difficulty": 1000, "correct": True},
        ).json()
        assert body["history"] is None


class TestBonusNext:
    def test_fraction_after_puzzle_segment(self, client):
        body = client.post(
            "/api/v1/bonus/next",
            json={"game_mode": "galaxy_mix", "last_segment": "puzzle", "rating": 1100.5, "seed": 3},
        ).json()
        challenge = body["challenge"]
        assert challenge["flavor"] == "fraction"
        assert challenge["answer"] in challenge["choices"]
        assert "shapeSignature" in challenge
        assert body["points_target"] == "puzzle"

    def test_rocket_rush(self, client):
        body = client.post(
            "/api/v1/bonus/next",
            json={"game_mode": "rocket_rush", "rating": 1100, "run_difficulties": [1000, 1050], "seed": 5},
        ).json()
        assert body["challenge"]["flavor"] == "fast_math"
        assert body["challenge"]["label"] in {"Hard", "Expert", "Master"}
        assert body["points_target"] == "fast_math"

    def test_unknown_mode_rejected(self, client):
        response = client.post("/api/v1/bonus/next", json={"game_mode": "warp", "rating": 1000})
        assert response.status_code == 422
