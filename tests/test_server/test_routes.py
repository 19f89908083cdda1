"""
Tests for the HTTP API.

The router keeps one table per process, so every test starts from a
reset game.
"""

import pytest
from fastapi.testclient import TestClient

from pokersim import __version__
from pokersim.config import AdviceSettings
from pokersim.server.app import app
from pokersim.server.routes import get_advice_service
from pokersim.services.advice import AdviceService, FALLBACK_ADVICE


@pytest.fixture
def client():
    with TestClient(app) as client:
        client.post("/reset_game")
        yield client
        client.post("/reset_game")
    app.dependency_overrides.clear()


@pytest.fixture
def table(client):
    """Three seats, seeded deals, human on seat 0."""
    response = client.post("/init_game", json={"player_count": 3, "seed": 3})
    assert response.status_code == 200
    return client


def state_of(client):
    return client.get("/get_game_state").json()


class TestSetup:
    """Creating and resetting the table."""

    def test_index(self, client):
        assert client.get("/").json() == {"name": "pokersim", "version": __version__}

    def test_init_game(self, client):
        response = client.post("/init_game", json={"player_count": 4, "difficulty": "hard"})
        data = response.json()
        assert data["success"]
        assert data["player_count"] == 4
        assert data["difficulty"] == "Hard"

        public = state_of(client)["public_info"]
        assert public["phase"] == "WAITING"
        assert [p["name"] for p in public["players"]][0] == "You"
        assert all(p["chips"] == 1000 for p in public["players"])

    def test_init_rejects_unknown_difficulty(self, client):
        response = client.post("/init_game", json={"difficulty": "insane"})
        assert response.status_code == 400

    def test_init_rejects_bad_blinds(self, client):
        response = client.post("/init_game", json={"small_blind": 50, "big_blind": 20})
        assert response.status_code == 400

    @pytest.mark.parametrize("count", [1, 11])
    def test_init_validates_player_count(self, client, count):
        response = client.post("/init_game", json={"player_count": count})
        assert response.status_code == 422

    def test_requires_game(self, client):
        assert client.get("/get_game_state").status_code == 400
        assert client.post("/start_hand").status_code == 400

    def test_reset(self, table):
        assert table.post("/reset_game").json()["success"]
        assert table.get("/get_game_state").status_code == 400


class TestHands:
    """Starting hands and acting."""

    def test_start_hand(self, table):
        data = table.post("/start_hand", json={"dealer_index": 0}).json()
        assert data["success"]
        assert data["hand_number"] == 1

        state = state_of(table)
        assert state["public_info"]["phase"] == "PREFLOP"
        assert state["public_info"]["pot"] == 30
        assert len(state["private_info"]["hand"]) == 2
        assert state["private_info"]["is_turn"]
        assert state["private_info"]["chips_to_call"] == 20
        assert state["private_info"]["min_raise_to"] == 40

    def test_bot_cards_hidden(self, table):
        table.post("/start_hand", json={"dealer_index": 0})
        players = state_of(table)["public_info"]["players"]
        assert "cards" in players[0]
        assert all("cards" not in p for p in players[1:])

    def test_start_hand_twice(self, table):
        table.post("/start_hand", json={"dealer_index": 0})
        assert table.post("/start_hand").status_code == 400

    def test_invalid_dealer(self, table):
        assert table.post("/start_hand", json={"dealer_index": 5}).status_code == 400

    def test_legal_actions(self, table):
        assert table.get("/legal_actions").json()["actions"] == []

        table.post("/start_hand", json={"dealer_index": 0})
        actions = table.get("/legal_actions").json()["actions"]
        assert [a["type"] for a in actions] == ["FOLD", "CALL", "RAISE", "ALL_IN"]
        assert actions[2]["min"] == 40
        assert actions[2]["max"] == 1000

    def test_call_then_not_your_turn(self, table):
        table.post("/start_hand", json={"dealer_index": 0})

        data = table.post("/take_action", json={"action_type": "call"}).json()
        assert data["success"]
        assert data["action_type"] == "CALL"
        assert data["amount"] == 20

        data = table.post("/take_action", json={"action_type": "CHECK"}).json()
        assert data == {"error": "Not your turn"}

    def test_raise_below_minimum(self, table):
        table.post("/start_hand", json={"dealer_index": 0})
        data = table.post("/take_action", json={"action_type": "RAISE", "amount": 30}).json()
        assert "Minimum raise is to $40" in data["error"]

    def test_invalid_action_type(self, table):
        table.post("/start_hand", json={"dealer_index": 0})
        response = table.post("/take_action", json={"action_type": "BET", "amount": 40})
        assert response.status_code == 400

    def test_fold_ends_heads_up_hand(self, client):
        client.post("/init_game", json={"player_count": 2, "seed": 1})
        client.post("/start_hand", json={"dealer_index": 0})

        data = client.post("/take_action", json={"action_type": "FOLD"}).json()
        assert data["success"]
        assert data["winners"] == [{"id": 1, "won": 30, "hand_name": "Opponents Folded", "stack": 1010}]
        assert [p["id"] for p in data["players_cards"]] == [1]
        assert data["pot"] == 30
        assert data["board"] == []

        public = state_of(client)["public_info"]
        assert public["phase"] == "SHOWDOWN"
        assert public["winners"][0]["player_id"] == 1

    def test_next_hand_moves_button(self, client):
        client.post("/init_game", json={"player_count": 2, "seed": 1})
        client.post("/start_hand", json={"dealer_index": 0})
        client.post("/take_action", json={"action_type": "FOLD"})

        data = client.post("/start_hand").json()
        assert data["hand_number"] == 2
        assert state_of(client)["public_info"]["dealer_index"] == 1


class TestPacing:
    """Client-paced bots and runouts."""

    def test_idle_while_human_to_act(self, table):
        table.post("/start_hand", json={"dealer_index": 0})
        data = table.post("/proceed").json()
        assert data["step"] == "idle"

    def test_idle_without_hand(self, table):
        assert table.post("/proceed").json()["step"] == "idle"

    def test_bots_play_until_human_turn(self, table):
        # Button on seat 2: the bot on the button opens
        table.post("/start_hand", json={"dealer_index": 2})

        steps = []
        for _ in range(50):
            data = table.post("/proceed").json()
            steps.append(data["step"])
            if data["step"] == "idle":
                break

        assert steps[0] == "bot_action"
        assert steps[-1] == "idle"
        state = state_of(table)
        if state["public_info"]["phase"] != "SHOWDOWN":
            assert state["private_info"]["is_turn"]

    def test_runout_steps(self, client):
        client.post("/init_game", json={"player_count": 2, "seed": 1})
        client.post("/start_hand", json={"dealer_index": 0})

        # Human shoves from the small blind, the bot seat is driven directly
        assert client.post("/take_action", json={"action_type": "ALL_IN"}).json()["success"]
        data = client.post("/take_action", json={"action_type": "CALL", "player_id": 1}).json()
        assert data["success"]

        public = state_of(client)["public_info"]
        assert public["phase"] == "FLOP"
        assert len(public["board"]) == 3

        steps = [client.post("/proceed").json()["step"] for _ in range(4)]
        assert steps == ["runout", "runout", "runout", "idle"]

        public = state_of(client)["public_info"]
        assert public["phase"] == "SHOWDOWN"
        assert len(public["board"]) == 5
        assert sum(p["chips"] for p in public["players"]) == 2000


class TestDifficultyAndAdvice:
    """Table settings and the coach."""

    def test_set_difficulty(self, table):
        data = table.post("/difficulty", json={"level": "easy"}).json()
        assert data == {"success": True, "difficulty": "Easy"}
        assert state_of(table)["public_info"]["difficulty"] == "Easy"

    def test_unknown_difficulty(self, table):
        assert table.post("/difficulty", json={"level": "nightmare"}).status_code == 400

    def test_advice_falls_back_without_key(self, table):
        app.dependency_overrides[get_advice_service] = lambda: AdviceService(AdviceSettings())
        table.post("/start_hand", json={"dealer_index": 0})

        response = table.post("/advice")
        assert response.status_code == 200
        assert response.json() == {"advice": FALLBACK_ADVICE}

        # Advice never changes the game
        assert state_of(table)["public_info"]["pot"] == 30
