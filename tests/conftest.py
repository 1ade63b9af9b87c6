"""Shared test fixtures and helpers."""

import random

import pytest

from board import Board
from models import Cell, PlayerState
from state import GameState, initialize_game

TEAM_A = 0
TEAM_B = 1


# --- Fixtures ---


@pytest.fixture
def game():
    """Fresh 8x8 generated game with two players (seed=42)."""
    return initialize_game(seed=42, size=8, num_players=2)


@pytest.fixture
def open_game():
    """10x10 all-Open board, no kings, two empty queues."""
    return make_game_state()


@pytest.fixture
def rng():
    """Deterministic RNG seeded at 42."""
    return random.Random(42)


@pytest.fixture
def api_client():
    """Flask test client."""
    from app import app

    app.config["TESTING"] = True
    with app.test_client() as client:
        yield client


# --- Helper functions ---


def make_game_state(size=10, num_players=2, cells=None):
    """Create a game state on an all-Open board with the given cells placed.

    `cells` maps (x, y) to a Cell.
    """
    board = Board.empty(size)
    for (x, y), cell in (cells or {}).items():
        board.set(x, y, cell)
    return GameState(
        board=board,
        player_states=[PlayerState() for _ in range(num_players)],
    )


def make_combat_state(target):
    """Team A holds (4, 5) with 11 units (10 movable); `target` sits at (5, 5)."""
    return make_game_state(cells={
        (4, 5): Cell.captured(TEAM_A, 11),
        (5, 5): target,
    })


def create_api_game(client, seed=42, size=8, num_players=2):
    """Create a new game via API, return game_id."""
    resp = client.post("/api/game/new", json={"seed": seed, "size": size, "num_players": num_players})
    assert resp.status_code == 200
    return resp.json["game_id"]
