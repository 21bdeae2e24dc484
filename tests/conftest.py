"""
Pytest configuration and fixtures for serpent tests.
"""

import dataclasses

import pytest

from serpent.board import Board, GameState, Snake
from serpent.config import DEFAULT_CONFIG


def _make_snake(snake_id, body, health=100):
    return Snake(id=snake_id, health=health, body=list(body), name=snake_id)


def _make_state(snakes, width=11, height=11, food=(), you="me", turn=0):
    board = Board(width=width, height=height, food=set(food), snakes=list(snakes))
    return GameState(board=board, you_id=you, turn=turn)


def _to_payload(state):
    """Render a GameState as a Battlesnake API move request."""

    def point(cell):
        return {"x": cell[0], "y": cell[1]}

    def snake(s):
        return {
            "id": s.id,
            "name": s.name,
            "health": s.health,
            "body": [point(c) for c in s.body],
            "head": point(s.head),
            "length": s.length,
        }

    return {
        "game": {"id": "game-1", "ruleset": {"name": "standard"}, "timeout": 500},
        "turn": state.turn,
        "board": {
            "width": state.board.width,
            "height": state.board.height,
            "food": [point(c) for c in sorted(state.board.food)],
            "hazards": [],
            "snakes": [snake(s) for s in state.board.snakes],
        },
        "you": snake(state.you),
    }


@pytest.fixture
def make_snake():
    """Factory for Snake objects: make_snake(id, body, health=100)."""
    return _make_snake


@pytest.fixture
def make_state():
    """Factory for GameState objects around a list of snakes."""
    return _make_state


@pytest.fixture
def to_payload():
    return _to_payload


@pytest.fixture
def fast_config():
    """Engine config with a one-ply lookahead to keep tests quick."""
    return dataclasses.replace(DEFAULT_CONFIG, lookahead_depth=1, crowded_lookahead_depth=1)


@pytest.fixture
def duel_state(make_snake, make_state):
    """Open 11x11 board: me (length 3) in the middle, a longer opponent to the right."""
    me = make_snake("me", [(5, 5), (4, 5), (3, 5)])
    opponent = make_snake("opponent", [(7, 5), (8, 5), (9, 5), (10, 5)])
    return make_state([me, opponent])
