"""
Move simulation and collision resolution on state snapshots.

Nothing here is ever called on the authoritative state of a turn: callers take a
snapshot first (see GameState.snapshot and simulate_own_move).
"""

import logging
import typing
from collections import defaultdict

from serpent.board import GameState, in_bounds, next_cell

logger = logging.getLogger(__name__)

MAX_HEALTH = 100


def apply_move(state: GameState, snake_id: str, move: str, restore_health: bool = False) -> bool:
    """
    Move one snake in place and return True if it grew.

    A snake that lands on food keeps its tail and the food is removed. Only the
    top-level evaluation path passes restore_health=True; the lookahead leaves
    health untouched on growth.
    """
    snake = state.board.get_snake(snake_id)
    if snake is None:
        return False

    new_head = next_cell(snake.head, move)
    snake.body.insert(0, new_head)

    if new_head in state.board.food:
        state.board.food.discard(new_head)
        if restore_health:
            snake.health = MAX_HEALTH
        return True

    snake.body.pop()
    snake.health = max(0, snake.health - 1)
    return False


def simulate_own_move(state: GameState, snake_id: str, move: str) -> GameState:
    """Snapshot the state and apply a move on the top-level evaluation path."""
    successor = state.snapshot()
    apply_move(successor, snake_id, move, restore_health=True)
    return successor


def resolve_collisions(state: GameState) -> typing.List[str]:
    """
    Remove every snake that died this step and return the removed ids.

    Snakes that left the board or starved go first. Every other snake's body
    still blocks: a head on any non-head segment, its own included, is fatal.
    Surviving heads are then grouped by cell; on a shared cell only a strictly
    longest snake survives.
    """
    board = state.board
    removed = []
    remaining = []

    for snake in board.snakes:
        if not in_bounds(snake.head, board) or snake.health <= 0:
            removed.append(snake.id)
        else:
            remaining.append(snake)

    body_cells = set()
    for snake in remaining:
        body_cells.update(snake.body[1:])

    survivors = []
    for snake in remaining:
        if snake.head in body_cells:
            removed.append(snake.id)
        else:
            survivors.append(snake)

    heads = defaultdict(list)
    for snake in survivors:
        heads[snake.head].append(snake)

    losers = set()
    for group in heads.values():
        if len(group) < 2:
            continue
        longest = max(snake.length for snake in group)
        winners = [snake for snake in group if snake.length == longest]
        for snake in group:
            if len(winners) > 1 or snake.length < longest:
                losers.add(snake.id)

    removed.extend(snake.id for snake in survivors if snake.id in losers)
    board.snakes = [snake for snake in survivors if snake.id not in losers]

    if removed:
        logger.debug("Removed snakes on turn %s: %s", state.turn, removed)
    return removed
