"""
Bounded adversarial lookahead.

The controlled snake's move is played against the worst of the modelled opponent
responses. Opponents do not search: each one is limited to its top few safe moves
according to an OpponentPolicy, and only a fixed number of move combinations is
explored per ply. Only the controlled snake gets a best-of continuation when
depth remains.
"""

import itertools
import logging
import math
import typing
from abc import ABC, abstractmethod

from serpent.board import (
    MOVES,
    GameState,
    Snake,
    in_bounds,
    is_neck,
    manhattan,
    next_cell,
    occupied_cells,
)
from serpent.config import DEFAULT_CONFIG, EngineConfig
from serpent.flood_fill import (
    Region,
    find_region_and_exits,
    flood_fill,
    flood_fill_score,
    head_obstacles,
    nearest_food_distance,
    region_scan_limit,
)
from serpent.simulate import apply_move, resolve_collisions
from serpent.territory import territory_score

logger = logging.getLogger(__name__)


class OpponentPolicy(ABC):
    """Predicts which moves an opponent will consider."""

    @abstractmethod
    def candidate_moves(self, state: GameState, snake: Snake, limit: int) -> typing.List[str]:
        """Return at most limit moves, best first; never empty."""


class GreedySpacePolicy(OpponentPolicy):
    """Rank an opponent's safe moves by the space they open up, one ply deep."""

    def __init__(self, default_move: str = "up"):
        self.default_move = default_move

    def candidate_moves(self, state, snake, limit):
        board = state.board
        occupied = occupied_cells(board)
        scored = []
        for move in MOVES:
            cell = next_cell(snake.head, move)
            if not in_bounds(cell, board) or cell in occupied or is_neck(snake, cell):
                continue
            scored.append((flood_fill_score(cell, board, occupied), move))

        # sorted is stable, so ties keep enumeration order
        scored = sorted(scored, key=lambda item: -item[0])
        moves = [move for _, move in scored[:limit]]
        # no safe move: it dies in resolution whatever it picks
        return moves or [self.default_move]


class AdversarialSearch:
    def __init__(self, config: EngineConfig = DEFAULT_CONFIG,
                 policy: typing.Optional[OpponentPolicy] = None):
        self.config = config
        self.policy = policy or GreedySpacePolicy(config.default_move)

    def depth_for(self, state: GameState) -> int:
        if len(state.board.snakes) > 2:
            return self.config.crowded_lookahead_depth
        return self.config.lookahead_depth

    def missing_value(self, maximizing: bool) -> float:
        """Score of a branch in which the controlled snake no longer exists."""
        return -self.config.death_score if maximizing else self.config.death_score

    def evaluate(self, state: GameState, snake_id: str, move: str,
                 depth: typing.Optional[int] = None) -> float:
        """Worst-case score of snake_id playing move from state."""
        if depth is None:
            depth = self.depth_for(state)
        try:
            return self._respond(state, snake_id, move, max(depth, 1))
        except Exception:
            logger.exception("Lookahead failed for %s on turn %s", move, state.turn)
            return 0.0

    def _respond(self, state, snake_id, move, depth):
        me = state.board.get_snake(snake_id)
        if me is None:
            return self.missing_value(maximizing=False)

        cell = next_cell(me.head, move)
        limit = region_scan_limit(me, self.config.region_scan_factor)
        region = find_region_and_exits(cell, state.board, limit)
        space = len(flood_fill(state.board, cell))

        opponents = [snake for snake in state.board.snakes if snake.id != snake_id]
        options = [
            self.policy.candidate_moves(state, opponent, self.config.opponent_top_k)
            for opponent in opponents
        ]

        moved = state.snapshot()
        grew = apply_move(moved, snake_id, move)

        worst = None
        combos = itertools.islice(itertools.product(*options), self.config.combination_budget)
        for combo in combos:
            try:
                score = self._play_branch(moved, snake_id, opponents, combo, depth, grew, region,
                                           space)
            except Exception:
                logger.exception("Lookahead branch %s failed on turn %s", combo, state.turn)
                score = 0.0
            if worst is None or score < worst:
                worst = score
        return worst if worst is not None else 0.0

    def _play_branch(self, moved, snake_id, opponents, combo, depth, grew, region: Region,
                     space: int):
        branch = moved.snapshot()
        for opponent, opponent_move in zip(opponents, combo):
            apply_move(branch, opponent.id, opponent_move)
        removed = resolve_collisions(branch)
        kills = sum(1 for removed_id in removed if removed_id != snake_id)

        me = branch.board.get_snake(snake_id)
        if me is None:
            return self.missing_value(maximizing=True)

        if depth > 1:
            score = self._best_continuation(branch, snake_id, depth - 1)
        else:
            score = self.evaluate_state(branch, snake_id)

        if grew:
            score += self.config.lookahead_food_bonus
        score += self.config.kill_bonus * kills

        sealed = any(
            other.head in region.exits for other in branch.board.snakes if other.id != snake_id
        )
        if sealed:
            # both floods count the head cell
            reachable = len(flood_fill(branch.board, me.head, head_obstacles(branch.board, me)))
            if reachable - 1 < me.length:
                return self.config.suffocation_score
            # only a seal that loses reachable space costs the penalty
            if reachable < space:
                score -= self.config.lookahead_choke_penalty
        return score

    def _best_continuation(self, state, snake_id, depth):
        me = state.board.get_snake(snake_id)
        if me is None:
            return self.missing_value(maximizing=True)

        occupied = occupied_cells(state.board)
        moves = [
            move for move in MOVES
            if in_bounds(next_cell(me.head, move), state.board)
            and next_cell(me.head, move) not in occupied
            and not is_neck(me, next_cell(me.head, move))
        ]
        if not moves:
            return -self.config.death_score
        return max(self._respond(state, snake_id, move, depth) for move in moves)

    def evaluate_state(self, state: GameState, snake_id: str) -> float:
        """Static evaluation of a position for snake_id."""
        board = state.board
        me = board.get_snake(snake_id)
        if me is None or me.health <= 0:
            return -self.config.death_score

        obstacles = head_obstacles(board, me)
        area = max(len(flood_fill(board, me.head, obstacles)) - 1, 0)
        score = area * self.config.lookahead_space_weight
        score += territory_score(board, snake_id) * self.config.lookahead_territory_weight

        food_distance = nearest_food_distance(me.head, board, obstacles)
        if food_distance is not None:
            score += self.config.food_curve_scale * math.atan(
                (me.health - food_distance) / self.config.food_curve_spread
            )

        for opponent in board.snakes:
            if opponent.id == snake_id:
                continue
            closeness = max(0, self.config.proximity_range - manhattan(me.head, opponent.head))
            if me.length > opponent.length:
                score += closeness
            else:
                score -= closeness
        return score
