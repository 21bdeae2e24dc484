import logging
import typing

from serpent.board import (
    MOVES,
    GameState,
    in_bounds,
    is_neck,
    manhattan,
    neighbors,
    next_cell,
    occupied_cells,
)
from serpent.config import DEFAULT_CONFIG, EngineConfig
from serpent.flood_fill import flood_fill_score
from serpent.lookahead import AdversarialSearch, OpponentPolicy
from serpent.scoring import MoveScore, score_move

logger = logging.getLogger(__name__)


class SnakeBehavior:
    """
    Class for choosing the controlled snake's move each turn.
    """

    def __init__(self, config: EngineConfig = DEFAULT_CONFIG,
                 policy: typing.Optional[OpponentPolicy] = None):
        self.config = config
        self.search = AdversarialSearch(config, policy)

    def in_bounds_moves(self, state: GameState) -> typing.List[str]:
        head = state.you.head
        return [move for move in MOVES if in_bounds(next_cell(head, move), state.board)]

    def unoccupied_moves(self, state: GameState, moves: typing.List[str]) -> typing.List[str]:
        me = state.you
        occupied = occupied_cells(state.board)
        cells = {move: next_cell(me.head, move) for move in moves}
        return [
            move for move in moves
            if cells[move] not in occupied and not is_neck(me, cells[move])
        ]

    def fallback_move(self, state: GameState, moves: typing.List[str]) -> str:
        """Largest immediate reachable area; first in enumeration order on ties."""
        if not moves:
            return self.config.default_move

        head = state.you.head
        best_move, best_area = moves[0], -1
        for move in moves:
            cell = next_cell(head, move)
            # reversing is fatal even when the neck is the tail
            area = 0 if is_neck(state.you, cell) else flood_fill_score(cell, state.board)
            if area > best_area:
                best_move, best_area = move, area
        return best_move

    def is_head_to_head_loss(self, state: GameState, move: str) -> bool:
        me = state.you
        cell = next_cell(me.head, move)
        for opponent in state.opponents():
            distance = manhattan(opponent.head, cell)
            if distance == 0:
                return True
            if distance == 1:
                if opponent.length >= me.length:
                    return True
                if not self._has_escape(state, cell):
                    return True
        return False

    def _has_escape(self, state: GameState, cell) -> bool:
        occupied = occupied_cells(state.board)
        opponents = state.opponents()
        for neighbor in neighbors(cell, state.board):
            if neighbor in occupied or neighbor == state.you.head:
                continue
            if any(manhattan(opponent.head, neighbor) <= 1 for opponent in opponents):
                continue
            return True
        return False

    def score_moves(self, state: GameState, moves: typing.List[str]) -> typing.List[MoveScore]:
        return [score_move(state, move, self.config, self.search) for move in moves]

    def decide(self, state: GameState) -> str:
        if state.you is None:
            logger.warning("Controlled snake %s not on the board", state.you_id)
            return self.config.default_move

        moves = self.in_bounds_moves(state)
        if not moves:
            return self.config.default_move

        safe_moves = self.unoccupied_moves(state, moves)
        if not safe_moves:
            fallback = self.fallback_move(state, moves)
            logger.info("MOVE %s: %s (NO SAFE MOVES!)", state.turn, fallback)
            return fallback

        candidates = [move for move in safe_moves if not self.is_head_to_head_loss(state, move)]
        if not candidates:
            candidates = safe_moves

        best = None
        for move_score in self.score_moves(state, candidates):
            if best is None or move_score.total > best.total:
                best = move_score

        logger.info("MOVE %s: %s (score: %.1f)", state.turn, best.move, best.total)
        return best.move


def decide(state: GameState, config: typing.Optional[EngineConfig] = None) -> str:
    return SnakeBehavior(config or DEFAULT_CONFIG).decide(state)
