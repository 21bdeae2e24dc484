"""
Choke, corridor and pincer detection around a candidate head cell.
"""

import itertools
import typing

from serpent.board import MOVES, Board, Cell, Snake, in_bounds, manhattan, next_cell, occupied_cells
from serpent.config import EngineConfig
from serpent.flood_fill import Region, find_region_and_exits, is_viable_escape_space


def detect_choke_risk(region: Region, body_length: int) -> bool:
    """A region is a choke if the body does not fit or it has at most one way out."""
    return region.size < body_length or len(region.exits) <= 1


def count_escape_routes(pos: Cell, board: Board, snake: Snake, occupied=None) -> int:
    if occupied is None:
        occupied = occupied_cells(board)
    blocked = set(occupied)
    blocked.add(pos)

    routes = 0
    for move in MOVES:
        neighbor = next_cell(pos, move)
        if not in_bounds(neighbor, board) or neighbor in blocked:
            continue
        if is_viable_escape_space(neighbor, board, snake, blocked):
            routes += 1
    return routes


def detect_corridor_trap(pos: Cell, board: Board, snake: Snake, config: EngineConfig,
                         occupied=None) -> bool:
    limit = max(snake.length * config.region_scan_factor, 1)
    region = find_region_and_exits(pos, board, limit, occupied)
    return region.size < snake.length * 1.5 and len(region.exits) <= 2


def detect_pincer_trap(pos: Cell, opponents: typing.Sequence[Snake], pincer_range: int = 4) -> float:
    """
    Risk from two opponents closing in from opposite sides.

    A pair counts when both heads are within range of pos and at least as far
    from each other as the farther one is from pos. The nearer the closer head,
    the higher the risk.
    """
    risk = 0.0
    for first, second in itertools.combinations(opponents, 2):
        d1 = manhattan(pos, first.head)
        d2 = manhattan(pos, second.head)
        if d1 > pincer_range or d2 > pincer_range:
            continue
        if manhattan(first.head, second.head) >= max(d1, d2):
            risk += 1.0 / max(min(d1, d2), 1)
    return risk


def detect_advanced_trap(pos: Cell, board: Board, snake: Snake, config: EngineConfig) -> float:
    """Combined trap risk for moving snake's head to pos (non-negative)."""
    opponents = [other for other in board.snakes if other.id != snake.id]

    if snake.health <= config.low_health_trap_threshold:
        # starving: only an adjacent equal-or-longer head still counts
        for opponent in opponents:
            if manhattan(pos, opponent.head) == 1 and opponent.length >= snake.length:
                return config.severe_trap_risk
        return 0.0

    occupied = occupied_cells(board)
    risk = 0.0

    if count_escape_routes(pos, board, snake, occupied) <= 2:
        for opponent in opponents:
            distance = manhattan(pos, opponent.head)
            if distance > config.trap_proximity_range:
                continue
            risk += config.trap_proximity_weight / max(distance, 1)
            if opponent.length >= snake.length:
                risk += config.trap_bigger_opponent_penalty

    if detect_corridor_trap(pos, board, snake, config, occupied):
        risk += config.corridor_trap_weight

    risk += config.pincer_trap_weight * detect_pincer_trap(pos, opponents, config.pincer_range)
    return risk
