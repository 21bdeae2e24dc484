"""
Voronoi-style territory control.

Every head expands breadth-first at the same time. A free cell belongs to the
snake that reaches it first; cells reached first by several snakes at the same
distance are contested and belong to no one.
"""

import typing
from collections import deque
from dataclasses import dataclass, field

from serpent.board import Board, Cell, in_bounds, neighbors, occupied_cells


@dataclass
class Territory:
    owners: typing.Dict[Cell, typing.FrozenSet[str]] = field(default_factory=dict)
    counts: typing.Dict[str, int] = field(default_factory=dict)
    contested: int = 0
    total: int = 0

    def share(self, snake_id: str) -> float:
        if self.total == 0:
            return 0.0
        return self.counts.get(snake_id, 0) / self.total


def compute_territory(board: Board, heads: typing.Dict[str, Cell], occupied=None) -> Territory:
    if occupied is None:
        occupied = occupied_cells(board)

    distance = {}
    reached_by = {}
    queue = deque()
    for snake_id, head in heads.items():
        if not in_bounds(head, board):
            continue
        # a free start cell (a hypothetical next head) is owned at distance 0
        if head not in occupied:
            distance[head] = 0
            reached_by.setdefault(head, set()).add(snake_id)
        queue.append((head, snake_id, 0))

    # each (cell, id) pair is expanded at most once, so an id keeps spreading
    # through cells it ties for
    expanded = set()
    while queue:
        cell, snake_id, steps = queue.popleft()
        if (cell, snake_id) in expanded:
            continue
        expanded.add((cell, snake_id))
        for neighbor in neighbors(cell, board):
            if neighbor in occupied:
                continue
            best = distance.get(neighbor)
            if best is None:
                distance[neighbor] = steps + 1
                reached_by[neighbor] = {snake_id}
                queue.append((neighbor, snake_id, steps + 1))
            elif best == steps + 1 and snake_id not in reached_by[neighbor]:
                reached_by[neighbor].add(snake_id)
                queue.append((neighbor, snake_id, steps + 1))

    territory = Territory(counts={snake_id: 0 for snake_id in heads})
    for x in range(board.width):
        for y in range(board.height):
            cell = (x, y)
            if cell in occupied:
                continue
            territory.total += 1
            owners = frozenset(reached_by.get(cell, ()))
            if len(owners) == 1:
                territory.owners[cell] = owners
                territory.counts[next(iter(owners))] += 1
            else:
                territory.owners[cell] = frozenset()
                territory.contested += 1
    return territory


def territory_score(board: Board, snake_id: str, head: typing.Optional[Cell] = None,
                    occupied=None) -> float:
    """Share of free cells owned uniquely by snake_id, scaled to 0-100."""
    heads = {snake.id: snake.head for snake in board.snakes}
    if head is not None:
        heads[snake_id] = head
    territory = compute_territory(board, heads, occupied)
    return territory.share(snake_id) * 100.0
