"""
Reachability: flood fill, bounded region/exit scans and region geometry.
"""

import typing
from collections import deque
from dataclasses import dataclass, field

from serpent.board import Board, Cell, Snake, in_bounds, neighbors, occupied_cells


@dataclass
class Region:
    cells: typing.Set[Cell] = field(default_factory=set)
    exits: typing.Set[Cell] = field(default_factory=set)

    @property
    def size(self) -> int:
        return len(self.cells)


@dataclass
class RegionShape:
    size: int
    width: int
    height: int
    aspect_ratio: float
    density: float

    @property
    def bounding_area(self) -> int:
        return self.width * self.height


def flood_fill(board: Board, start: Cell, obstacles=None, limit=None) -> typing.Set[Cell]:
    """
    Breadth-first set of free cells reachable from start (start included).

    Returns an empty set when start is blocked or off the board. The scan never
    visits more than limit cells (default: the whole board).
    """
    if obstacles is None:
        obstacles = occupied_cells(board)
    if limit is None:
        limit = board.area

    if not in_bounds(start, board) or start in obstacles:
        return set()

    visited = {start}
    queue = deque([start])
    while queue and len(visited) < limit:
        cell = queue.popleft()
        for neighbor in neighbors(cell, board):
            if neighbor in visited or neighbor in obstacles:
                continue
            visited.add(neighbor)
            queue.append(neighbor)
            if len(visited) >= limit:
                break
    return visited


def flood_fill_score(start: Cell, board: Board, obstacles=None) -> int:
    """Number of free cells reachable from start, 0 if start is occupied."""
    return len(flood_fill(board, start, obstacles))


def head_obstacles(board: Board, snake: Snake) -> typing.Set[Cell]:
    """Occupied cells minus the snake's own head, for flooding out of a head."""
    obstacles = occupied_cells(board)
    obstacles.discard(snake.head)
    return obstacles


def find_region_and_exits(start: Cell, board: Board, limit=None, obstacles=None) -> Region:
    """
    Collect the free region around start, then mark its exits.

    Exits are free cells bordering the region from outside. A complete region
    has none; they appear when the scan is cut off by limit, and then describe
    the openings through which the region continues.
    """
    if obstacles is None:
        obstacles = occupied_cells(board)
    cells = flood_fill(board, start, obstacles, limit)

    exits = set()
    for cell in cells:
        for neighbor in neighbors(cell, board):
            if neighbor not in cells and neighbor not in obstacles:
                exits.add(neighbor)
    return Region(cells=cells, exits=exits)


def region_scan_limit(snake: Snake, factor: int) -> int:
    return max(snake.length * factor, 1)


def classify_region(cells: typing.Set[Cell]) -> RegionShape:
    if not cells:
        return RegionShape(size=0, width=0, height=0, aspect_ratio=0.0, density=0.0)

    xs = [x for x, _ in cells]
    ys = [y for _, y in cells]
    width = max(xs) - min(xs) + 1
    height = max(ys) - min(ys) + 1
    aspect_ratio = max(width, height) / min(width, height)
    density = len(cells) / (width * height)
    return RegionShape(
        size=len(cells),
        width=width,
        height=height,
        aspect_ratio=aspect_ratio,
        density=density,
    )


def shape_rejection(shape: RegionShape, body_length: int) -> typing.Optional[str]:
    """Name of the first geometry rule the region fails, or None if it is viable."""
    if shape.size < body_length + 3:
        return "too_small"
    if min(shape.width, shape.height) == 1 and shape.size * 0.8 <= body_length:
        return "one_wide"
    if (shape.aspect_ratio > 5 and min(shape.width, shape.height) <= 2
            and shape.size < body_length * 1.5):
        return "narrow_corridor"
    if shape.density < 0.6 and shape.size < body_length * 2:
        return "sparse"
    if shape.bounding_area * shape.density < body_length * 1.4:
        return "effective_area"
    return None


def is_viable_shape(shape: RegionShape, body_length: int) -> bool:
    """Reject space that is reachable but too cramped for a body this long."""
    return shape_rejection(shape, body_length) is None


def is_viable_escape_space(start: Cell, board: Board, snake: Snake, obstacles=None) -> bool:
    cells = flood_fill(board, start, obstacles)
    return is_viable_shape(classify_region(cells), snake.length)


def nearest_food_distance(start: Cell, board: Board, obstacles=None) -> typing.Optional[int]:
    """Breadth-first step count from start to the closest reachable food."""
    if not board.food:
        return None
    if obstacles is None:
        obstacles = occupied_cells(board)
    if start in board.food:
        return 0

    visited = {start}
    queue = deque([(start, 0)])
    while queue:
        cell, distance = queue.popleft()
        for neighbor in neighbors(cell, board):
            if neighbor in visited or neighbor in obstacles:
                continue
            if neighbor in board.food:
                return distance + 1
            visited.add(neighbor)
            queue.append((neighbor, distance + 1))
    return None
