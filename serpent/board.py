"""
Grid and occupancy model.

Game state is parsed from the Battlesnake API payload into small dataclasses.
Cells are plain (x, y) tuples so they hash cheaply in sets and dicts.
"""

import copy
import typing
from dataclasses import dataclass, field

Cell = typing.Tuple[int, int]

MOVE_DELTAS = {
    "up": (0, 1),
    "down": (0, -1),
    "left": (-1, 0),
    "right": (1, 0),
}

# enumeration order, used as the tie-break order everywhere
MOVES = tuple(MOVE_DELTAS)


@dataclass
class Snake:
    id: str
    health: int
    body: typing.List[Cell]
    name: str = ""

    @property
    def head(self) -> Cell:
        return self.body[0]

    @property
    def tail(self) -> Cell:
        return self.body[-1]

    @property
    def length(self) -> int:
        return len(self.body)


@dataclass
class Board:
    width: int
    height: int
    food: typing.Set[Cell] = field(default_factory=set)
    snakes: typing.List[Snake] = field(default_factory=list)

    @property
    def area(self) -> int:
        return self.width * self.height

    def get_snake(self, snake_id: str) -> typing.Optional[Snake]:
        for snake in self.snakes:
            if snake.id == snake_id:
                return snake
        return None


@dataclass
class GameState:
    board: Board
    you_id: str
    turn: int = 0
    game_id: str = ""

    @property
    def you(self) -> typing.Optional[Snake]:
        """The controlled snake, looked up by id (None once it has died)."""
        return self.board.get_snake(self.you_id)

    def opponents(self) -> typing.List[Snake]:
        return [snake for snake in self.board.snakes if snake.id != self.you_id]

    def snapshot(self) -> "GameState":
        """Independent deep copy for hypothetical play."""
        return copy.deepcopy(self)


def _parse_cell(point: typing.Dict) -> Cell:
    return (point["x"], point["y"])


def _parse_snake(payload: typing.Dict) -> Snake:
    return Snake(
        id=payload["id"],
        health=payload.get("health", 100),
        body=[_parse_cell(point) for point in payload.get("body", [])],
        name=payload.get("name", ""),
    )


def parse_game_state(game_state: typing.Dict) -> GameState:
    """Build a GameState from a Battlesnake API move request."""
    board_payload = game_state["board"]
    snakes = [_parse_snake(s) for s in board_payload.get("snakes", []) if s.get("body")]
    you_payload = game_state["you"]

    if not any(snake.id == you_payload["id"] for snake in snakes):
        snakes.append(_parse_snake(you_payload))

    board = Board(
        width=board_payload["width"],
        height=board_payload["height"],
        food={_parse_cell(f) for f in board_payload.get("food", [])},
        snakes=snakes,
    )
    return GameState(
        board=board,
        you_id=you_payload["id"],
        turn=game_state.get("turn", 0),
        game_id=game_state.get("game", {}).get("id", ""),
    )


def next_cell(cell: Cell, move: str) -> Cell:
    dx, dy = MOVE_DELTAS[move]
    return (cell[0] + dx, cell[1] + dy)


def in_bounds(cell: Cell, board: Board) -> bool:
    return 0 <= cell[0] < board.width and 0 <= cell[1] < board.height


def manhattan(a: Cell, b: Cell) -> int:
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


def neighbors(cell: Cell, board: Board) -> typing.List[Cell]:
    """In-bounds orthogonal neighbours, in move enumeration order."""
    result = []
    for move in MOVES:
        candidate = next_cell(cell, move)
        if in_bounds(candidate, board):
            result.append(candidate)
    return result


def will_grow(snake: Snake, board: Board) -> bool:
    return snake.head in board.food


def occupied_cells(board: Board) -> typing.Set[Cell]:
    """
    Cells blocked for the coming step.

    Every body segment is occupied except a snake's tail, which moves out of the
    way unless that snake is about to grow (its head sits on food).
    """
    occupied = set()
    for snake in board.snakes:
        if will_grow(snake, board):
            occupied.update(snake.body)
        else:
            occupied.update(snake.body[:-1])
    return occupied


def is_occupied(cell: Cell, board: Board) -> bool:
    return cell in occupied_cells(board)


def free_cell_count(board: Board, occupied: typing.Optional[typing.Set[Cell]] = None) -> int:
    if occupied is None:
        occupied = occupied_cells(board)
    return board.area - sum(1 for cell in occupied if in_bounds(cell, board))


def is_neck(snake: Snake, cell: Cell) -> bool:
    """True if cell is the segment right behind the head (a reversal)."""
    return snake.length > 1 and snake.body[1] != snake.head and cell == snake.body[1]
