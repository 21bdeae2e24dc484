"""
Tests for the grid and occupancy model.
"""

from serpent.board import (
    MOVES,
    free_cell_count,
    in_bounds,
    is_occupied,
    neighbors,
    next_cell,
    occupied_cells,
    parse_game_state,
)


class TestParsing:
    """Tests for building a GameState from the API payload."""

    def test_parse_round_trip(self, make_snake, make_state, to_payload):
        """Parsing a payload keeps geometry, food, bodies and the controlled id."""
        me = make_snake("me", [(1, 1), (1, 0)], health=77)
        other = make_snake("other", [(4, 4), (4, 5), (4, 6)])
        payload = to_payload(make_state([me, other], width=7, height=9, food=[(2, 2)], turn=12))

        state = parse_game_state(payload)

        assert state.board.width == 7
        assert state.board.height == 9
        assert state.board.food == {(2, 2)}
        assert state.turn == 12
        assert state.you_id == "me"
        assert state.you.health == 77
        assert state.you.head == (1, 1)
        assert state.board.get_snake("other").body == [(4, 4), (4, 5), (4, 6)]

    def test_you_is_a_reference_into_snakes(self, make_snake, make_state, to_payload):
        """The controlled snake is looked up in board.snakes, not copied."""
        state = parse_game_state(to_payload(make_state([make_snake("me", [(0, 0)])])))
        assert state.you is state.board.snakes[0]

    def test_missing_you_is_appended(self, make_snake, make_state, to_payload):
        """A payload whose board omits the controlled snake still resolves it."""
        payload = to_payload(make_state([make_snake("me", [(3, 3), (3, 2)])]))
        payload["board"]["snakes"] = []

        state = parse_game_state(payload)

        assert state.you is not None
        assert state.you.head == (3, 3)


class TestGeometry:
    """Tests for cell helpers."""

    def test_move_deltas(self):
        """up/down change y, left/right change x."""
        assert next_cell((3, 3), "up") == (3, 4)
        assert next_cell((3, 3), "down") == (3, 2)
        assert next_cell((3, 3), "left") == (2, 3)
        assert next_cell((3, 3), "right") == (4, 3)
        assert MOVES == ("up", "down", "left", "right")

    def test_bounds(self, make_state):
        """Cells outside [0, width) x [0, height) are out of bounds."""
        board = make_state([], width=3, height=2).board
        assert in_bounds((0, 0), board)
        assert in_bounds((2, 1), board)
        assert not in_bounds((3, 0), board)
        assert not in_bounds((0, -1), board)

    def test_corner_has_two_neighbors(self, make_state):
        board = make_state([], width=5, height=5).board
        assert neighbors((0, 0), board) == [(0, 1), (1, 0)]


class TestOccupancy:
    """Tests for the tail-vacating occupancy rule."""

    def test_tail_is_free(self, make_snake, make_state):
        """A snake's tail moves away, so it does not block."""
        state = make_state([make_snake("me", [(2, 2), (2, 1), (2, 0)])])
        assert occupied_cells(state.board) == {(2, 2), (2, 1)}
        assert not is_occupied((2, 0), state.board)

    def test_tail_blocks_when_growing(self, make_snake, make_state):
        """A snake whose head is on food keeps its tail in place."""
        state = make_state([make_snake("me", [(2, 2), (2, 1), (2, 0)])], food=[(2, 2)])
        assert is_occupied((2, 0), state.board)

    def test_stacked_tail_stays_occupied(self, make_snake, make_state):
        """A freshly spawned, stacked body still blocks its cell."""
        state = make_state([make_snake("me", [(4, 4), (4, 4), (4, 4)])])
        assert occupied_cells(state.board) == {(4, 4)}

    def test_free_cell_count(self, make_snake, make_state):
        state = make_state([make_snake("me", [(2, 2), (2, 1), (2, 0)])], width=5, height=5)
        assert free_cell_count(state.board) == 23


class TestSnapshot:
    """Tests for value-semantics snapshots."""

    def test_snapshot_is_independent(self, make_snake, make_state):
        """Mutating a snapshot never touches the original state."""
        state = make_state([make_snake("me", [(2, 2), (2, 1)])], food=[(5, 5)])
        copy = state.snapshot()

        copy.you.body.insert(0, (2, 3))
        copy.board.food.clear()
        copy.board.snakes.clear()

        assert state.you.body == [(2, 2), (2, 1)]
        assert state.board.food == {(5, 5)}
        assert len(state.board.snakes) == 1
