from serpent.behavior import SnakeBehavior, decide
from serpent.board import GameState, parse_game_state
from serpent.config import DEFAULT_CONFIG, EngineConfig

__version__ = "0.1.0"

__all__ = [
    "DEFAULT_CONFIG",
    "EngineConfig",
    "GameState",
    "SnakeBehavior",
    "decide",
    "parse_game_state",
]
