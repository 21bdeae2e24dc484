import logging
import typing

from serpent.behavior import SnakeBehavior
from serpent.board import parse_game_state
from serpent.config import DEFAULT_CONFIG, EngineConfig, ServerConfig

logger = logging.getLogger(__name__)


class Snake:
    """
    Battlesnake API handlers wired to the decision engine.
    """

    def __init__(self, engine_config: EngineConfig = DEFAULT_CONFIG,
                 server_config: typing.Optional[ServerConfig] = None):
        self.behavior = SnakeBehavior(engine_config)
        self.server_config = server_config or ServerConfig()

    def info(self) -> typing.Dict:
        """
        Returns information about the Battlesnake.
        """
        logger.info("INFO")
        return {
            "apiversion": "1",
            "author": self.server_config.author,
            "color": self.server_config.color,
            "head": self.server_config.head,
            "tail": self.server_config.tail,
        }

    def start(self, game_state: typing.Dict):
        logger.info("GAME START %s", game_state.get("game", {}).get("id", ""))

    def end(self, game_state: typing.Dict):
        logger.info("GAME OVER %s\n", game_state.get("game", {}).get("id", ""))

    def move(self, game_state: typing.Dict) -> typing.Dict:
        """
        Decides the next move for the snake
        """
        state = parse_game_state(game_state)
        return {"move": self.behavior.decide(state)}

    def handlers(self) -> typing.Dict[str, typing.Callable]:
        return {"info": self.info, "start": self.start, "move": self.move, "end": self.end}
