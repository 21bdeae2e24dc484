import logging
import typing

from flask import Flask, abort, jsonify, request

from serpent.config import ServerConfig

logger = logging.getLogger(__name__)


def create_app(handlers: typing.Dict[str, typing.Callable]) -> Flask:
    app = Flask("Battlesnake")

    def game_state_or_400():
        game_state = request.get_json(silent=True)
        if not isinstance(game_state, dict):
            abort(400)
        return game_state

    @app.get("/")
    def on_info():
        return jsonify(handlers["info"]())

    @app.post("/start")
    def on_start():
        handlers["start"](game_state_or_400())
        return "ok"

    @app.post("/move")
    def on_move():
        return jsonify(handlers["move"](game_state_or_400()))

    @app.post("/end")
    def on_end():
        handlers["end"](game_state_or_400())
        return "ok"

    @app.after_request
    def identify_server(response):
        response.headers.set("server", "battlesnake/serpent")
        return response

    return app


def run_server(handlers: typing.Dict[str, typing.Callable],
               config: typing.Optional[ServerConfig] = None):
    config = config or ServerConfig.from_env()
    app = create_app(handlers)

    logging.getLogger("werkzeug").setLevel(logging.ERROR)
    logger.info("Running Battlesnake at http://%s:%s", config.host, config.port)
    app.run(host=config.host, port=config.port)
