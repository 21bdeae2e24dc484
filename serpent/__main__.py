from serpent.config import DEFAULT_CONFIG, ServerConfig, load_engine_config
from serpent.logging_utils import setup_logger
from serpent.server import run_server
from serpent.snake import Snake


def main():
    server_config = ServerConfig.from_env()
    setup_logger("serpent", level=server_config.log_level.upper())

    engine_config = DEFAULT_CONFIG
    if server_config.engine_config_path:
        engine_config = load_engine_config(server_config.engine_config_path)

    snake = Snake(engine_config, server_config)
    run_server(snake.handlers(), server_config)


if __name__ == "__main__":
    main()
