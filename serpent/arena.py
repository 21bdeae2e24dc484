"""
Local self-play benchmark.

Plays seeded games in process, every snake driven by the engine, and tallies the
winners. Games use the same simulator and collision rules as the lookahead.
"""

import argparse
import logging
import random
import typing
from collections import defaultdict
from concurrent.futures import ProcessPoolExecutor, as_completed
from dataclasses import dataclass

import sympy
from tqdm import tqdm

from serpent.behavior import SnakeBehavior
from serpent.board import Board, GameState, Snake, occupied_cells
from serpent.config import DEFAULT_CONFIG, EngineConfig, load_engine_config
from serpent.logging_utils import setup_logger
from serpent.simulate import apply_move, resolve_collisions

logger = logging.getLogger(__name__)


@dataclass
class GameResult:
    seed: int
    winner: typing.Optional[str]
    turns: int


class Arena:
    def __init__(self, width: int = 11, height: int = 11, snake_count: int = 2, seed: int = 0,
                 config: EngineConfig = DEFAULT_CONFIG, max_turns: int = 300,
                 food_spawn_chance: float = 0.15, min_food: int = 1, start_length: int = 3):
        if snake_count < 1:
            raise ValueError("An arena needs at least one snake")
        if snake_count * 2 > width * height:
            raise ValueError(f"A {width}x{height} board cannot hold {snake_count} snakes")

        self.seed = seed
        self.rng = random.Random(seed)
        self.snake_count = snake_count
        self.max_turns = max_turns
        self.food_spawn_chance = food_spawn_chance
        self.min_food = min_food
        self.behavior = SnakeBehavior(config)
        self.state = self._initial_state(width, height, start_length)

    def _initial_state(self, width, height, start_length):
        cells = [(x, y) for x in range(width) for y in range(height)]
        starts = self.rng.sample(cells, self.snake_count)
        snakes = [
            Snake(id=f"snake-{index}", health=100, body=[start] * start_length, name=f"snake-{index}")
            for index, start in enumerate(starts)
        ]
        state = GameState(board=Board(width=width, height=height, snakes=snakes), you_id="")
        for _ in range(self.snake_count):
            self._place_food(state)
        return state

    def _place_food(self, state):
        taken = occupied_cells(state.board) | state.board.food
        for snake in state.board.snakes:
            taken.update(snake.body)
        free = [
            (x, y)
            for x in range(state.board.width)
            for y in range(state.board.height)
            if (x, y) not in taken
        ]
        if free:
            state.board.food.add(self.rng.choice(free))

    def finished(self) -> bool:
        snakes = self.state.board.snakes
        if self.snake_count > 1 and len(snakes) <= 1:
            return True
        return not snakes or self.state.turn >= self.max_turns

    def view_for(self, snake_id: str) -> GameState:
        return GameState(board=self.state.board, you_id=snake_id, turn=self.state.turn)

    def step(self) -> typing.List[str]:
        """Play one turn: every move is chosen before any is applied."""
        moves = {
            snake.id: self.behavior.decide(self.view_for(snake.id))
            for snake in self.state.board.snakes
        }
        for snake_id, move in moves.items():
            apply_move(self.state, snake_id, move, restore_health=True)
        removed = resolve_collisions(self.state)
        self.state.turn += 1

        if len(self.state.board.food) < self.min_food or self.rng.random() < self.food_spawn_chance:
            self._place_food(self.state)
        return removed

    def play(self) -> GameResult:
        while not self.finished():
            self.step()
        snakes = self.state.board.snakes
        winner = snakes[0].id if len(snakes) == 1 and self.snake_count > 1 else None
        return GameResult(seed=self.seed, winner=winner, turns=self.state.turn)


def run_single_game(seed, width, height, snake_count, max_turns, config):
    return Arena(
        width=width,
        height=height,
        snake_count=snake_count,
        seed=seed,
        config=config,
        max_turns=max_turns,
    ).play()


def game_seeds(iterations, start=100):
    seeds = []
    last_prime = start
    for _ in range(iterations):
        last_prime = sympy.nextprime(last_prime)
        seeds.append(int(last_prime))
    return seeds


def run_benchmark(iterations=20, width=11, height=11, snake_count=2, max_turns=300,
                  config=DEFAULT_CONFIG, workers=1, progress=True):
    """Play iterations games and count wins per snake id (plus draws)."""
    results = defaultdict(int)
    seeds = game_seeds(iterations)
    bar_fmt = "{l_bar}{bar}| {n_fmt}/{total_fmt} [{elapsed}<{remaining}, {rate_fmt}] {postfix}"

    with tqdm(total=iterations, desc="Running games", unit="game", bar_format=bar_fmt,
              disable=not progress) as pbar:
        if workers > 1:
            with ProcessPoolExecutor(max_workers=workers) as executor:
                future_to_seed = {
                    executor.submit(
                        run_single_game, seed, width, height, snake_count, max_turns, config
                    ): seed
                    for seed in seeds
                }
                for future in as_completed(future_to_seed):
                    seed = future_to_seed[future]
                    try:
                        _record(results, future.result())
                    except Exception as e:
                        logger.error(f"Game with seed {seed} failed with exception: {e}")
                    pbar.set_postfix(dict(results), refresh=True)
                    pbar.update(1)
        else:
            for seed in seeds:
                _record(results, run_single_game(seed, width, height, snake_count, max_turns, config))
                pbar.set_postfix(dict(results), refresh=True)
                pbar.update(1)
    return dict(results)


def _record(results, result: GameResult):
    results[result.winner or "draws"] += 1


def main():
    parser = argparse.ArgumentParser(description="Serpent self-play benchmark")
    parser.add_argument("--iterations", type=int, default=20, help="Number of games to run")
    parser.add_argument("--workers", type=int, default=1, help="Number of parallel workers")
    parser.add_argument("--width", type=int, default=11, help="Board width")
    parser.add_argument("--height", type=int, default=11, help="Board height")
    parser.add_argument("--snakes", type=int, default=2, help="Snakes per game")
    parser.add_argument("--max-turns", type=int, default=300, help="Turn limit per game")
    parser.add_argument("--config", type=str, default=None, help="Engine config JSON file")
    args = parser.parse_args()

    config = load_engine_config(args.config) if args.config else DEFAULT_CONFIG
    summary = setup_logger("serpent.arena.summary")

    summary.info("=" * 60)
    summary.info(f"     Running {args.iterations} games on {args.width}x{args.height} "
                 f"with {args.snakes} snakes")
    summary.info("=" * 60)

    results = run_benchmark(
        iterations=args.iterations,
        width=args.width,
        height=args.height,
        snake_count=args.snakes,
        max_turns=args.max_turns,
        config=config,
        workers=args.workers,
    )

    summary.info("     Summary:")
    for name, count in sorted(results.items()):
        summary.info(f"         - {name}: {count}")
    summary.info("=" * 60)


if __name__ == "__main__":
    main()
