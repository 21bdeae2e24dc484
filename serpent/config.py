# data classes for engine and server configuration
from dataclasses import dataclass, fields
import json
import os
from pathlib import Path
from typing import Optional


@dataclass(frozen=True)
class EngineConfig:
    # fallback when no in-bounds move exists
    default_move: str = "up"

    # reachable space (composite scorer)
    space_weight: float = 2.0
    suffocation_penalty: float = -1000.0
    dead_space_penalty: float = -500.0
    choke_penalty: float = 150.0
    region_scan_factor: int = 3

    # territory
    territory_weight: float = 1.5

    # adversarial lookahead
    lookahead_weight: float = 1.0
    lookahead_depth: int = 2
    crowded_lookahead_depth: int = 1
    opponent_top_k: int = 4
    combination_budget: int = 16
    death_score: float = 10000.0
    suffocation_score: float = -5000.0
    lookahead_food_bonus: float = 50.0
    kill_bonus: float = 200.0
    lookahead_choke_penalty: float = 100.0
    lookahead_space_weight: float = 7.60983
    lookahead_territory_weight: float = 1.0
    food_curve_scale: float = 68.60914
    food_curve_spread: float = 8.51774
    proximity_range: int = 10

    # aggression
    aggression_weight: float = 5.0
    aggression_range: int = 6
    food_denial_bonus: float = 40.0
    food_block_bonus: float = 15.0

    # food and health
    immediate_food_bonus: float = 10.0
    hunger_threshold: int = 50
    hunger_weight: float = 40.0
    critical_health: int = 25
    critical_food_bonus: float = 600.0

    # position
    wall_adjacency_weight: float = -3.0
    tail_chase_bonus: float = 15.0
    tail_chase_health: int = 50
    tail_chase_distance: int = 2
    tail_chase_space_factor: float = 2.0

    # traps
    trap_weight: float = 1.0
    trap_proximity_range: int = 3
    trap_proximity_weight: float = 60.0
    trap_bigger_opponent_penalty: float = 80.0
    corridor_trap_weight: float = 120.0
    pincer_trap_weight: float = 100.0
    pincer_range: int = 4
    low_health_trap_threshold: int = 20
    severe_trap_risk: float = 300.0

    # 1v1 endgame
    endgame_aggression_weight: float = 8.0
    endgame_territory_multiplier: float = 2.0


DEFAULT_CONFIG = EngineConfig()


@dataclass
class ServerConfig:
    host: str = "0.0.0.0"
    port: int = 8000
    author: str = "serpent"
    color: str = "#2E8B57"
    head: str = "evil"
    tail: str = "sharp"
    log_level: str = "INFO"
    engine_config_path: Optional[str] = None

    @classmethod
    def from_env(cls):
        return cls(
            host=os.environ.get("HOST", cls.host),
            port=int(os.environ.get("PORT", cls.port)),
            log_level=os.environ.get("SERPENT_LOG_LEVEL", cls.log_level),
            engine_config_path=os.environ.get("SERPENT_CONFIG") or None,
        )


def load_engine_config(path="engine_config.json"):
    """
    Load an EngineConfig from a JSON object of field overrides.
    Unspecified fields keep their defaults.
    """
    config_path = Path(path)
    try:
        with open(config_path) as f:
            overrides = json.load(f)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {config_path}: {e}")
    except FileNotFoundError:
        raise ValueError(f"File not found: {config_path}")

    if not isinstance(overrides, dict):
        raise ValueError(f"Expected a JSON object in {config_path}")

    known = {f.name for f in fields(EngineConfig)}
    unknown = sorted(set(overrides) - known)
    if unknown:
        raise ValueError(f"Unknown config keys in {config_path}: {', '.join(unknown)}")

    return EngineConfig(**overrides)
