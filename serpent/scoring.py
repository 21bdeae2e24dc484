"""
Composite move scoring.

Each candidate move gets a set of named terms that are summed into one score.
The space term goes through SPACE_RULES, an ordered list of override rules: the
first rule that matches replaces the base value and stops the rules below it.
"""

import logging
import typing
from dataclasses import dataclass, field

from serpent.board import Cell, GameState, Snake, manhattan, next_cell, occupied_cells, will_grow
from serpent.config import DEFAULT_CONFIG, EngineConfig
from serpent.flood_fill import (
    classify_region,
    find_region_and_exits,
    flood_fill,
    is_viable_shape,
    nearest_food_distance,
    region_scan_limit,
)
from serpent.lookahead import AdversarialSearch
from serpent.simulate import simulate_own_move
from serpent.territory import territory_score
from serpent.traps import detect_advanced_trap, detect_choke_risk

logger = logging.getLogger(__name__)


@dataclass
class MoveContext:
    state: GameState
    config: EngineConfig
    search: AdversarialSearch
    move: str
    me: Snake
    # the controlled snake after the move on the top-level path (health reset on growth)
    after: Snake
    cell: Cell
    occupied: typing.Set[Cell]
    area: int
    viable: bool
    choke: bool
    eating: bool
    territory: float


@dataclass(frozen=True)
class OverrideRule:
    name: str
    applies: typing.Callable[[MoveContext], bool]
    transform: typing.Callable[[MoveContext, float], float]
    final: bool = True


@dataclass
class MoveScore:
    move: str
    terms: typing.Dict[str, float] = field(default_factory=dict)
    override: typing.Optional[str] = None

    @property
    def total(self) -> float:
        return sum(self.terms.values())


SPACE_RULES = (
    OverrideRule(
        "suffocation",
        lambda ctx: ctx.area < ctx.me.length,
        lambda ctx, score: ctx.config.suffocation_penalty,
    ),
    OverrideRule(
        "dead_space",
        lambda ctx: not ctx.viable,
        lambda ctx, score: ctx.config.dead_space_penalty + score,
    ),
    OverrideRule(
        "choke",
        lambda ctx: ctx.choke,
        lambda ctx, score: score - ctx.config.choke_penalty,
    ),
)


def apply_overrides(rules, ctx: MoveContext, base: float):
    """Run rules in order; return (score, name of the rule that stopped evaluation)."""
    score = base
    for rule in rules:
        if not rule.applies(ctx):
            continue
        score = rule.transform(ctx, score)
        if rule.final:
            return score, rule.name
    return score, None


def build_context(state: GameState, move: str, config: EngineConfig,
                  search: AdversarialSearch) -> MoveContext:
    board = state.board
    me = state.you
    cell = next_cell(me.head, move)
    occupied = occupied_cells(board)

    cells = flood_fill(board, cell, occupied)
    region = find_region_and_exits(
        cell, board, region_scan_limit(me, config.region_scan_factor), occupied
    )
    after = simulate_own_move(state, me.id, move).you

    return MoveContext(
        state=state,
        config=config,
        search=search,
        move=move,
        me=me,
        after=after,
        cell=cell,
        occupied=occupied,
        area=len(cells),
        viable=is_viable_shape(classify_region(cells), me.length),
        choke=detect_choke_risk(region, me.length),
        eating=cell in board.food,
        territory=territory_score(board, me.id, head=cell, occupied=occupied),
    )


def territory_term(ctx: MoveContext) -> float:
    return ctx.territory * ctx.config.territory_weight


def lookahead_term(ctx: MoveContext) -> float:
    return ctx.search.evaluate(ctx.state, ctx.me.id, ctx.move) * ctx.config.lookahead_weight


def aggression_term(ctx: MoveContext) -> float:
    config = ctx.config
    snakes = ctx.state.board.snakes
    opponents = ctx.state.opponents()
    mean_length = sum(snake.length for snake in snakes) / len(snakes)

    score = 0.0
    if ctx.me.length > mean_length:
        for opponent in opponents:
            if opponent.length < ctx.me.length:
                distance = manhattan(ctx.cell, opponent.head)
                score += config.aggression_weight * max(0, config.aggression_range - distance)

    for opponent in opponents:
        for food in ctx.state.board.food:
            if manhattan(opponent.head, food) != 1:
                continue
            if ctx.cell == food:
                score += config.food_denial_bonus
            elif manhattan(ctx.cell, food) == 1 and ctx.me.length > opponent.length:
                score += config.food_block_bonus
    return score


def food_term(ctx: MoveContext) -> float:
    """Immediate food, graduated hunger, and the critical-health override."""
    config = ctx.config
    health = ctx.me.health
    distance = nearest_food_distance(ctx.cell, ctx.state.board, ctx.occupied)

    if health <= config.critical_health:
        if distance is None:
            return 0.0
        return config.critical_food_bonus / (distance + 1)

    score = config.immediate_food_bonus if ctx.eating else 0.0
    if health < config.hunger_threshold and distance is not None:
        urgency = (config.hunger_threshold - health) / config.hunger_threshold
        score += config.hunger_weight * urgency / (distance + 1)
    return score


def wall_term(ctx: MoveContext) -> float:
    board = ctx.state.board
    x, y = ctx.cell
    edges = (x == 0) + (x == board.width - 1) + (y == 0) + (y == board.height - 1)
    return edges * ctx.config.wall_adjacency_weight


def tail_chase_term(ctx: MoveContext) -> float:
    config = ctx.config
    me = ctx.me
    if me.length < 2 or me.health <= config.tail_chase_health:
        return 0.0
    if ctx.eating or will_grow(me, ctx.state.board):
        return 0.0
    if manhattan(ctx.cell, me.tail) > config.tail_chase_distance:
        return 0.0
    if ctx.area < me.length * config.tail_chase_space_factor:
        return 0.0
    return config.tail_chase_bonus


def trap_term(ctx: MoveContext) -> float:
    risk = detect_advanced_trap(ctx.cell, ctx.state.board, ctx.after, ctx.config)
    return -ctx.config.trap_weight * risk


def endgame_term(ctx: MoveContext) -> float:
    opponents = ctx.state.opponents()
    if len(opponents) != 1:
        return 0.0

    config = ctx.config
    board = ctx.state.board
    opponent = opponents[0]
    if ctx.me.length > opponent.length:
        closeness = board.width + board.height - manhattan(ctx.cell, opponent.head)
        return config.endgame_aggression_weight * max(0, closeness) / 2
    if ctx.me.length < opponent.length:
        return territory_term(ctx) * (config.endgame_territory_multiplier - 1)
    return 0.0


TERMS = (
    ("territory", territory_term),
    ("lookahead", lookahead_term),
    ("aggression", aggression_term),
    ("food", food_term),
    ("wall", wall_term),
    ("tail_chase", tail_chase_term),
    ("trap", trap_term),
    ("endgame", endgame_term),
)


def score_move(state: GameState, move: str, config: EngineConfig = DEFAULT_CONFIG,
               search: typing.Optional[AdversarialSearch] = None) -> MoveScore:
    if search is None:
        search = AdversarialSearch(config)
    ctx = build_context(state, move, config, search)

    space, override = apply_overrides(SPACE_RULES, ctx, ctx.area * config.space_weight)
    result = MoveScore(move=move, terms={"space": space}, override=override)
    for name, term in TERMS:
        result.terms[name] = term(ctx)

    logger.debug("Turn %s %s: %.1f %s", state.turn, move, result.total, result.terms)
    return result
