"""
Tests for the composite move scorer.
"""

from types import SimpleNamespace

import pytest

from serpent.config import DEFAULT_CONFIG
from serpent.lookahead import AdversarialSearch
from serpent.scoring import (
    SPACE_RULES,
    TERMS,
    OverrideRule,
    aggression_term,
    apply_overrides,
    build_context,
    endgame_term,
    score_move,
    tail_chase_term,
    territory_term,
    wall_term,
)


def _rule_context(area, length, viable=True, choke=False):
    return SimpleNamespace(
        area=area,
        me=SimpleNamespace(length=length),
        viable=viable,
        choke=choke,
        config=DEFAULT_CONFIG,
    )


class TestSpaceRules:
    """Tests for the ordered space override rules."""

    def test_suffocation_wins_over_everything(self):
        ctx = _rule_context(area=2, length=5, viable=False, choke=True)
        assert apply_overrides(SPACE_RULES, ctx, 4.0) == (DEFAULT_CONFIG.suffocation_penalty, "suffocation")

    def test_dead_space_adds_penalty_to_base(self):
        ctx = _rule_context(area=10, length=3, viable=False, choke=True)
        score, name = apply_overrides(SPACE_RULES, ctx, 20.0)
        assert name == "dead_space"
        assert score == DEFAULT_CONFIG.dead_space_penalty + 20.0

    def test_choke_subtracts_penalty(self):
        ctx = _rule_context(area=10, length=3, viable=True, choke=True)
        score, name = apply_overrides(SPACE_RULES, ctx, 20.0)
        assert name == "choke"
        assert score == 20.0 - DEFAULT_CONFIG.choke_penalty

    def test_no_rule_keeps_base(self):
        ctx = _rule_context(area=10, length=3)
        assert apply_overrides(SPACE_RULES, ctx, 20.0) == (20.0, None)

    def test_non_final_rule_lets_later_rules_run(self):
        rules = (
            OverrideRule("double", lambda ctx: True, lambda ctx, score: score * 2, final=False),
            OverrideRule("plus_one", lambda ctx: True, lambda ctx, score: score + 1),
            OverrideRule("never", lambda ctx: True, lambda ctx, score: 0.0),
        )
        assert apply_overrides(rules, None, 5.0) == (11.0, "plus_one")


class TestScoreMove:
    """Tests for score_move and the individual terms."""

    def test_every_term_is_reported(self, make_snake, make_state, fast_config):
        state = make_state([make_snake("me", [(5, 5), (5, 4), (5, 3)])])

        result = score_move(state, "up", fast_config)

        assert set(result.terms) == {"space"} | {name for name, _ in TERMS}
        assert result.total == pytest.approx(sum(result.terms.values()))

    def test_suffocating_move_is_overridden(self, make_snake, make_state, fast_config):
        state = make_state([make_snake("me", [(1, 0), (2, 0), (3, 0)])], width=4, height=1)

        result = score_move(state, "left", fast_config)

        assert result.override == "suffocation"
        assert result.terms["space"] == fast_config.suffocation_penalty

    def test_critical_health_goes_for_food(self, make_snake, make_state, fast_config):
        """At health 10 the move onto food outscores the others by the critical bonus."""
        me = make_snake("me", [(5, 5), (5, 4), (5, 3)], health=10)
        state = make_state([me], food=[(6, 5)])

        scores = {move: score_move(state, move, fast_config) for move in ("up", "left", "right")}

        assert scores["right"].terms["food"] == fast_config.critical_food_bonus
        assert scores["up"].terms["food"] == pytest.approx(fast_config.critical_food_bonus / 3)
        assert scores["right"].total > scores["up"].total
        assert scores["right"].total > scores["left"].total

    def test_context_restores_health_only_on_the_simulated_copy(self, make_snake, make_state, fast_config):
        me = make_snake("me", [(5, 5), (5, 4), (5, 3)], health=10)
        state = make_state([me], food=[(6, 5)])

        ctx = build_context(state, "right", fast_config, AdversarialSearch(fast_config))

        assert ctx.eating
        assert ctx.after.health == 100
        assert ctx.after.length == 4
        assert ctx.me.health == 10
        assert state.you.health == 10

    def test_wall_term_counts_edges(self, make_snake, make_state, fast_config):
        search = AdversarialSearch(fast_config)
        edge = make_state([make_snake("me", [(1, 5), (2, 5)])])
        corner = make_state([make_snake("me", [(1, 0), (2, 0)])])
        middle = make_state([make_snake("me", [(5, 5), (6, 5)])])

        assert wall_term(build_context(edge, "left", fast_config, search)) == -3.0
        assert wall_term(build_context(corner, "left", fast_config, search)) == -6.0
        assert wall_term(build_context(middle, "left", fast_config, search)) == 0.0

    def test_tail_chase_near_own_tail(self, make_snake, make_state, fast_config):
        search = AdversarialSearch(fast_config)
        state = make_state([make_snake("me", [(5, 5), (5, 4), (5, 3), (6, 3)])])

        assert tail_chase_term(build_context(state, "right", fast_config, search)) == fast_config.tail_chase_bonus
        assert tail_chase_term(build_context(state, "up", fast_config, search)) == 0.0

    def test_no_tail_chase_when_hungry(self, make_snake, make_state, fast_config):
        search = AdversarialSearch(fast_config)
        state = make_state([make_snake("me", [(5, 5), (5, 4), (5, 3), (6, 3)], health=40)])
        assert tail_chase_term(build_context(state, "right", fast_config, search)) == 0.0

    def test_aggression_denies_contested_food(self, make_snake, make_state, fast_config):
        me = make_snake("me", [(6, 5), (5, 5), (4, 5)])
        opponent = make_snake("opponent", [(8, 5), (9, 5)])
        state = make_state([me, opponent], food=[(7, 5)])

        ctx = build_context(state, "right", fast_config, AdversarialSearch(fast_config))

        # 5 * (6 - 1) for closing in on the shorter snake, plus the food denial
        assert aggression_term(ctx) == 25 + fast_config.food_denial_bonus

    def test_endgame_longer_snake_closes_in(self, make_snake, make_state, fast_config):
        me = make_snake("me", [(5, 5), (4, 5), (3, 5), (2, 5)])
        opponent = make_snake("opponent", [(8, 5), (9, 5)])
        state = make_state([me, opponent])

        ctx = build_context(state, "right", fast_config, AdversarialSearch(fast_config))

        assert endgame_term(ctx) == fast_config.endgame_aggression_weight * 20 / 2

    def test_endgame_shorter_snake_doubles_territory(self, duel_state, fast_config):
        ctx = build_context(duel_state, "up", fast_config, AdversarialSearch(fast_config))
        assert endgame_term(ctx) == pytest.approx(territory_term(ctx))

    def test_endgame_ignored_with_several_opponents(self, make_snake, make_state, fast_config):
        state = make_state([
            make_snake("me", [(5, 5), (4, 5)]),
            make_snake("a", [(1, 1), (1, 0)]),
            make_snake("b", [(9, 9), (9, 10)]),
        ])
        ctx = build_context(state, "up", fast_config, AdversarialSearch(fast_config))
        assert endgame_term(ctx) == 0.0
