"""Tests for adaptive.py: Elo update, target draw and diversity penalty."""
import random

from galaxy_genius.services.adaptive import (
    DIVERSITY_PENALTY,
    MAX_RATING_DELTA,
    choose_target_difficulty,
    expected_probability,
    flow_diversity_penalty,
    jump_penalty,
    k_factor,
    trim_recent_history,
    update_rating,
)


class TestExpectedProbability:
    def test_even_match(self):
        assert expected_probability(1000, 1000) == 0.5

    def test_harder_item_is_less_likely(self):
        assert expected_probability(1000, 1200) < 0.5 < expected_probability(1000, 800)


class TestUpdateRating:
    def test_moves_toward_outcome(self):
        assert update_rating(1000, 1000, correct=True) > 1000
        assert update_rating(1000, 1000, correct=False) < 1000

    def test_k_grows_with_streak(self):
        assert k_factor(0) == 8
        assert k_factor(3) == 12
        assert k_factor(5) == 18
        slow = update_rating(1000, 1000, True, correct_streak=0) - 1000
        fast = update_rating(1000, 1000, True, correct_streak=6) - 1000
        assert fast > slow

    def test_delta_bounded(self):
        for difficulty in (800, 1000, 1700):
            for correct in (True, False):
                delta = update_rating(1000, difficulty, correct, correct_streak=9) - 1000
                assert abs(delta) <= MAX_RATING_DELTA


class TestChooseTargetDifficulty:
    def test_mostly_near_rating(self):
        rng = random.Random(11)
        draws = [choose_target_difficulty(1100, rng=rng) for _ in range(2000)]
        assert all(isinstance(draw, int) for draw in draws)
        mean = sum(draws) / len(draws)
        assert 1090 <= mean <= 1130
        assert min(draws) >= 1100 - 250
        assert max(draws) <= 1100 + 250

    def test_streak_shifts_draw_up(self):
        rng = random.Random(5)
        base = [choose_target_difficulty(1100, 0, rng) for _ in range(2000)]
        hot = [choose_target_difficulty(1100, 6, rng) for _ in range(2000)]
        assert sum(hot) / len(hot) > sum(base) / len(base) + 30

    def test_seed_is_reproducible(self):
        first = [choose_target_difficulty(1000, rng=random.Random(42)) for _ in range(3)]
        second = [choose_target_difficulty(1000, rng=random.Random(42)) for _ in range(3)]
        assert first == second


class TestPenalties:
    def test_jump_penalty_free_window(self):
        assert jump_penalty(1000, None) == 0
        assert jump_penalty(1090, 1000) == 0
        assert jump_penalty(1100, 1000) == 30

    def test_trim_recent_history(self):
        assert trim_recent_history(list("abcdefgh")) == list("cdefgh")
        assert trim_recent_history(["a"], 0) == []

    def test_template_repeat(self):
        penalty = flow_diversity_penalty("mult_div", None, [], ["percent", "mult_div"])
        assert penalty == DIVERSITY_PENALTY["template_last2"]
        penalty = flow_diversity_penalty("mult_div", None, [], ["mult_div", "a", "b", "c"])
        assert penalty == DIVERSITY_PENALTY["template_last4"]

    def test_shape_and_pattern_repeat(self):
        penalty = flow_diversity_penalty(
            "geometry", "geom_tri_area", ["pattern:-10"],
            recent_templates=[], recent_shapes=["geom_tri_area"], recent_pattern_tags=["pattern:-10"],
        )
        assert penalty == DIVERSITY_PENALTY["shape_last2"] + DIVERSITY_PENALTY["pattern_last3"]

    def test_fresh_item_has_no_penalty(self):
        assert flow_diversity_penalty("lcm", "lcm_pair", ["form:common_multiple"], ["ratio"], ["none"]) == 0
