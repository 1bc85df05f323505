"""Tests for bonus_generator: bonus target, strict fractions and flavor routing."""
import random

import pytest
from pydantic import ValidationError

from galaxy_genius.models.items import BonusChallenge, PuzzleItem
from galaxy_genius.services.bonus_generator import (
    FRACTION_DENOMINATORS,
    HARD_LABELS,
    bonus_points_target,
    build_bonus_target,
    create_bonus_challenge,
    explicit_choices,
    fallback_bonus_challenge,
    hard_fraction_fallback,
    make_strict_fraction_challenge,
    run_median,
)


# ── Helper builders ───────────────────────────────────────────────────────────

def _puzzle(answer: str, choices=None) -> PuzzleItem:
    return PuzzleItem(
        id="logic-x", title="Test (Bonus)", core_prompt="p", core_answer=answer,
        hint_ladder=["a", "b", "c"], solution_steps=["1", "2", "3"], difficulty=1200,
        choices=choices,
    )


def _challenge(**overrides) -> dict:
    fields = {
        "id": "bonus-x", "title": "t", "prompt": "p", "choices": ["1/2", "2/3"], "answer": "2/3",
        "hint": "h", "flavor": "fraction", "difficulty": 1150, "label": "Hard",
        "template_key": "fraction_compare", "shapeSignature": "frac_compare_bonus_pair",
        "run_median_difficulty": 950, "bonus_target_difficulty": 1100,
    }
    fields.update(overrides)
    return fields


def _parse(fraction: str) -> tuple[int, int]:
    numerator, denominator = fraction.split("/")
    return int(numerator), int(denominator)


# ── Target ────────────────────────────────────────────────────────────────────

class TestBonusTarget:
    def test_median(self):
        assert run_median([]) == 950
        assert run_median([1100, 900, 1000]) == 1000
        assert run_median([1000, 1001]) == 1001

    def test_target_above_rating_and_median(self):
        assert build_bonus_target(1000, []) == (950, 1120)
        assert build_bonus_target(900, [1200, 1250, 1300]) == (1250, 1400)

    def test_target_clamped(self):
        assert build_bonus_target(500, [800]) == (800, 980)
        assert build_bonus_target(2400, []) == (950, 1600)

    def test_fractional_rating(self):
        assert build_bonus_target(1005.6, []) == (950, 1126)


# ── Fraction flavor ───────────────────────────────────────────────────────────

class TestStrictFraction:
    @pytest.mark.parametrize("seed", range(10))
    def test_strict_pair(self, seed):
        challenge = make_strict_fraction_challenge(1030, 1000, 1150, random.Random(seed))
        assert challenge is not None
        assert challenge.flavor == "fraction"
        assert challenge.label in HARD_LABELS
        assert challenge.difficulty >= 1150
        assert len(challenge.choices) == 2

        (n1, d1), (n2, d2) = (_parse(choice) for choice in challenge.choices)
        assert d1 in FRACTION_DENOMINATORS and d2 in FRACTION_DENOMINATORS
        assert d1 != d2
        bigger = challenge.choices[0] if n1 * d2 > n2 * d1 else challenge.choices[1]
        assert challenge.answer == bigger

    def test_fallback_answer_is_correct(self):
        challenge = hard_fraction_fallback(950, 1100)
        # 23×19 = 437 < 18×25 = 450
        assert challenge.answer == "18/19"
        assert challenge.choices == ["23/25", "18/19"]
        assert challenge.label in HARD_LABELS

    def test_fixed_fallback(self):
        challenge = fallback_bonus_challenge()
        assert challenge.flavor == "fraction"
        assert challenge.run_median_difficulty == 950
        assert challenge.bonus_target_difficulty == 1100
        assert bonus_points_target(challenge) == "puzzle"


# ── Flavor routing ────────────────────────────────────────────────────────────

class TestCreateBonusChallenge:
    def test_rocket_rush_is_hard_fast_math(self):
        challenge = create_bonus_challenge("rocket_rush", "puzzle", 1100, [1000] * 12, rng=random.Random(1))
        assert challenge.flavor == "fast_math"
        assert challenge.template_key != "fraction_compare"
        assert challenge.label in HARD_LABELS
        assert challenge.difficulty >= 1220
        assert challenge.bonus_target_difficulty == 1220
        assert bonus_points_target(challenge) == "fast_math"

    def test_galaxy_mix_follows_last_segment(self):
        after_flow = create_bonus_challenge("galaxy_mix", "flow", 1000, [], rng=random.Random(2))
        after_puzzle = create_bonus_challenge("galaxy_mix", "puzzle", 1000, [], rng=random.Random(2))
        assert after_flow.flavor == "fast_math"
        assert after_puzzle.flavor == "fraction"

    def test_puzzle_orbit(self):
        challenge = create_bonus_challenge("puzzle_orbit", "flow", 1250, [1200] * 10, rng=random.Random(3))
        assert challenge.flavor == "puzzle"
        assert challenge.id.startswith("bonus-")
        assert challenge.difficulty >= 1340 or challenge.id == "bonus-stars-16"
        if challenge.choices:
            assert challenge.answer in challenge.choices

    def test_same_seed_same_challenge(self):
        first = create_bonus_challenge("galaxy_mix", "puzzle", 1100, [], rng=random.Random(9))
        second = create_bonus_challenge("galaxy_mix", "puzzle", 1100, [], rng=random.Random(9))
        assert first == second


# ── Wrapping helpers ──────────────────────────────────────────────────────────

class TestExplicitChoices:
    def test_own_choices_kept(self):
        assert explicit_choices(_puzzle("b", ["a", "b"])) == ["a", "b"]

    def test_word_answers_get_their_set(self):
        assert explicit_choices(_puzzle("Yes")) == ["Yes", "no"]
        assert explicit_choices(_puzzle("sometimes")) == ["always", "sometimes", "never"]

    def test_numeric_answer_is_typed(self):
        assert explicit_choices(_puzzle("42")) == []


class TestBonusChallengeModel:
    def test_valid(self):
        challenge = BonusChallenge(**_challenge())
        assert challenge.shape_signature == "frac_compare_bonus_pair"

    def test_rejects_decimal(self):
        with pytest.raises(ValidationError):
            BonusChallenge(**_challenge(hint="Half is 0.5"))

    def test_rejects_answer_outside_choices(self):
        with pytest.raises(ValidationError):
            BonusChallenge(**_challenge(answer="3/4"))
