"""Tests for the template contracts and the registry."""
import random
from fractions import Fraction

import pytest
from galaxy_genius.skills.add_sub import AddSubContract, has_borrow, has_carry
from galaxy_genius.skills.geometry import GEOMETRY_SHAPES, GeometryContract
from galaxy_genius.skills.mult_div import MultDivContract
from galaxy_genius.skills.puzzle_spatial import AreaYesNoContract, factor_pairs
from galaxy_genius.skills.puzzle_strategy import StarsGameContract, stars_answer
from galaxy_genius.skills.puzzle_word import story_values
from galaxy_genius.skills.registry import (
    FLOW_SKILL_REGISTRY,
    PUZZLE_SKILL_REGISTRY,
    flow_catalog,
    get_flow_skill,
    get_puzzle_skill,
    puzzle_catalog,
)
from galaxy_genius.utils.quality_gate import has_decimal_token


def _all_text(variant: dict) -> list[str]:
    return [variant["prompt"], variant["answer"], *variant["hints"], *(variant.get("choices") or [])]


# ── Registry ──────────────────────────────────────────────────────────────────

class TestRegistry:
    def test_flow_catalog_order_and_bands(self):
        keys = [entry["key"] for entry in flow_catalog()]
        assert keys == [
            "add_sub", "mult_div", "fraction_compare", "order_ops", "equation_1",
            "percent", "ratio", "geometry", "equation_2", "lcm",
        ]
        geometry = next(entry for entry in flow_catalog() if entry["key"] == "geometry")
        assert (geometry["min_difficulty"], geometry["max_difficulty"]) == (1120, 1500)

    def test_puzzle_catalog(self):
        keys = {entry["key"] for entry in puzzle_catalog()}
        assert {"stars", "area_yn", "word_story", "logic", "pattern"} <= keys

    def test_unknown_key_raises(self):
        with pytest.raises(KeyError):
            get_flow_skill("calculus")
        with pytest.raises(KeyError):
            get_puzzle_skill("sudoku")


# ── Every flow builder ────────────────────────────────────────────────────────

class TestFlowBuilders:
    @pytest.mark.parametrize("template", list(FLOW_SKILL_REGISTRY))
    def test_decimal_free_and_consistent(self, template):
        skill = FLOW_SKILL_REGISTRY[template]
        rng = random.Random(template)
        low, high = skill.min_difficulty, skill.max_difficulty
        for difficulty in range(low, high + 1, max(1, (high - low) // 10)):
            for _ in range(15):
                variant = skill.build_variant(rng, difficulty)
                assert not any(has_decimal_token(text) for text in _all_text(variant)), variant
                assert variant["hints"], variant
                if variant["format"] == "multiple_choice":
                    assert variant["choices"].count(variant["answer"]) == 1
                    assert len(set(variant["choices"])) == len(variant["choices"])
                else:
                    int(variant["answer"])
                steps = skill.explain(variant)["steps"]
                assert steps

    @pytest.mark.parametrize("template", list(FLOW_SKILL_REGISTRY))
    def test_score_is_named_contributions(self, template):
        skill = FLOW_SKILL_REGISTRY[template]
        variant = skill.build_variant(random.Random(0), skill.min_difficulty)
        breakdown = skill.score(variant)
        assert "base" in breakdown
        assert all(isinstance(value, int) for value in breakdown.values())


# ── add_sub ───────────────────────────────────────────────────────────────────

class TestAddSub:
    def test_regroup_helpers(self):
        assert has_carry(27, 15)
        assert not has_carry(21, 15)
        assert has_borrow(42, 17)
        assert not has_borrow(48, 17)

    def test_single_digit_directive(self):
        skill = AddSubContract()
        rng = random.Random(5)
        for _ in range(200):
            s = skill.build_variant(rng, 800, {"single_digit_only": True})["slots"]
            assert s["left"] <= 9 and s["right"] <= 9
            assert s["result"] >= 0

    def test_hard_band_always_regroups(self):
        skill = AddSubContract()
        rng = random.Random(8)
        for _ in range(300):
            variant = skill.build_variant(rng, 1100)
            s = variant["slots"]
            if s["op"] == "+":
                assert has_carry(s["left"], s["right"])
            else:
                assert has_borrow(s["left"], s["right"])
                assert s["result"] >= 8 or s["result"] < 0
            assert skill.validate(variant, 1200) == []

    def test_negative_subtraction_flagged_below_975(self):
        skill = AddSubContract()
        variant = skill._subtraction(14, 30, "addsub_sub_neg", "sub")
        assert "negative_difference" in skill.validate(variant, 900)
        assert "negative_difference" not in skill.validate(variant, 1000)


# ── mult_div ──────────────────────────────────────────────────────────────────

class TestMultDiv:
    def test_trivial_rejected_at_hard(self):
        skill = MultDivContract()
        assert "trivial_for_hard_plus" in skill.validate(skill._multiplication(7, 8), 1200)
        assert "trivial_for_hard_plus" in skill.validate(skill._division(6, 9), 1200)
        assert "trivial_for_hard_plus" not in skill.validate(skill._multiplication(17, 8), 1200)

    def test_soft_level_codes(self):
        skill = MultDivContract()
        assert "times_table_below_level" in skill.validate(skill._multiplication(7, 8), 1000)
        assert "times_ten_below_level" in skill.validate(skill._multiplication(10, 34), 1100)
        assert "halves_fifths_below_level" in skill.validate(skill._division(5, 40), 1150)
        assert skill.validate(skill._multiplication(7, 8), 900) == []

    def test_division_is_exact(self):
        variant = MultDivContract()._division(13, 7)
        assert variant["prompt"] == "91 ÷ 13 = ?"
        assert variant["answer"] == "7"


# ── geometry ──────────────────────────────────────────────────────────────────

class TestGeometry:
    def test_rect_area_prompt(self):
        skill = GeometryContract()
        variant = skill.build_variant(random.Random(1), 1300, {"shape": "geom_rect_area"})
        prompt = variant["prompt"].lower()
        assert "rectangle" in prompt and "area" in prompt
        a, b = variant["slots"]["dims"]
        assert int(variant["answer"]) == a * b

    def test_triangle_area_is_whole(self):
        skill = GeometryContract()
        rng = random.Random(2)
        for _ in range(200):
            variant = skill.build_variant(rng, 1300, {"shape": "geom_tri_area"})
            base, height = variant["slots"]["dims"]
            assert (base * height) % 2 == 0
            assert int(variant["answer"]) * 2 == base * height

    @pytest.mark.parametrize("shape", GEOMETRY_SHAPES)
    def test_directive_controls_shape(self, shape):
        variant = GeometryContract().build_variant(random.Random(3), 1200, {"shape": shape})
        assert variant["shape_signature"] == shape


# ── fractions ─────────────────────────────────────────────────────────────────

class TestFractionCompare:
    def test_answer_is_the_larger_or_same(self):
        skill = get_flow_skill("fraction_compare")
        rng = random.Random(12)
        for _ in range(200):
            variant = skill.build_variant(rng, 1000)
            first, second = variant["choices"][0], variant["choices"][1]
            left, right = Fraction(first), Fraction(second)
            if left == right:
                assert variant["answer"] == "same"
            else:
                assert variant["answer"] == (first if left > right else second)


# ── puzzles ───────────────────────────────────────────────────────────────────

class TestStars:
    def test_parity_law(self):
        assert stars_answer(12) == "no"
        assert stars_answer(7) == "yes"
        assert stars_answer(8) == "no"

    def test_id_signature_matches_answer(self):
        skill = StarsGameContract()
        rng = random.Random(4)
        for _ in range(100):
            variant = skill.build_variant(rng, 1300)
            assert variant["core_answer"] == stars_answer(int(variant["signature"]))


class TestAreaYesNo:
    def test_factor_pairs(self):
        assert factor_pairs(36) == [(2, 18), (3, 12), (4, 9), (6, 6)]

    def test_answer_matches_areas_and_both_outcomes_occur(self):
        skill = AreaYesNoContract()
        rng = random.Random(6)
        answers = set()
        for _ in range(200):
            variant = skill.build_variant(rng, 1200)
            _, side, rect_a, rect_b, answer = variant["signature"].split("-")
            expected = "yes" if int(side) ** 2 == int(rect_a) * int(rect_b) else "no"
            assert answer == expected == variant["core_answer"]
            answers.add(answer)
        assert answers == {"yes", "no"}


class TestWordStory:
    def test_story_kinds(self):
        rng = random.Random(1)
        ranges = {"a": [4, 9], "b": [3, 9], "c": [2, 6]}
        values = story_values("multiply", rng, ranges)
        assert values["answer"] == values["a"] * values["b"]
        values = story_values("divide", rng, ranges)
        assert values["total"] // values["b"] == values["answer"]
        values = story_values("sub_add", rng, ranges)
        assert values["mid"] > 0
        assert values["answer"] == values["mid"] + values["c"]

    def test_unknown_kind(self):
        with pytest.raises(ValueError):
            story_values("exponent", random.Random(1), {"a": [1, 2], "b": [1, 2]})

    def test_every_puzzle_family_builds(self):
        rng = random.Random(9)
        for key, skill in PUZZLE_SKILL_REGISTRY.items():
            variant = skill.build_variant(rng, skill.base_difficulty)
            assert variant["core_answer"], key
            assert len(variant["extensions"]) == 2, key
            if variant["answer_type"] == "choice":
                assert variant["core_answer"] in variant["choices"], key
