"""Multiplication + division: FlowSkillContract implementation."""

from .base import FlowSkillContract
from galaxy_genius.services.tiers import difficulty_band
from galaxy_genius.utils.answer_computer import build_break_apart_plan
from galaxy_genius.utils.quality_gate import (
    HARD_RATING,
    NO_NEGATIVE_BELOW_RATING,
    is_trivial_division,
    is_trivial_multiplication,
)
import random

# band → (a_min, a_max, b_min, b_max)
MULT_RANGES = {
    "rookie": (2, 5, 2, 5),
    "easy": (3, 12, 3, 12),
    "medium": (12, 44, 3, 9),
    "hard": (12, 48, 11, 29),
    "expert": (18, 64, 12, 39),
    "master": (22, 76, 14, 45),
}

# band → (divisor_min, divisor_max, quotient_min, quotient_max)
DIV_RANGES = {
    "rookie": (2, 5, 1, 5),
    "easy": (3, 12, 1, 12),
    "medium": (4, 12, 12, 36),
    "hard": (7, 19, 15, 48),
    "expert": (8, 24, 18, 55),
    "master": (10, 28, 22, 68),
}

TIMES_TEN_RATING = 1050


def _digits(value: int) -> int:
    return len(str(abs(value)))


def is_times_table(left: int, right: int) -> bool:
    return 3 <= left <= 12 and 3 <= right <= 12


class MultDivContract(FlowSkillContract):
    template = "mult_div"
    label = "Multiplication + Division"
    min_difficulty = 860
    max_difficulty = 1320
    shapes = ("mul_basic", "div_basic")

    def build_variant(self, rng: random.Random, difficulty: int, directive: dict | None = None) -> dict:
        band = difficulty_band(difficulty)
        if rng.random() < 0.55:
            a_min, a_max, b_min, b_max = MULT_RANGES[band]
            a = rng.randint(a_min, a_max)
            b = rng.randint(b_min, b_max)
            if band == "medium" and (a % 10) * b < 10 and rng.random() < 0.5:
                a += rng.randint(2, 5)
            return self._multiplication(a, b)

        d_min, d_max, q_min, q_max = DIV_RANGES[band]
        return self._division(rng.randint(d_min, d_max), rng.randint(q_min, q_max))

    def _multiplication(self, a: int, b: int) -> dict:
        result = a * b
        if a <= 12 and b <= 12:
            hints = [
                "Use a times-table fact you know.",
                f"{a}×{b} = ?",
                f"Count by {min(a, b)} to check your answer.",
            ]
        else:
            plan = build_break_apart_plan(a, b)
            hints = [
                f"Break {plan.original} into {plan.part_a} and {plan.part_b}.",
                f"Rewrite: {plan.rewrite_line}.",
                f"Compute: {plan.part_line_a}={plan.value_a}, {plan.part_line_b}={plan.value_b}, "
                f"then add to get {result}.",
            ]
        return {
            "signature": f"mult-{a}-{b}",
            "shape_signature": "mul_basic",
            "format": "numeric_input",
            "prompt": f"{a} × {b} = ?",
            "answer": str(result),
            "hints": hints,
            "tags": ["mult_div"],
            "slots": {"op": "×", "left": a, "right": b, "result": result},
        }

    def _division(self, divisor: int, quotient: int) -> dict:
        dividend = divisor * quotient
        return {
            "signature": f"div-{dividend}-{divisor}",
            "shape_signature": "div_basic",
            "format": "numeric_input",
            "prompt": f"{dividend} ÷ {divisor} = ?",
            "answer": str(quotient),
            "hints": [
                "Turn division into multiplication.",
                f"{divisor} × ? = {dividend}",
                "That missing number is the answer.",
            ],
            "tags": ["mult_div"],
            "slots": {"op": "÷", "left": dividend, "right": divisor, "result": quotient},
        }

    def explain(self, variant: dict) -> dict:
        s = variant["slots"]
        if s["op"] == "÷":
            steps = [
                f"{s['right']} × {s['result']} = {s['left']}.",
                f"So {s['left']} ÷ {s['right']} = {s['result']}.",
            ]
        elif s["left"] <= 12 and s["right"] <= 12:
            steps = [f"{s['left']} × {s['right']} = {s['result']}.", f"Answer: {s['result']}."]
        else:
            plan = build_break_apart_plan(s["left"], s["right"])
            steps = [
                plan.rewrite_line,
                f"{plan.part_line_a} = {plan.value_a}, {plan.part_line_b} = {plan.value_b}.",
                f"{plan.value_a} + {plan.value_b} = {s['result']}.",
            ]
        return {"steps": steps, "final_answer": str(s["result"])}

    def validate(self, variant: dict, rating: int) -> list[str]:
        s = variant["slots"]
        left, right = s["left"], s["right"]
        issues = []
        if rating >= HARD_RATING:
            trivial = (
                is_trivial_multiplication(left, right)
                if s["op"] == "×"
                else is_trivial_division(left, right)
            )
            if trivial:
                issues.append("trivial_for_hard_plus")

        if s["op"] == "×":
            table = is_times_table(left, right)
            ten = left == 10 or right == 10
        else:
            table = 3 <= right <= 12 and 1 <= s["result"] <= 12
            ten = right == 10
        if table and rating >= NO_NEGATIVE_BELOW_RATING:
            issues.append("times_table_below_level")
        if ten and rating >= TIMES_TEN_RATING:
            issues.append("times_ten_below_level")
        if s["op"] == "÷" and right in (2, 5) and rating >= HARD_RATING:
            issues.append("halves_fifths_below_level")
        return issues

    def score(self, variant: dict) -> dict[str, int]:
        s = variant["slots"]
        tags = variant["tags"]
        breakdown = {"base": 840}

        if s["op"] == "×":
            left, right = s["left"], s["right"]
            tags.append("form:multiply")
            breakdown["digits"] = (_digits(left) + _digits(right)) * 35
            ten_variant = (left == 10 and 3 <= right <= 12) or (right == 10 and 3 <= left <= 12)
            if is_times_table(left, right) or ten_variant:
                tags.append("pattern:times-table")
                breakdown["easy:times-table"] = -220
            if left == 10 or right == 10:
                tags.append("pattern:×10")
                breakdown["easy:×10"] = -150
            if left % 10 == 0 or right % 10 == 0:
                tags.append("pattern:trailing-zero")
                breakdown["easy:trailing-zero"] = -60
            if left >= 10 and right >= 10:
                breakdown["two_digit_by_two_digit"] = 120
            if (left % 10) * (right % 10) >= 10:
                tags.append("requires:carry")
                breakdown["carry"] = 55
            return breakdown

        dividend, divisor, quotient = s["left"], s["right"], s["result"]
        tags.append("form:divide")
        breakdown["digits"] = (_digits(dividend) + _digits(divisor)) * 30
        if 3 <= divisor <= 12 and 1 <= quotient <= 12:
            tags.extend(["div:times-table", "pattern:times-table"])
            breakdown["easy:table-div"] = -220
        if divisor == 10:
            tags.append("pattern:÷10")
            breakdown["easy:÷10"] = -150
        if divisor in (2, 5):
            tags.append("pattern:÷2/÷5")
            breakdown["easy:÷2/÷5"] = -100
        if dividend % 10 == 0 and (divisor % 10 == 0 or divisor in (2, 5)):
            tags.append("pattern:trailing-zero")
            breakdown["easy:trailing-zero"] = -60
        if dividend >= 200:
            breakdown["larger_dividend"] = 70
        if divisor >= 8:
            breakdown["larger_divisor"] = 50
        if quotient >= 20:
            breakdown["larger_quotient"] = 40
        return breakdown
