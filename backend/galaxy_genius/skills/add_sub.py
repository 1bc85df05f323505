"""Addition + subtraction: FlowSkillContract implementation."""

from .base import FlowSkillContract
from galaxy_genius.services.tiers import difficulty_band, is_hard_plus
from galaxy_genius.utils.quality_gate import HARD_RATING, NO_NEGATIVE_BELOW_RATING
import random

_RANGES = {
    "easy": (18, 95, 6, 28),
    "medium": (40, 160, 8, 70),
    "hard": (90, 360, 30, 180),
}
_WIDE_RANGE = (140, 980, 60, 420)


def has_carry(a: int, b: int) -> bool:
    return (a % 10) + (b % 10) >= 10


def has_borrow(left: int, right: int) -> bool:
    return (left % 10) < (right % 10)


def _digits(value: int) -> int:
    return len(str(abs(value)))


class AddSubContract(FlowSkillContract):
    template = "add_sub"
    label = "Addition + Subtraction"
    min_difficulty = 800
    max_difficulty = 980
    shapes = (
        "addsub_add_single_digit",
        "addsub_sub_single_digit",
        "addsub_add_rookie_teen_plus_one_digit",
        "addsub_sub_rookie_teen_minus_one_digit",
        "addsub_add",
        "addsub_sub_pos",
        "addsub_sub_neg",
    )

    def build_variant(self, rng: random.Random, difficulty: int, directive: dict | None = None) -> dict:
        directive = directive or {}
        is_add = rng.random() < 0.5

        if directive.get("single_digit_only"):
            if is_add:
                return self._addition(rng.randint(0, 9), rng.randint(0, 9), "addsub_add_single_digit", "sd-add")
            left = rng.randint(1, 9)
            return self._subtraction(left, rng.randint(0, left), "addsub_sub_single_digit", "sd-sub")

        band = difficulty_band(difficulty)
        if band == "rookie":
            teen = rng.random() < 0.2
            if is_add:
                a = rng.randint(10, 19) if teen else rng.randint(0, 9)
                shape = "addsub_add_rookie_teen_plus_one_digit" if teen else "addsub_add_single_digit"
                return self._addition(a, rng.randint(0, 9), shape, "rookie-add")
            left = rng.randint(10, 19) if teen else rng.randint(1, 9)
            shape = "addsub_sub_rookie_teen_minus_one_digit" if teen else "addsub_sub_single_digit"
            return self._subtraction(left, rng.randint(0, min(left, 9)), shape, "rookie-sub")

        allow_negative = difficulty >= 980 and rng.random() < 0.2
        a_min, a_max, b_min, b_max = _RANGES.get(band, _WIDE_RANGE)
        a = rng.randint(a_min, a_max)
        b = rng.randint(b_min, b_max)
        hard = is_hard_plus(band)

        if is_add:
            # Harder bands always carry.
            if hard and not has_carry(a, b):
                b += 10 - ((a % 10) + (b % 10))
            return self._addition(a, b, "addsub_add", "add")

        left, right = a, b
        if not allow_negative and left < right:
            left, right = right, left
        if hard:
            if not allow_negative and left - right < 20:
                left = right + rng.randint(20, 120)
            if not has_borrow(left, right):
                if left % 10 == 9:
                    left -= rng.randint(1, 9)
                right = (right // 10) * 10 + rng.randint(left % 10 + 1, 9)
            if abs(left - right) < 8:
                left += 10 * rng.randint(2, 4)
        shape = "addsub_sub_neg" if left < right else "addsub_sub_pos"
        return self._subtraction(left, right, shape, "sub")

    def _addition(self, a: int, b: int, shape: str, kind: str) -> dict:
        result = a + b
        if shape == "addsub_add":
            tens = (b // 10) * 10
            ones = b - tens
            hints = [
                f"Split {b} into tens and ones: {tens} and {ones}.",
                f"Rewrite: {a}+{b} = ({a}+{tens}) + {ones}.",
                f"Do each part, then add: {a}+{tens} first, then +{ones} to get {result}.",
            ]
        else:
            hints = [
                f"Start at {a}, then count up {b} more.",
                f"Count one step at a time until you add all {b}.",
                f"Check: {a} + {b} = {result}.",
            ]
        return {
            "signature": f"{kind}-{a}-{b}",
            "shape_signature": shape,
            "format": "numeric_input",
            "prompt": f"{a} + {b} = ?",
            "answer": str(result),
            "hints": hints,
            "tags": ["add_sub"],
            "slots": {"op": "+", "left": a, "right": b, "result": result},
        }

    def _subtraction(self, left: int, right: int, shape: str, kind: str) -> dict:
        result = left - right
        if shape in ("addsub_sub_pos", "addsub_sub_neg"):
            tens = (right // 10) * 10
            ones = right - tens
            hints = [
                f"Break {right} into tens and ones: {tens} and {ones}.",
                f"Rewrite: {left}-{right} = ({left}-{tens})-{ones}.",
                f"Do each part, then check with addition: {result}+{right} = {left}.",
            ]
        else:
            hints = [
                f"Start at {left} and take away {right}.",
                f"Count back {right} steps.",
                f"Check: {result} + {right} = {left}.",
            ]
        return {
            "signature": f"{kind}-{left}-{right}",
            "shape_signature": shape,
            "format": "numeric_input",
            "prompt": f"{left} - {right} = ?",
            "answer": str(result),
            "hints": hints,
            "tags": ["add_sub"],
            "slots": {"op": "-", "left": left, "right": right, "result": result},
        }

    def explain(self, variant: dict) -> dict:
        s = variant["slots"]
        return {
            "steps": [f"{s['left']} {s['op']} {s['right']} = {s['result']}.", f"Answer: {s['result']}."],
            "final_answer": str(s["result"]),
        }

    def validate(self, variant: dict, rating: int) -> list[str]:
        issues = []
        s = variant["slots"]
        if s["op"] == "-" and s["result"] < 0 and rating < NO_NEGATIVE_BELOW_RATING:
            issues.append("negative_difference")
        regrouping = has_carry(s["left"], s["right"]) if s["op"] == "+" else has_borrow(s["left"], s["right"])
        if rating >= HARD_RATING and not regrouping:
            issues.append("easy_add_sub_at_hard")
        return issues

    def score(self, variant: dict) -> dict[str, int]:
        s = variant["slots"]
        left, right, result = s["left"], s["right"], s["result"]
        tags = variant["tags"]
        breakdown = {"base": 840}
        tags.append("form:add_sub")
        if left <= 9 and right <= 9:
            tags.append("pattern:single-digit")
            breakdown["easy:single_digit"] = -100

        if s["op"] == "+":
            breakdown["digits"] = max(_digits(left), _digits(right), _digits(result)) * 55
            if has_carry(left, right):
                tags.append("requires:carry")
                breakdown["carry"] = 120
            else:
                breakdown["no_carry"] = 30
            if left == 10 or right == 10:
                tags.append("pattern:+10")
                breakdown["easy:+10"] = -170
            return breakdown

        breakdown["digits"] = max(_digits(left), _digits(right), _digits(result)) * 60
        if has_borrow(left, right):
            tags.append("requires:borrow")
            breakdown["borrow"] = 130
        else:
            breakdown["no_borrow"] = 35
        if right in (1, 2, 10):
            tags.append(f"pattern:-{right}")
            breakdown["easy:-small"] = -170
        if result < 0:
            tags.append("sub:negative")
            breakdown["negative_result"] = 95
        return breakdown
