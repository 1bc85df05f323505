"""Percent of a number: integer results only."""

from .base import FlowSkillContract
from galaxy_genius.services.tiers import difficulty_band
import math
import random

PERCENT_POOLS = {
    "easy": (10, 20, 25, 50),
    "medium": (10, 15, 20, 25, 30, 50),
    "hard": (12, 15, 18, 20, 24, 25, 30, 35),
}
BASE_POOLS = {
    "easy": (20, 40, 50, 60, 80, 100, 120, 160, 200),
    "medium": (40, 60, 80, 100, 120, 160, 200, 240, 300, 400),
    "hard": (120, 160, 180, 200, 240, 300, 360, 400, 480, 500, 600, 800),
}

EASY_PERCENTS = (10, 20, 25, 50)
MEDIUM_PERCENTS = (15, 30)


def _pool_key(band: str) -> str:
    if band in ("rookie", "easy"):
        return "easy"
    if band == "medium":
        return "medium"
    return "hard"


def percent_hints(percent: int, base: int, result: int) -> list[str]:
    if percent == 10:
        return [
            "10% is easy: move one place to the left.",
            f"Rewrite: 10% of {base} = {base} ÷ 10.",
            f"So {base} ÷ 10 = {result}.",
        ]
    if percent == 20 and base % 10 == 0:
        return [
            "10% is easy, and 20% is double 10%.",
            f"Rewrite: 20% of {base} = ({base} ÷ 10) × 2.",
            f"So {base // 10} × 2 = {result}.",
        ]
    if percent == 25:
        return [
            "25% means one quarter.",
            f"Rewrite: 25% of {base} = {base} ÷ 4.",
            f"So {base} ÷ 4 = {result}.",
        ]
    if percent == 50:
        return [
            "50% means half.",
            f"Rewrite: 50% of {base} = {base} ÷ 2.",
            f"So {base} ÷ 2 = {result}.",
        ]
    return [
        "Percent means out of 100.",
        f"Rewrite: {percent}% of {base} = ({percent} × {base}) ÷ 100.",
        f"Compute the product, then divide by 100 to get {result}.",
    ]


class PercentContract(FlowSkillContract):
    template = "percent"
    label = "Percent of Number"
    min_difficulty = 1020
    max_difficulty = 1320
    shapes = ("pct_of_number",)

    def build_variant(self, rng: random.Random, difficulty: int, directive: dict | None = None) -> dict:
        key = _pool_key(difficulty_band(difficulty))
        percent = rng.choice(PERCENT_POOLS[key])
        bases = [base for base in BASE_POOLS[key] if (percent * base) % 100 == 0]
        if bases:
            base = rng.choice(bases)
        else:
            base = (100 // math.gcd(percent, 100)) * rng.randint(4, 20)
        result = percent * base // 100

        return {
            "signature": f"percent-{percent}-{base}",
            "shape_signature": "pct_of_number",
            "format": "numeric_input",
            "prompt": f"{percent}% of {base} = ?",
            "answer": str(result),
            "hints": percent_hints(percent, base, result),
            "tags": ["percents"],
            "slots": {"percent": percent, "base": base, "result": result},
        }

    def explain(self, variant: dict) -> dict:
        s = variant["slots"]
        return {
            "steps": [
                f"{s['percent']}% of {s['base']} = ({s['percent']} ÷ 100) × {s['base']}.",
                f"Answer: {s['result']}.",
            ],
            "final_answer": str(s["result"]),
        }

    def score(self, variant: dict) -> dict[str, int]:
        s = variant["slots"]
        percent = s["percent"]
        tags = variant["tags"]
        tags.append("form:percent")
        breakdown = {"base": 930}
        if percent in EASY_PERCENTS:
            tags.append(f"pattern:{percent}%")
            breakdown["easy_percent"] = -150
        elif percent in MEDIUM_PERCENTS:
            breakdown["medium_percent"] = -40
        else:
            tags.append("pattern:awkward-percent")
            breakdown["awkward_percent"] = 120
        if s["base"] >= 400:
            breakdown["larger_base"] = 50
        return breakdown
