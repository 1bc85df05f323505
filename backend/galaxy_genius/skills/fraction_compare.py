"""Fraction compare: multiple choice, decided by cross-multiplication."""

from .base import FlowSkillContract
from galaxy_genius.services.tiers import difficulty_band
import random


class FractionCompareContract(FlowSkillContract):
    template = "fraction_compare"
    label = "Fraction Compare"
    min_difficulty = 860
    max_difficulty = 1220
    shapes = (
        "frac_compare_pair",
        "frac_compare_same_denominator",
        "frac_compare_same_numerator",
    )

    def build_variant(self, rng: random.Random, difficulty: int, directive: dict | None = None) -> dict:
        band = difficulty_band(difficulty)
        easy_mode = band == "easy" or (band == "medium" and rng.random() < 0.35)

        d1 = rng.randint(3, 12)
        d2 = rng.randint(3, 12)
        n1 = rng.randint(1, d1 - 1)
        n2 = rng.randint(1, d2 - 1)
        while n1 == n2 and d1 == d2:
            d2 = rng.randint(3, 12)
            n2 = rng.randint(1, d2 - 1)

        shape = "frac_compare_pair"
        tags = ["fractions"]
        if easy_mode and rng.random() < 0.5:
            d2 = d1
            n2 = rng.choice([n for n in range(1, d1) if n != n1])
            shape = "frac_compare_same_denominator"
        elif easy_mode:
            n1 = min(n1, d1 - 2) if d1 > 3 else 1
            n2 = n1
            d2 = rng.choice([d for d in range(max(3, n1 + 1), 13) if d != d1])
            shape = "frac_compare_same_numerator"

        left_cross = n1 * d2
        right_cross = n2 * d1
        if left_cross == right_cross:
            answer = "same"
        elif left_cross > right_cross:
            answer = f"{n1}/{d1}"
        else:
            answer = f"{n2}/{d2}"

        if shape == "frac_compare_same_denominator":
            first = "Same bottom number? Bigger top number is bigger."
            second = f"Compare {n1}/{d1} and {n2}/{d2}."
        elif shape == "frac_compare_same_numerator":
            first = "Same top number? Smaller bottom number is bigger."
            second = f"Compare {n1}/{d1} and {n2}/{d2}."
        else:
            first = "Cross-multiply to compare without decimals."
            second = f"{n1}×{d2} vs {n2}×{d1}"

        return {
            "signature": f"frac-{n1}-{d1}-{n2}-{d2}",
            "shape_signature": shape,
            "format": "multiple_choice",
            "prompt": f"{n1}/{d1} or {n2}/{d2}: larger?",
            "answer": answer,
            "choices": [f"{n1}/{d1}", f"{n2}/{d2}", "same"],
            "hints": [first, second, "Pick the larger fraction (or same if equal)."],
            "tags": tags,
            "slots": {"n1": n1, "d1": d1, "n2": n2, "d2": d2},
        }

    def explain(self, variant: dict) -> dict:
        s = variant["slots"]
        return {
            "steps": [
                f"{s['n1']}×{s['d2']} = {s['n1'] * s['d2']}, {s['n2']}×{s['d1']} = {s['n2'] * s['d1']}.",
                f"Larger: {variant['answer']}.",
            ],
            "final_answer": variant["answer"],
        }

    def score(self, variant: dict) -> dict[str, int]:
        s = variant["slots"]
        n1, d1, n2, d2 = s["n1"], s["d1"], s["n2"], s["d2"]
        tags = variant["tags"]
        tags.append("form:fraction_compare")
        breakdown = {
            "base": 960,
            "denominator_size": round((d1 + d2) / 2 * 7),
        }
        # |n1/d1 - n2/d2| < 1/10, kept in integers
        if abs(n1 * d2 - n2 * d1) * 10 < d1 * d2:
            breakdown["close_values"] = 90
        if d1 == d2:
            tags.append("frac:same-denominator")
            breakdown["easy:same-denominator"] = -170
        if n1 == n2:
            tags.append("frac:same-numerator")
            breakdown["easy:same-numerator"] = -170
        return breakdown
