"""Ratios: a:b = x:d with a whole-number scale factor."""

from .base import FlowSkillContract
from galaxy_genius.services.tiers import difficulty_band
import random


class RatioContract(FlowSkillContract):
    template = "ratio"
    label = "Ratios + Proportions"
    min_difficulty = 1080
    max_difficulty = 1380
    shapes = ("ratio_a_to_b_eq_x_to_d",)

    def build_variant(self, rng: random.Random, difficulty: int, directive: dict | None = None) -> dict:
        band = difficulty_band(difficulty)
        if band in ("rookie", "easy"):
            a, b, scale = rng.randint(1, 8), rng.randint(2, 10), rng.randint(2, 6)
        elif band == "medium":
            a, b, scale = rng.randint(2, 10), rng.randint(3, 13), rng.randint(3, 9)
        else:
            a, b, scale = rng.randint(4, 16), rng.randint(6, 20), rng.randint(4, 12)
        right = b * scale
        answer = a * scale

        return {
            "signature": f"ratio-{a}-{b}-{scale}",
            "shape_signature": "ratio_a_to_b_eq_x_to_d",
            "format": "numeric_input",
            "prompt": f"{a}:{b} = x:{right}",
            "answer": str(answer),
            "hints": [
                f"How did {b} change to {right}?",
                f"Show it: {b} × {scale} = {right}.",
                f"Do the same to {a}: {a} × {scale} = {answer}.",
            ],
            "tags": ["ratios_rates"],
            "slots": {"a": a, "b": b, "scale": scale, "right": right, "x": answer},
        }

    def explain(self, variant: dict) -> dict:
        s = variant["slots"]
        return {
            "steps": [f"Scale by {s['scale']}.", f"x = {s['a']} × {s['scale']} = {s['x']}."],
            "final_answer": str(s["x"]),
        }

    def score(self, variant: dict) -> dict[str, int]:
        s = variant["slots"]
        variant["tags"].append("form:ratio")
        breakdown = {"base": 1070, "scale": s["scale"] * 18}
        if s["a"] <= 6 and s["b"] <= 6 and s["scale"] <= 3:
            breakdown["easy_small_ratio"] = -90
        return breakdown
