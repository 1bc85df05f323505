"""Smallest shared multiple (LCM), multiple choice."""

from .base import FlowSkillContract
from galaxy_genius.utils.answer_computer import lcm, make_unique_choices
import random

LEFT_POOL = (6, 8, 9, 10, 12, 14, 15, 16, 18)
RIGHT_POOL = (9, 10, 12, 14, 15, 18, 20, 21, 24)


class LcmContract(FlowSkillContract):
    template = "lcm"
    label = "Smallest Shared Multiple"
    min_difficulty = 1320
    max_difficulty = 1700
    shapes = ("common_multiple_smallest",)

    def build_variant(self, rng: random.Random, difficulty: int, directive: dict | None = None) -> dict:
        a = rng.choice(LEFT_POOL)
        b = rng.choice([value for value in RIGHT_POOL if value != a])
        smallest = lcm(a, b)
        distractors = [
            smallest + rng.choice((2, 4, 6, 8, 10, 12)),
            max(2, smallest - rng.choice((2, 4, 6, 8, 10))),
            a * b,
            max(a, b) * rng.choice((2, 3, 4)),
            a + b,
        ]
        choices = make_unique_choices(rng, smallest, distractors, 4)

        return {
            "signature": f"smallest-common-multiple-{a}-{b}",
            "shape_signature": "common_multiple_smallest",
            "format": "multiple_choice",
            "prompt": f"Smallest shared multiple: {a} and {b}",
            "answer": str(smallest),
            "choices": [str(choice) for choice in choices],
            "hints": [
                f"List multiples of {a}: {a}, {a * 2}, {a * 3}, ...",
                f"List multiples of {b}: {b}, {b * 2}, {b * 3}, ...",
                "The first shared match is the smallest shared multiple.",
            ],
            "tags": ["factors_multiples"],
            "slots": {"a": a, "b": b, "result": smallest},
        }

    def explain(self, variant: dict) -> dict:
        result = variant["slots"]["result"]
        return {
            "steps": [
                f"First shared match: {result}.",
                "This is also called the least common multiple.",
            ],
            "final_answer": str(result),
        }

    def score(self, variant: dict) -> dict[str, int]:
        variant["tags"].append("form:common_multiple")
        return {"base": 1250}
