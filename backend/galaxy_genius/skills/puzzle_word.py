"""Parameterised word stories from the wording bank.

Each bank story names a `kind` that decides how its placeholders are filled:

    multiply   {a} per group, {b} groups          answer = a×b
    divide     {total} shared into groups of {b}  answer = a, total = a×b
    sub_add    start {a}, remove {b}, add {c}      answer = a-b+c, {mid} = a-b
    add        {a} + {b}                           {tens}/{ones} split of b
"""

from .base import PuzzleSkillContract
from .puzzle_spatial import bonus_extensions
from galaxy_genius.services.puzzle_bank import load_puzzle_bank
import random


def story_values(kind: str, rng: random.Random, ranges: dict) -> dict:
    values = {name: rng.randint(low, high) for name, (low, high) in ranges.items()}
    a, b = values["a"], values["b"]

    if kind == "multiply":
        values["answer"] = a * b
    elif kind == "divide":
        values["total"] = a * b
        values["answer"] = a
    elif kind == "sub_add":
        if b >= a:
            a = values["a"] = b + rng.randint(5, 20)
        values["mid"] = a - b
        values["answer"] = a - b + values["c"]
    elif kind == "add":
        values["tens"] = (b // 10) * 10
        values["ones"] = b % 10
        values["a_plus_tens"] = a + values["tens"]
        values["answer"] = a + b
    else:
        raise ValueError(f"unknown word story kind: {kind}")
    return values


class WordStoryContract(PuzzleSkillContract):
    template = "word_story"
    puzzle_type = "word"
    min_difficulty = 900
    max_difficulty = 1650
    base_difficulty = 1160
    weight = 30

    def build_variant(self, rng: random.Random, difficulty: int) -> dict:
        story = rng.choice(load_puzzle_bank()["word_stories"])
        values = story_values(story["kind"], rng, story["ranges"])
        signature_numbers = "-".join(str(values[name]) for name in sorted(story["ranges"]))

        return {
            "signature": f"{story['slug']}-{signature_numbers}",
            "title": story["title"],
            "core_prompt": story["prompt"].format(**values),
            "core_answer": str(values["answer"]),
            "answer_type": "short_text",
            "choices": None,
            "hints": [hint.format(**values) for hint in story["hints"]],
            "steps": [step.format(**values) for step in story["steps"]],
            "tags": ["word_problem", "reasoning"],
            "extensions": bonus_extensions(
                "Change one number and solve again.",
                "Write this story as an equation.",
            ),
            "difficulty_hint": story.get("difficulty_hint", 0) + (15 if values["answer"] >= 100 else 0),
        }
