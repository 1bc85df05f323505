"""Logic and pattern puzzles drawn from the wording bank."""

from .base import PuzzleSkillContract
from .puzzle_spatial import bonus_extensions
from galaxy_genius.services.puzzle_bank import load_puzzle_bank
import random

LOGIC_EXTENSIONS = {
    "asn": ("Write your own Always/Sometimes/Never statement.", "Test your statement with two examples."),
    "liar": ("Change one clue and solve again.", "Make a version with four players."),
    "deduction": ("Write a new clue that keeps the same answer.", "Make a four-choice version."),
}


class LogicContract(PuzzleSkillContract):
    template = "logic"
    puzzle_type = "logic"
    min_difficulty = 900
    max_difficulty = 1650
    base_difficulty = 1110
    weight = 12

    def build_variant(self, rng: random.Random, difficulty: int) -> dict:
        variant = rng.choice(load_puzzle_bank()["logic"])
        family = variant["slug"].split("-")[0]
        return {
            "signature": variant["slug"],
            "title": variant["title"],
            "core_prompt": variant["prompt"],
            "core_answer": variant["answer"],
            "answer_type": "choice",
            "choices": list(variant["choices"]),
            "hints": list(variant["hints"]),
            "steps": list(variant["steps"]),
            "tags": ["logic"] + list(variant.get("tags", [])),
            "extensions": bonus_extensions(*LOGIC_EXTENSIONS.get(family, LOGIC_EXTENSIONS["deduction"])),
            "difficulty_hint": variant.get("difficulty_hint", 0),
        }


class PatternContract(PuzzleSkillContract):
    template = "pattern"
    puzzle_type = "pattern"
    min_difficulty = 900
    max_difficulty = 1600
    base_difficulty = 1050
    weight = 10

    def build_variant(self, rng: random.Random, difficulty: int) -> dict:
        variant = rng.choice(load_puzzle_bank()["patterns"])
        kind = variant.get("kind", "sequence")
        answer = variant["answer"]

        if kind == "sequence":
            title = "What Comes Next?"
            prompt = f"Find the next number: {variant['sequence']}"
            hints = ["Look at how each step changes.", variant["strategy"], "Use that same change one more time."]
            steps = [
                variant["strategy"],
                "Apply the pattern to the last shown number.",
                f"The next number is {answer}.",
            ]
            tags = ["pattern", "reasoning"]
            extensions = ("Build your own sequence with a hidden rule.", "Challenge a friend with your sequence.")
        elif kind == "odd_one_out":
            title = "Odd One Out"
            prompt = variant["prompt"]
            hints = [
                "Find a rule that fits most choices.",
                "Test each option against that rule.",
                "Pick the one that breaks the rule.",
            ]
            steps = [
                "Check what three choices have in common.",
                variant["reason"],
                f"So the odd one out is {answer}.",
            ]
            tags = ["pattern", "logic"]
            extensions = ("Create your own odd-one-out set.", "Explain your rule in one sentence.")
        else:
            title = "Orbit Symbols"
            prompt = variant["prompt"]
            hints = list(variant.get("hints", []))
            steps = list(variant.get("steps", []))
            tags = ["pattern", "reasoning"]
            extensions = ("Make a 4-symbol cycle.", "Write a cycle that starts with a different symbol.")

        return {
            "signature": variant["slug"],
            "title": title,
            "core_prompt": prompt,
            "core_answer": answer,
            "answer_type": "choice",
            "choices": list(variant["choices"]),
            "hints": hints,
            "steps": steps,
            "tags": tags,
            "extensions": bonus_extensions(*extensions),
            "difficulty_hint": variant.get("difficulty_hint", 0),
        }
