"""Base skill contracts for Flow and Puzzle item generation.

Every template family (e.g. MultDiv, Geometry, Stars) subclasses one of the
contracts below and overrides the relevant methods. Contracts are stateless:
all randomness comes from the `rng` passed in, so a single registry instance
is safe to share between sessions.
"""

import random


class FlowSkillContract:
    template: str = ""
    label: str = ""
    min_difficulty: int = 800
    max_difficulty: int = 1700
    weight: float = 1.0
    shapes: tuple[str, ...] = ()
    score_cap: int | None = None

    def build_variant(
        self,
        rng: random.Random,
        difficulty: int,
        directive: dict | None = None,
    ) -> dict:
        """
        Build one concrete draft for a draw at `difficulty`.

        Returns:
        {
            "signature": str,          # id suffix, unique per operand set
            "shape_signature": str,
            "format": "numeric_input" | "multiple_choice",
            "prompt": str,
            "answer": str,
            "choices": [str, ...] | None,
            "hints": [str, ...],       # raw hints, the ladder builder fixes the length
            "tags": [str, ...],
            "slots": {...},            # structured operands
        }
        """
        raise NotImplementedError

    def explain(self, variant: dict) -> dict:
        """
        Deterministic explanation builder.
        Returns structured explanation:
        {
            "steps": [str, ...],
            "final_answer": str | None
        }
        """
        return {
            "steps": [],
            "final_answer": variant.get("answer"),
        }

    def validate(self, variant: dict, rating: int) -> list[str]:
        """Template-specific issue codes for a draft served at `rating`."""
        return []

    def score(self, variant: dict) -> dict[str, int]:
        """Named difficulty contributions; their sum is the item difficulty.

        May append form:/pattern:/requires: tags to variant["tags"].
        """
        return {"base": 900}

    def covers(self, difficulty: int, slack: int = 80) -> bool:
        return self.min_difficulty - slack <= difficulty <= self.max_difficulty + slack

    def band_distance(self, difficulty: int) -> int:
        if difficulty < self.min_difficulty:
            return self.min_difficulty - difficulty
        if difficulty > self.max_difficulty:
            return difficulty - self.max_difficulty
        return 0


class PuzzleSkillContract:
    template: str = ""
    puzzle_type: str = "word"
    min_difficulty: int = 900
    max_difficulty: int = 1700
    base_difficulty: int = 1100
    weight: float = 1.0

    def build_variant(self, rng: random.Random, difficulty: int) -> dict:
        """
        Returns:
        {
            "signature": str,
            "title": str,
            "core_prompt": str,
            "core_answer": str,
            "answer_type": "choice" | "short_text",
            "choices": [str, ...] | None,
            "hints": [str, ...],
            "steps": [str, ...],
            "tags": [str, ...],
            "extensions": [(str, str), ...],   # bonus prompts
            "difficulty_hint": int,
        }
        """
        raise NotImplementedError

    def covers(self, difficulty: int, slack: int = 80) -> bool:
        return self.min_difficulty - slack <= difficulty <= self.max_difficulty + slack
