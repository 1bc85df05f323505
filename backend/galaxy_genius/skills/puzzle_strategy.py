"""Strategy puzzles: the take-away stars game and one-chance constraint puzzles."""

from .base import PuzzleSkillContract
from .puzzle_spatial import bonus_extensions
import random

MAX_TAKE = 3


def stars_answer(stars: int) -> str:
    """Take 1-3, last star wins: the first player loses exactly on multiples of 4."""
    return "no" if stars % (MAX_TAKE + 1) == 0 else "yes"


class StarsGameContract(PuzzleSkillContract):
    template = "stars"
    puzzle_type = "logic"
    min_difficulty = 900
    max_difficulty = 1650
    base_difficulty = 1200
    weight = 8

    def build_variant(self, rng: random.Random, difficulty: int) -> dict:
        top = max(12, min(40, 12 + (difficulty - 900) // 25))
        stars = rng.randint(5, top)
        answer = stars_answer(stars)
        remainder = stars % 4

        if answer == "yes":
            steps = [
                "Multiples of 4 are losing starts for whoever must move.",
                f"Take {remainder} first so {stars - remainder} stars are left, a multiple of 4.",
                "After each move, take enough to make 4 together, so you take the last star. Answer: yes.",
            ]
        else:
            steps = [
                "With 4 stars, the first player loses if both play perfectly.",
                f"That pattern repeats at every multiple of 4, and {stars} is one.",
                f"So {stars} starts as a losing position. Answer: no.",
            ]

        return {
            "signature": str(stars),
            "title": "Star Grab",
            "core_prompt": (
                f"There are {stars} stars. You go first and can take 1, 2, or 3 each turn. "
                "Whoever takes the last star wins. Do you have a winning strategy?"
            ),
            "core_answer": answer,
            "answer_type": "choice",
            "choices": ["yes", "no"],
            "hints": [
                "Check small starts: 4 stars is a losing start.",
                "Multiples of 4 are losing starts with perfect play.",
                f"Is {stars} a multiple of 4?",
            ],
            "steps": steps,
            "tags": ["strategy", "pattern"],
            "extensions": bonus_extensions(
                "What if you could take 1 or 2 stars each turn?",
                "Find every losing start below 30.",
            ),
            "difficulty_hint": min(60, stars * 2) - 20,
        }


SWITCH_PLAN = "Turn one on for a while, switch it off, turn a second on, then check heat and light."
AIRLOCK_PLAN = (
    "Ask either guard: “If I asked the other guard which door is safe, what would they say?” "
    "then choose the opposite door."
)
ROCKS_PLAN = "Weigh 3 rocks against 3 rocks."

CONSTRAINT_VARIANTS = (
    {
        "slug": "switches-one-trip",
        "title": "Switch Mission",
        "prompt": "Three switches control three lamps in another room. You only get one visit upstairs. What plan works?",
        "choices": [
            SWITCH_PLAN,
            "Turn all three on, wait, then check only brightness.",
            "Turn one on and immediately run upstairs.",
            "Flip random switches quickly and guess.",
        ],
        "answer": SWITCH_PLAN,
        "hints": [
            "Use more than just on or off.",
            "Warm bulbs give extra information after a switch is off.",
            "Make three different lamp states: on, warm-off, and cold-off.",
        ],
        "steps": [
            "Turn Switch A on and wait so that lamp gets warm.",
            "Turn A off, turn B on, and keep C off before your one trip.",
            "Upstairs: glowing lamp is B, warm dark lamp is A, cold dark lamp is C.",
        ],
        "extensions": ("How could you do this with four lamps?", "Why does heat make this puzzle possible?"),
        "tags": ["logic"],
        "difficulty_hint": 60,
    },
    {
        "slug": "airlocks-one-question",
        "title": "Two Airlocks, One Question",
        "prompt": (
            "One guard lies and one tells truth. You can ask ONE yes/no question to ONE guard. "
            "What is the best strategy?"
        ),
        "choices": [
            AIRLOCK_PLAN,
            "Ask Guard A directly which door is safe and trust the answer.",
            "Ask both guards the same question and pick the matching door.",
            "Pick a random door and run.",
        ],
        "answer": AIRLOCK_PLAN,
        "hints": [
            "You need a question that works on both the liar and truth-teller.",
            "Asking what the other guard would say flips truth twice.",
            "After that question, take the opposite door from the answer.",
        ],
        "steps": [
            "Ask either guard what the other guard would point to.",
            "Both guards will point to the wrong door with that question.",
            "Choose the opposite door to reach safety.",
        ],
        "extensions": ("Write your own one-question strategy.", "How would this change with three doors?"),
        "tags": ["logic"],
        "difficulty_hint": 40,
    },
    {
        "slug": "rocks-9-one-weigh",
        "title": "Heavy Rock Check",
        "prompt": (
            "You have 9 space rocks and one is heavier. You get one balance weighing. "
            "What first move gives the best clue?"
        ),
        "choices": [
            ROCKS_PLAN,
            "Weigh 4 rocks against 4 rocks.",
            "Weigh 1 rock against 1 rock.",
            "Weigh all 9 rocks at once.",
        ],
        "answer": ROCKS_PLAN,
        "hints": [
            "One weighing should split the possibilities into equal groups.",
            "Try dividing 9 into three groups of 3.",
            "A 3-vs-3 weighing tells you which group to focus on next.",
        ],
        "steps": [
            "Split rocks into groups: 3, 3, and 3.",
            "Weigh one group of 3 against another group of 3.",
            "If balanced, heavy rock is in the third group; if not, it is in the heavier side.",
        ],
        "extensions": ("How would you solve it with one more weighing?", "Try the same idea with 12 rocks."),
        "tags": ["strategy"],
        "difficulty_hint": 0,
    },
)


class ConstraintContract(PuzzleSkillContract):
    template = "constraint"
    puzzle_type = "constraint"
    min_difficulty = 1080
    max_difficulty = 1700
    base_difficulty = 1300
    weight = 6

    def build_variant(self, rng: random.Random, difficulty: int) -> dict:
        variant = rng.choice(CONSTRAINT_VARIANTS)
        choices = list(variant["choices"])
        rng.shuffle(choices)
        return {
            "signature": variant["slug"],
            "title": variant["title"],
            "core_prompt": variant["prompt"],
            "core_answer": variant["answer"],
            "answer_type": "choice",
            "choices": choices,
            "hints": list(variant["hints"]),
            "steps": list(variant["steps"]),
            "tags": ["constraint", "one_chance"] + variant["tags"],
            "extensions": bonus_extensions(*variant["extensions"]),
            "difficulty_hint": variant["difficulty_hint"],
        }
