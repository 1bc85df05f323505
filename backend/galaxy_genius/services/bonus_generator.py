"""
Bonus challenge generator.

A bonus question closes a run. Its target sits above both the player's rating
and the run's median difficulty:

    target = clamp(max(rating + 120, median + 150), 980, 1600)

Game modes pick the flavor:
  rocket_rush  → a hard Flow item (never a fraction compare)
  puzzle_orbit → a hard Puzzle item
  galaxy_mix   → a hard Flow item after a Flow segment, otherwise a strict
                 near-one fraction pair with denominators 11-25

Every flavor keeps drawing until it finds a Hard+ item at or above its
minimum, then falls back to a fixed hard item, so a challenge is always
returned.
"""

import logging
import math
import random
import re
from typing import Literal, Optional, Sequence

from galaxy_genius.models.items import BonusChallenge, FlowItem, PuzzleItem
from galaxy_genius.services.flow_generator import (
    flow_item_from_variant,
    generate_adaptive_flow_item,
)
from galaxy_genius.services.puzzle_generator import generate_adaptive_puzzle_item
from galaxy_genius.services.tiers import clamp, tier_for_rating
from galaxy_genius.skills.registry import get_flow_skill
from galaxy_genius.utils.answer_computer import lcm

logger = logging.getLogger(__name__)

BonusGameMode = Literal["galaxy_mix", "rocket_rush", "puzzle_orbit"]
BonusSegment = Literal["flow", "puzzle"]

HARD_LABELS = frozenset({"Hard", "Expert", "Master"})
FRACTION_DENOMINATORS = tuple(range(11, 26))
EMPTY_RUN_MEDIAN = 950
BONUS_TARGET_MIN = 980
BONUS_TARGET_MAX = 1600

FRACTION_ATTEMPTS = 160
FAST_MATH_ATTEMPTS = 180
PUZZLE_ATTEMPTS = 120
HOT_STREAK = 6  # streak shift applied to every bonus Flow draw

FRACTION_TITLE = "Fraction Fox"
FAST_MATH_TITLE = "Turbo Burst"
PUZZLE_TITLE = "Puzzle Nova"

_BONUS_SUFFIX_RE = re.compile(r"\s+\(Bonus\)$", re.I)


# ---------------------------------------------------------------------------
# Target
# ---------------------------------------------------------------------------

def run_median(difficulties: Sequence[int]) -> int:
    """Median of the run; an even count rounds the middle pair half-up."""
    if not difficulties:
        return EMPTY_RUN_MEDIAN
    ordered = sorted(difficulties)
    mid = len(ordered) // 2
    if len(ordered) % 2 == 1:
        return ordered[mid]
    return (ordered[mid - 1] + ordered[mid] + 1) // 2


def build_bonus_target(rating: float, run_difficulties: Sequence[int]) -> tuple[int, int]:
    """Returns (run_median_difficulty, bonus_target_difficulty)."""
    median = run_median(run_difficulties)
    target = clamp(max(round(rating) + 120, median + 150), BONUS_TARGET_MIN, BONUS_TARGET_MAX)
    return median, int(target)


# ---------------------------------------------------------------------------
# Wrapping
# ---------------------------------------------------------------------------

def _from_flow(item: FlowItem, title: str, flavor: str, median: int, target: int) -> BonusChallenge:
    return BonusChallenge(
        id=f"bonus-{item.id}",
        title=title,
        prompt=item.prompt,
        choices=item.choices or [],
        answer=item.answer,
        hint=item.hints[0],
        flavor=flavor,
        difficulty=item.difficulty,
        label=item.tier or tier_for_rating(item.difficulty),
        template_key=item.template,
        shape_signature=item.shape_signature or item.template,
        run_median_difficulty=median,
        bonus_target_difficulty=target,
    )


def explicit_choices(puzzle: PuzzleItem) -> list[str]:
    """The puzzle's own choices, or the fixed word set its answer belongs to."""
    if puzzle.choices:
        return list(puzzle.choices)
    answer = puzzle.core_answer.strip()
    for options in (("yes", "no"), ("always", "sometimes", "never")):
        if answer.lower() in options:
            return [answer if option == answer.lower() else option for option in options]
    return []


def _from_puzzle(puzzle: PuzzleItem, median: int, target: int) -> BonusChallenge:
    return BonusChallenge(
        id=f"bonus-{puzzle.id}",
        title=_BONUS_SUFFIX_RE.sub("", puzzle.title).strip() or PUZZLE_TITLE,
        prompt=puzzle.core_prompt,
        choices=explicit_choices(puzzle),
        answer=puzzle.core_answer,
        hint=puzzle.hint_ladder[0] if puzzle.hint_ladder else "Try a smaller example first.",
        flavor="puzzle",
        difficulty=puzzle.difficulty,
        label=tier_for_rating(puzzle.difficulty),
        template_key=puzzle.template or puzzle.id.split("-")[0],
        shape_signature=puzzle.id,
        run_median_difficulty=median,
        bonus_target_difficulty=target,
    )


# ---------------------------------------------------------------------------
# Fraction flavor
# ---------------------------------------------------------------------------

def fraction_bonus_variant(n1: int, d1: int, n2: int, d2: int, signature: str) -> dict:
    """A two-choice fraction compare variant; the pair must not be equal."""
    left, right = f"{n1}/{d1}", f"{n2}/{d2}"
    return {
        "signature": signature,
        "shape_signature": "frac_compare_bonus_pair",
        "format": "multiple_choice",
        "prompt": f"Which fraction is greater? {left} or {right}",
        "answer": left if n1 * d2 > n2 * d1 else right,
        "choices": [left, right],
        "hints": [
            "Both fractions are near 1. Compare how far each is from 1.",
            f"Cross-multiply: {n1}×{d2} and {n2}×{d1}.",
            "The fraction with the larger cross-product is greater.",
        ],
        "tags": ["fractions", "bonus"],
        "slots": {"n1": n1, "d1": d1, "n2": n2, "d2": d2},
    }


def _strict_pair(rng: random.Random) -> Optional[tuple[int, int, int, int]]:
    d1 = rng.choice(FRACTION_DENOMINATORS)
    d2 = rng.choice([d for d in FRACTION_DENOMINATORS if d != d1])
    if lcm(d1, d2) <= 24 or d1 % d2 == 0 or d2 % d1 == 0 or math.gcd(d1, d2) > 3:
        return None
    n1 = d1 - rng.randint(1, 4)
    n2 = d2 - rng.randint(1, 4)
    if math.gcd(n1, d1) != 1 or math.gcd(n2, d2) != 1:
        return None
    # value gap |n1/d1 - n2/d2| must lie in [1/50, 14/100], kept in integers
    gap = abs(n1 * d2 - n2 * d1)
    product = d1 * d2
    if gap * 50 < product or gap * 100 > 14 * product:
        return None
    return n1, d1, n2, d2


def make_strict_fraction_challenge(
    rating: int, median: int, target: int, rng: random.Random
) -> Optional[BonusChallenge]:
    skill = get_flow_skill("fraction_compare")
    minimum = max(1050, min(1200, target), min(median + 90, 1200))
    for _ in range(FRACTION_ATTEMPTS):
        pair = _strict_pair(rng)
        if pair is None:
            continue
        n1, d1, n2, d2 = pair
        variant = fraction_bonus_variant(n1, d1, n2, d2, f"bonus-{d1}-{d2}-{n1}-{n2}")
        item = flow_item_from_variant(skill, variant, rating)
        if item.tier not in HARD_LABELS or item.difficulty < minimum:
            continue
        return _from_flow(item, FRACTION_TITLE, "fraction", median, target)
    return None


def hard_fraction_fallback(median: int, target: int) -> BonusChallenge:
    variant = fraction_bonus_variant(23, 25, 18, 19, "bonus-fallback-23-25-18-19")
    item = flow_item_from_variant(get_flow_skill("fraction_compare"), variant, target)
    return _from_flow(item, FRACTION_TITLE, "fraction", median, target)


# ---------------------------------------------------------------------------
# Fast-math flavor
# ---------------------------------------------------------------------------

def _fast_math_fallback(rating: int) -> FlowItem:
    a, b, c, d = 54, 17, 13, 29
    product = b * c
    result = a + product - d
    expression = f"{a} + {b} × {c} - {d}"
    variant = {
        "signature": f"bonus-fallback-{a}-{b}-{c}-{d}",
        "shape_signature": "expr_order_ops",
        "format": "numeric_input",
        "prompt": f"{expression} = ?",
        "answer": str(result),
        "hints": [
            "Do multiplication before adding or subtracting.",
            f"{b} × {c} = {product}.",
            f"Now solve {a} + {product} - {d}.",
        ],
        "tags": ["order_ops", "bonus"],
        "slots": {
            "a": a, "b": b, "c": c, "d": d,
            "parens": False,
            "expression": expression,
            "plugged": f"{a} + {product} - {d}",
            "result": result,
        },
    }
    return flow_item_from_variant(get_flow_skill("order_ops"), variant, rating)


def create_fast_math_bonus(rating: int, median: int, target: int, rng: random.Random) -> BonusChallenge:
    draw_rating = int(clamp(max(rating, target), 900, 1700))
    minimum = max(1080, min(1380, target), min(median + 75, 1380))
    for _ in range(FAST_MATH_ATTEMPTS):
        item = generate_adaptive_flow_item(draw_rating, [], correct_streak=HOT_STREAK, rng=rng)
        if item.template == "fraction_compare":
            continue
        if item.tier not in HARD_LABELS or item.difficulty < minimum:
            continue
        return _from_flow(item, FAST_MATH_TITLE, "fast_math", median, target)

    logger.info("[bonus_generator] no fast-math item reached %d; using fallback", minimum)
    return _from_flow(_fast_math_fallback(rating), FAST_MATH_TITLE, "fast_math", median, target)


# ---------------------------------------------------------------------------
# Puzzle flavor
# ---------------------------------------------------------------------------

STARS_FALLBACK = PuzzleItem(
    id="stars-16",
    title=PUZZLE_TITLE,
    core_prompt=(
        "There are 16 stars. You go first and can take 1, 2, or 3 each turn. "
        "Last star wins. Do you have a winning strategy?"
    ),
    core_answer="no",
    hint_ladder=[
        "Check small starts: 4 stars is a losing start.",
        "Multiples of 4 are losing starts with perfect play.",
        "16 is a multiple of 4.",
    ],
    solution_steps=[
        "With 4 stars, first player loses if both play perfectly.",
        "That pattern repeats at 8, 12, 16.",
        "So 16 starts as a losing position. Answer: no.",
    ],
    difficulty=1110,
    template="stars",
    puzzle_type="logic",
    answer_type="choice",
    choices=["yes", "no"],
    tags=["strategy", "pattern"],
)


def create_puzzle_bonus(rating: int, median: int, target: int, rng: random.Random) -> BonusChallenge:
    draw_rating = int(clamp(max(rating, target), 950, 1700))
    minimum = max(1030, min(1340, target), min(median + 60, 1340))
    for _ in range(PUZZLE_ATTEMPTS):
        puzzle = generate_adaptive_puzzle_item(draw_rating, [], rng=rng)
        if tier_for_rating(puzzle.difficulty) not in HARD_LABELS or puzzle.difficulty < minimum:
            continue
        return _from_puzzle(puzzle, median, target)

    logger.info("[bonus_generator] no puzzle reached %d; using stars fallback", minimum)
    return _from_puzzle(STARS_FALLBACK, median, target)


# ---------------------------------------------------------------------------
# Entry points
# ---------------------------------------------------------------------------

def create_bonus_challenge(
    game_mode: BonusGameMode,
    last_segment: BonusSegment,
    rating: float,
    run_difficulties: Sequence[int],
    *,
    rng: Optional[random.Random] = None,
) -> BonusChallenge:
    rng = rng or random.Random()
    median, target = build_bonus_target(rating, run_difficulties)
    rating = round(rating)

    if game_mode == "rocket_rush":
        return create_fast_math_bonus(rating, median, target, rng)
    if game_mode == "puzzle_orbit":
        return create_puzzle_bonus(rating, median, target, rng)
    if last_segment == "flow":
        return create_fast_math_bonus(rating, median, target, rng)

    challenge = make_strict_fraction_challenge(rating, median, target, rng)
    if challenge is None:
        logger.info("[bonus_generator] no strict fraction pair reached target %d; using fallback", target)
        challenge = hard_fraction_fallback(median, target)
    return challenge


def fallback_bonus_challenge() -> BonusChallenge:
    """Fixed fraction challenge for callers that cannot generate one."""
    return hard_fraction_fallback(EMPTY_RUN_MEDIAN, 1100)


def bonus_points_target(challenge: BonusChallenge) -> Literal["fast_math", "puzzle"]:
    """Which score bucket a solved bonus credits; fractions count as puzzle points."""
    return "fast_math" if challenge.flavor == "fast_math" else "puzzle"
