"""
Adaptive rating maths.

  expected_probability      Elo-style chance of answering an item correctly.
  update_rating             Rating change after one answer, K scaled by streak.
  choose_target_difficulty  Draw difficulty for the next item: mostly near the
                            rating, sometimes a stretch above, rarely a breather
                            below. A hot streak shifts the whole draw upwards.
  flow_diversity_penalty    Extra ranking cost for repeating recent templates,
                            shapes or pattern tags.
"""

import random
from typing import Optional, Sequence

from galaxy_genius.services.tiers import clamp

FLOW_TARGET_DISTRIBUTION = {
    "base": {
        "near": 0.6,
        "above": 0.25,
        "below": 0.15,
        "center_shift": 0,
        "near_sd": 50,
        "above_range": (50, 140),
        "below_range": (-120, -50),
    },
    "streak": {
        "trigger": 4,
        "near": 0.45,
        "above": 0.45,
        "below": 0.1,
        "center_shift": 40,
        "near_sd": 45,
        "above_range": (50, 140),
        "below_range": (-120, -50),
    },
}

JUMP_FREE_WINDOW = 90
JUMP_MULTIPLIER = 3

DIVERSITY_PENALTY = {
    "template_last2": 40,
    "template_last4": 20,
    "shape_last2": 30,
    "pattern_last3": 25,
}

MAX_RATING_DELTA = 26


def expected_probability(rating: float, difficulty: float) -> float:
    return 1 / (1 + 10 ** ((difficulty - rating) / 400))


def k_factor(correct_streak: int) -> int:
    if correct_streak >= 5:
        return 18
    if correct_streak >= 3:
        return 12
    return 8


def update_rating(rating: float, difficulty: float, correct: bool, correct_streak: int = 0) -> float:
    """New rating after one answer. The change never exceeds ±26."""
    p = expected_probability(rating, difficulty)
    delta = k_factor(correct_streak) * ((1 if correct else 0) - p)
    return rating + clamp(delta, -MAX_RATING_DELTA, MAX_RATING_DELTA)


def choose_target_difficulty(
    rating: float,
    correct_streak: int = 0,
    rng: Optional[random.Random] = None,
) -> int:
    rng = rng or random.Random()
    streaking = correct_streak >= FLOW_TARGET_DISTRIBUTION["streak"]["trigger"]
    config = FLOW_TARGET_DISTRIBUTION["streak" if streaking else "base"]
    center = rating + config["center_shift"]

    roll = rng.random()
    if roll < config["near"]:
        return round(rng.gauss(center, config["near_sd"]))
    if roll < config["near"] + config["above"]:
        low, high = config["above_range"]
    else:
        low, high = config["below_range"]
    return round(rng.uniform(center + low, center + high))


def jump_penalty(difficulty: int, prev_difficulty: Optional[int]) -> float:
    if prev_difficulty is None:
        return 0
    return max(0, abs(difficulty - prev_difficulty) - JUMP_FREE_WINDOW) * JUMP_MULTIPLIER


def trim_recent_history(history: Sequence[str], max_size: int = 6) -> list[str]:
    if max_size <= 0:
        return []
    return list(history)[-max_size:]


def flow_diversity_penalty(
    template: str,
    shape_signature: Optional[str],
    tags: Sequence[str],
    recent_templates: Sequence[str] = (),
    recent_shapes: Sequence[str] = (),
    recent_pattern_tags: Sequence[str] = (),
) -> int:
    penalty = 0
    recent_templates = list(recent_templates)
    if template in recent_templates[-2:]:
        penalty += DIVERSITY_PENALTY["template_last2"]
    elif template in recent_templates[-4:]:
        penalty += DIVERSITY_PENALTY["template_last4"]
    if (shape_signature or "none") in list(recent_shapes)[-2:]:
        penalty += DIVERSITY_PENALTY["shape_last2"]
    recent_patterns = list(recent_pattern_tags)[-3:]
    if any(tag.startswith("pattern:") and tag in recent_patterns for tag in tags):
        penalty += DIVERSITY_PENALTY["pattern_last3"]
    return penalty
