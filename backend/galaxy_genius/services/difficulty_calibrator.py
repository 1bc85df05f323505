"""
Difficulty Calibrator: scores a raw draft onto the rating scale.

Flow drafts run three deterministic steps:

  STEP A: Score
    Ask the template contract for its named contributions (base, digits,
    carry, easy-pattern discounts, ...). The contract also appends its
    form:/pattern:/requires: tags to the draft.

  STEP B: Clamp
    Sum the contributions, apply the template's own ceiling (one-step
    equations top out at 1045 unless the right side is negative) and clamp
    into [800, 1700].

  STEP C: Label
    Map the final difficulty to a tier label (Rookie … Master).

Puzzle drafts are centred between the draw target and the family's base
difficulty, nudged by the variant's own hint and a small jitter, then
clamped into [900, 1700].
"""
from __future__ import annotations

import logging
import random
from typing import Optional

from galaxy_genius.core.config import get_settings
from galaxy_genius.services.tiers import MAX_DIFFICULTY, MIN_DIFFICULTY, clamp, tier_for_rating
from galaxy_genius.skills.base import FlowSkillContract, PuzzleSkillContract

logger = logging.getLogger(__name__)

PUZZLE_MIN_DIFFICULTY = 900
PUZZLE_JITTER = 35


class DifficultyCalibrator:
    """Stateless; all randomness comes from the caller's rng."""

    def calibrate(self, variant: dict, skill: FlowSkillContract) -> dict:
        """
        Returns:
        {
            "difficulty": int,
            "tier": str,
            "tags": [str, ...],        # de-duplicated, order kept
            "breakdown": {str: int},
        }
        """
        # ── STEP A: Score ──────────────────────────────────────────────────
        breakdown = skill.score(variant)

        # ── STEP B: Clamp ──────────────────────────────────────────────────
        raw = round(sum(breakdown.values()))
        difficulty = int(clamp(raw, MIN_DIFFICULTY, MAX_DIFFICULTY))
        if skill.score_cap is not None and "sub:negative" not in variant["tags"]:
            difficulty = min(difficulty, skill.score_cap)

        # ── STEP C: Label ──────────────────────────────────────────────────
        tier = tier_for_rating(difficulty)

        if get_settings().debug_flow_difficulty:
            logger.debug(
                "[difficulty_calibrator] template=%s shape=%s raw=%d difficulty=%d tier=%s",
                skill.template, variant.get("shape_signature"), raw, difficulty, tier,
            )

        return {
            "difficulty": difficulty,
            "tier": tier,
            "tags": list(dict.fromkeys(variant["tags"])),
            "breakdown": breakdown,
        }

    def calibrate_puzzle(
        self,
        variant: dict,
        skill: PuzzleSkillContract,
        target: int,
        rng: random.Random,
    ) -> int:
        centred = (target + skill.base_difficulty) / 2
        jitter = rng.randint(-PUZZLE_JITTER, PUZZLE_JITTER)
        difficulty = round(centred + variant.get("difficulty_hint", 0) + jitter)
        return int(clamp(difficulty, PUZZLE_MIN_DIFFICULTY, MAX_DIFFICULTY))


# ---------------------------------------------------------------------------
# Module-level singleton
# ---------------------------------------------------------------------------

_CALIBRATOR: Optional[DifficultyCalibrator] = None


def get_difficulty_calibrator() -> DifficultyCalibrator:
    """Return the module-level singleton."""
    global _CALIBRATOR
    if _CALIBRATOR is None:
        _CALIBRATOR = DifficultyCalibrator()
    return _CALIBRATOR
