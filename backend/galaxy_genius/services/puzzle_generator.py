"""
Puzzle item generator.

Each candidate gets its own jittered target, picks a puzzle family whose band
covers it (weighted, word stories dominate), and builds drafts until one clears
the puzzle quality gate. Candidates are ranked by distance to the target, jump
from the previous puzzle and how often the family already shows up in the
used ids; the pick is uniform among the best `puzzle_top_pool_size`.
"""

import logging
import random
from typing import Iterable, Optional

from galaxy_genius.core.config import get_settings
from galaxy_genius.models.items import PuzzleExtension, PuzzleItem
from galaxy_genius.services.difficulty_calibrator import (
    PUZZLE_MIN_DIFFICULTY,
    get_difficulty_calibrator,
)
from galaxy_genius.services.hint_ladder import build_hint_ladder, ensure_step_count
from galaxy_genius.services.tiers import MAX_DIFFICULTY, clamp
from galaxy_genius.skills.base import PuzzleSkillContract
from galaxy_genius.skills.registry import PUZZLE_SKILL_REGISTRY, get_puzzle_skill
from galaxy_genius.utils.quality_gate import hard_issues, puzzle_draft_issues

logger = logging.getLogger(__name__)

TARGET_JITTER = 60
BUILD_ATTEMPTS = 20
JUMP_FREE_WINDOW = 110
JUMP_MULTIPLIER = 2.8
TEMPLATE_REPEAT_STEP = 5
TEMPLATE_REPEAT_CAP = 25
FALLBACK_TEMPLATE = "word_story"


def _pick_family(rng: random.Random, difficulty: int) -> PuzzleSkillContract:
    pool = [skill for skill in PUZZLE_SKILL_REGISTRY.values() if skill.covers(difficulty)]
    if not pool:
        return get_puzzle_skill(FALLBACK_TEMPLATE)
    return rng.choices(pool, weights=[skill.weight for skill in pool], k=1)[0]


def _draft(skill: PuzzleSkillContract, rng: random.Random, target: int) -> dict:
    variant = skill.build_variant(rng, target)
    steps = ensure_step_count(variant["steps"])
    draft = {
        "id": f"{skill.template}-{variant['signature']}",
        "title": variant["title"],
        "core_prompt": variant["core_prompt"],
        "core_answer": variant["core_answer"],
        "hint_ladder": build_hint_ladder(variant["hints"], steps),
        "solution_steps": steps,
        "difficulty": get_difficulty_calibrator().calibrate_puzzle(variant, skill, target, rng),
        "template": skill.template,
        "puzzle_type": skill.puzzle_type,
        "answer_type": variant["answer_type"],
        "choices": variant.get("choices"),
        "tags": list(dict.fromkeys(variant["tags"])),
        "extensions": [
            PuzzleExtension(label=f"Bonus {index}", prompt=prompt, answer=answer)
            for index, (prompt, answer) in enumerate(variant["extensions"], start=1)
        ],
    }
    draft["issues"] = puzzle_draft_issues(draft)
    return draft


def build_puzzle_candidate(target: int, rng: random.Random) -> dict:
    for _ in range(BUILD_ATTEMPTS):
        skill = _pick_family(rng, target)
        draft = _draft(skill, rng, target)
        if not hard_issues(draft["issues"]):
            return draft
        logger.debug("[puzzle_generator] rejected %s: %s", draft["id"], draft["issues"])

    logger.info("[puzzle_generator] no family cleared the gate at %d; using a word story", target)
    return _draft(get_puzzle_skill(FALLBACK_TEMPLATE), rng, target)


def template_repeat_penalty(template: str, used_ids: Iterable[str]) -> int:
    repeats = sum(1 for used_id in used_ids if used_id.split("-")[0] == template)
    return min(TEMPLATE_REPEAT_CAP, repeats * TEMPLATE_REPEAT_STEP)


def _rank_score(draft: dict, target: int, prev_difficulty: Optional[int], used: set) -> float:
    score = abs(draft["difficulty"] - target)
    if prev_difficulty is not None:
        score += max(0, abs(draft["difficulty"] - prev_difficulty) - JUMP_FREE_WINDOW) * JUMP_MULTIPLIER
    return score + template_repeat_penalty(draft["template"], used)


def _to_item(draft: dict) -> PuzzleItem:
    return PuzzleItem(**{key: value for key, value in draft.items() if key != "issues"})


def generate_adaptive_puzzle_item(
    rating: int,
    used_ids: Iterable[str],
    prev_difficulty: Optional[int] = None,
    *,
    rng: Optional[random.Random] = None,
) -> PuzzleItem:
    settings = get_settings()
    rng = rng or random.Random()
    used = set(used_ids)
    target = int(clamp(rating, PUZZLE_MIN_DIFFICULTY, MAX_DIFFICULTY))

    candidates = []
    for _ in range(settings.puzzle_candidate_count):
        jittered = int(clamp(
            target + rng.randint(-TARGET_JITTER, TARGET_JITTER),
            PUZZLE_MIN_DIFFICULTY, MAX_DIFFICULTY,
        ))
        candidates.append(build_puzzle_candidate(jittered, rng))

    fresh = [draft for draft in candidates if draft["id"] not in used]
    pool = fresh or candidates

    ranked = sorted(pool, key=lambda draft: _rank_score(draft, target, prev_difficulty, used))
    chosen = rng.choice(ranked[: settings.puzzle_top_pool_size])
    return _to_item(chosen)


def generate_adaptive_puzzle_choices(
    rating: int,
    used_ids: Iterable[str],
    count: int = 2,
    prev_difficulty: Optional[int] = None,
    *,
    rng: Optional[random.Random] = None,
) -> list[PuzzleItem]:
    """`count` puzzles for a pick-one screen; later picks avoid earlier ids.

    Every choice is ranked against the same `prev_difficulty`, the last puzzle
    actually played, so the jump penalty applies to each of them.
    """
    rng = rng or random.Random()
    taken = set(used_ids)
    choices = []
    for _ in range(count):
        item = generate_adaptive_puzzle_item(rating, taken, prev_difficulty, rng=rng)
        choices.append(item)
        taken.add(item.id)
    return choices
