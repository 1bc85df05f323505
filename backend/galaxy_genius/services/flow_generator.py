"""
Flow item generator.

One call produces one FlowItem:

  1. choose_target_difficulty  → a draw target near the rating
  2. build `flow_candidate_count` candidates, each one:
       TemplateSelector → skill.build_variant → DifficultyCalibrator
       → skill.validate + quality_gate.flow_draft_issues
     A candidate must clear every issue on the strict pass; the fallback pass
     only rejects hard issues; the emergency draft is an easy add/sub that is
     never negative and never trivial.
  3. drop used ids, apply the caller's caps, rank by
       |difficulty - target| + jump penalty + diversity penalty
     and pick uniformly among the best `flow_top_pool_size`.

All history is supplied by the caller; nothing is kept between calls.
"""

import logging
import random
from typing import Iterable, Optional, Sequence

from pydantic import BaseModel, ConfigDict

from galaxy_genius.core.config import get_settings
from galaxy_genius.models.items import FlowItem
from galaxy_genius.services.adaptive import (
    choose_target_difficulty,
    flow_diversity_penalty,
    jump_penalty,
)
from galaxy_genius.services.difficulty_calibrator import get_difficulty_calibrator
from galaxy_genius.services.hint_ladder import build_hint_ladder
from galaxy_genius.services.template_selector import TemplateSelector
from galaxy_genius.services.tiers import MAX_DIFFICULTY, MIN_DIFFICULTY, clamp
from galaxy_genius.skills.base import FlowSkillContract
from galaxy_genius.skills.registry import get_flow_skill
from galaxy_genius.utils.quality_gate import flow_draft_issues, hard_issues

logger = logging.getLogger(__name__)

STRICT_ATTEMPTS = 12
FALLBACK_ATTEMPTS = 20
DRAW_JITTER = 45
EMERGENCY_MAX_DIFFICULTY = 940
CAP_RETRY_FACTOR = 4

ROOKIE_ONRAMP_RATING = 830
ROOKIE_SINGLE_DIGIT_RATING = 820
ROOKIE_MAX_DIFFICULTY = 840


class FlowOptions(BaseModel):
    model_config = ConfigDict(frozen=True)

    allowed_templates: Optional[list[str]] = None
    max_difficulty_score: Optional[int] = None
    max_jump_from_prev: Optional[int] = None
    force_single_digit_add_sub: bool = False


def _draft_from_variant(
    skill: FlowSkillContract,
    variant: dict,
    rating: int,
) -> dict:
    calibrated = get_difficulty_calibrator().calibrate(variant, skill)
    explanation = skill.explain(variant)
    draft = {
        "id": f"{skill.template}-{variant['signature']}",
        "template": skill.template,
        "shape_signature": variant.get("shape_signature"),
        "tier": calibrated["tier"],
        "difficulty": calibrated["difficulty"],
        "format": variant.get("format", "numeric_input"),
        "prompt": variant["prompt"],
        "answer": variant["answer"],
        "choices": variant.get("choices"),
        "hints": build_hint_ladder(variant["hints"], explanation["steps"]),
        "solution_steps": explanation["steps"],
        "tags": calibrated["tags"],
        "difficulty_breakdown": calibrated["breakdown"],
    }
    draft["issues"] = skill.validate(variant, rating) + flow_draft_issues(draft, rating)
    return draft


def _emergency_draft(target: int, rating: int, rng: random.Random, single_digit: bool) -> dict:
    skill = get_flow_skill("add_sub")
    difficulty = int(clamp(target, MIN_DIFFICULTY, EMERGENCY_MAX_DIFFICULTY))
    variant = skill.build_variant(rng, difficulty, {"single_digit_only": single_digit})
    logger.info("[flow_generator] emergency add_sub at difficulty %d (rating %d)", difficulty, rating)
    return _draft_from_variant(skill, variant, rating)


def build_candidate(
    target: int,
    rating: int,
    rng: random.Random,
    selector: TemplateSelector,
    recent_templates: Sequence[str] = (),
    recent_shapes: Sequence[str] = (),
    allowed_templates: Optional[Iterable[str]] = None,
    single_digit: bool = False,
) -> dict:
    """One candidate draft that clears the quality gate."""
    allowed = list(allowed_templates) if allowed_templates else None
    directive_base = {"single_digit_only": single_digit}

    def attempt(difficulty: int) -> dict:
        skill = selector.pick_template(difficulty, rng, recent_templates, allowed)
        directive = dict(directive_base)
        shape = selector.pick_shape(skill, rng, recent_shapes)
        if shape:
            directive["shape"] = shape
        return _draft_from_variant(skill, skill.build_variant(rng, difficulty, directive), rating)

    for _ in range(STRICT_ATTEMPTS):
        difficulty = int(clamp(target + rng.randint(-DRAW_JITTER, DRAW_JITTER), MIN_DIFFICULTY, MAX_DIFFICULTY))
        draft = attempt(difficulty)
        if not draft["issues"]:
            return draft

    fallback_difficulty = int(clamp(target, MIN_DIFFICULTY, MAX_DIFFICULTY))
    for _ in range(FALLBACK_ATTEMPTS):
        draft = attempt(fallback_difficulty)
        if not hard_issues(draft["issues"]):
            logger.debug(
                "[flow_generator] fallback pass accepted %s with soft issues %s",
                draft["id"], draft["issues"],
            )
            return draft

    return _emergency_draft(target, rating, rng, single_digit)


def _narrow(pool: list[dict], keep) -> list[dict]:
    narrowed = [draft for draft in pool if keep(draft)]
    return narrowed or pool


def _to_item(draft: dict) -> FlowItem:
    return FlowItem(**{key: value for key, value in draft.items() if key != "issues"})


def flow_item_from_variant(skill: FlowSkillContract, variant: dict, rating: int) -> FlowItem:
    """Score and wrap a hand-built variant without running candidate search."""
    return _to_item(_draft_from_variant(skill, variant, rating))


def generate_adaptive_flow_item(
    rating: int,
    used_ids: Iterable[str],
    prev_difficulty: Optional[int] = None,
    recent_templates: Optional[Sequence[str]] = None,
    recent_shapes: Optional[Sequence[str]] = None,
    *,
    recent_pattern_tags: Optional[Sequence[str]] = None,
    correct_streak: int = 0,
    options: Optional[FlowOptions] = None,
    rng: Optional[random.Random] = None,
) -> FlowItem:
    settings = get_settings()
    rng = rng or random.Random()
    options = options or FlowOptions()
    used = set(used_ids)
    recent_templates = list(recent_templates or [])
    recent_shapes = list(recent_shapes or [])
    recent_pattern_tags = list(recent_pattern_tags or [])

    allowed = options.allowed_templates
    max_difficulty = options.max_difficulty_score
    single_digit = options.force_single_digit_add_sub
    if rating <= ROOKIE_ONRAMP_RATING:
        allowed = allowed or ["add_sub"]
        max_difficulty = min(max_difficulty or ROOKIE_MAX_DIFFICULTY, ROOKIE_MAX_DIFFICULTY)
        single_digit = single_digit or rating <= ROOKIE_SINGLE_DIGIT_RATING

    target = choose_target_difficulty(rating, correct_streak, rng)
    if max_difficulty is not None:
        target = min(target, max_difficulty)

    selector = TemplateSelector()

    def candidate(draw_target: int) -> dict:
        return build_candidate(
            draw_target, rating, rng, selector,
            recent_templates, recent_shapes, allowed, single_digit,
        )

    candidates = [candidate(target) for _ in range(settings.flow_candidate_count)]
    fresh = [draft for draft in candidates if draft["id"] not in used]
    pool = fresh or candidates

    if allowed:
        pool = _narrow(pool, lambda draft: draft["template"] in allowed)
    if max_difficulty is not None:
        within = [draft for draft in pool if draft["difficulty"] <= max_difficulty]
        for _ in range(settings.flow_candidate_count * CAP_RETRY_FACTOR):
            if within:
                break
            retry = candidate(target)
            if retry["difficulty"] <= max_difficulty and retry["id"] not in used:
                within.append(retry)
        if within:
            pool = within
        else:
            logger.info("[flow_generator] nothing under difficulty cap %d; serving easiest", max_difficulty)
            pool = [min(pool, key=lambda draft: draft["difficulty"])]
    if options.max_jump_from_prev is not None and prev_difficulty is not None:
        pool = _narrow(
            pool,
            lambda draft: abs(draft["difficulty"] - prev_difficulty) <= options.max_jump_from_prev,
        )

    scored = []
    for draft in pool:
        score = (
            abs(draft["difficulty"] - target)
            + jump_penalty(draft["difficulty"], prev_difficulty)
            + flow_diversity_penalty(
                draft["template"], draft["shape_signature"], draft["tags"],
                recent_templates, recent_shapes, recent_pattern_tags,
            )
        )
        scored.append((score, draft))
        if settings.debug_flow_difficulty:
            logger.debug(
                "[flow_generator] candidate id=%s difficulty=%d score=%.1f",
                draft["id"], draft["difficulty"], score,
            )

    scored.sort(key=lambda pair: pair[0])
    top = scored[: settings.flow_top_pool_size]
    chosen = rng.choice(top)[1]
    return _to_item(chosen)
