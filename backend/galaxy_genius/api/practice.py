import logging
import random

from fastapi import APIRouter

from galaxy_genius.api.models_practice import (
    BonusNextRequest,
    BonusNextResponse,
    FlowNextRequest,
    FlowNextResponse,
    PuzzleNextRequest,
    PuzzleNextResponse,
    RatingUpdateRequest,
    RatingUpdateResponse,
    TemplateInfo,
    TemplatesResponse,
)
from galaxy_genius.services.adaptive import expected_probability, update_rating
from galaxy_genius.services.bonus_generator import bonus_points_target, create_bonus_challenge
from galaxy_genius.services.flow_generator import generate_adaptive_flow_item
from galaxy_genius.services.puzzle_generator import generate_adaptive_puzzle_choices
from galaxy_genius.services.telemetry import emit_event, instrument
from galaxy_genius.services.tiers import tier_for_rating
from galaxy_genius.skills.registry import flow_catalog, puzzle_catalog

logger = logging.getLogger("galaxy_genius.v1")
router = APIRouter(prefix="/api/v1", tags=["practice-v1"])


@router.get("/templates", response_model=TemplatesResponse)
@instrument(route="/api/v1/templates", version="v1")
def list_templates():
    return TemplatesResponse(
        flow=[TemplateInfo(**entry) for entry in flow_catalog()],
        puzzle=[TemplateInfo(**entry) for entry in puzzle_catalog()],
    )


@router.post("/flow/next", response_model=FlowNextResponse)
@instrument(route="/api/v1/flow/next", version="v1")
def flow_next(req: FlowNextRequest):
    rng = random.Random(req.seed)
    item = generate_adaptive_flow_item(
        round(req.rating),
        options=req.options,
        rng=rng,
        **req.history.generator_kwargs(),
    )
    emit_event(
        "flow_item", route="/api/v1/flow/next", version="v1",
        template=item.template, rating=req.rating, difficulty=item.difficulty, ok=True,
    )
    return FlowNextResponse(item=item, history=req.history.record(item))


@router.post("/puzzle/next", response_model=PuzzleNextResponse)
@instrument(route="/api/v1/puzzle/next", version="v1")
def puzzle_next(req: PuzzleNextRequest):
    rng = random.Random(req.seed)
    items = generate_adaptive_puzzle_choices(
        round(req.rating), count=req.choices, rng=rng, **req.history.generator_kwargs(),
    )
    history = req.history
    for item in items:
        emit_event(
            "puzzle_item", route="/api/v1/puzzle/next", version="v1",
            template=item.template, rating=req.rating, difficulty=item.difficulty, ok=True,
        )
        history = history.record(item)
    return PuzzleNextResponse(items=items, history=history)


@router.post("/rating/update", response_model=RatingUpdateResponse)
@instrument(route="/api/v1/rating/update", version="v1")
def rating_update(req: RatingUpdateRequest):
    streak = req.history.correct_streak if req.history is not None else req.correct_streak
    expected = expected_probability(req.rating, req.difficulty)
    new_rating = update_rating(req.rating, req.difficulty, req.correct, streak)
    logger.debug(
        "rating %.1f -> %.1f (difficulty=%d correct=%s streak=%d)",
        req.rating, new_rating, req.difficulty, req.correct, streak,
    )
    return RatingUpdateResponse(
        rating=round(new_rating, 2),
        expected=round(expected, 4),
        tier=tier_for_rating(new_rating),
        history=req.history.record_answer(req.correct) if req.history is not None else None,
    )


@router.post("/bonus/next", response_model=BonusNextResponse)
@instrument(route="/api/v1/bonus/next", version="v1")
def bonus_next(req: BonusNextRequest):
    challenge = create_bonus_challenge(
        req.game_mode, req.last_segment, req.rating, req.run_difficulties,
        rng=random.Random(req.seed),
    )
    emit_event(
        "bonus_challenge", route="/api/v1/bonus/next", version="v1",
        template=challenge.template_key, rating=req.rating, difficulty=challenge.difficulty, ok=True,
    )
    return BonusNextResponse(challenge=challenge, points_target=bonus_points_target(challenge))
