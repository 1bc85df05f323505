from pydantic import BaseModel, Field
from typing import Literal, Optional

from galaxy_genius.models.items import BonusChallenge, FlowItem, PuzzleItem
from galaxy_genius.services.bonus_generator import BonusGameMode, BonusSegment
from galaxy_genius.services.flow_generator import FlowOptions
from galaxy_genius.services.history import FlowHistory, PuzzleHistory


class TemplateInfo(BaseModel):
    key: str
    label: Optional[str] = None
    puzzle_type: Optional[str] = None
    min_difficulty: int
    max_difficulty: int
    weight: float


class TemplatesResponse(BaseModel):
    flow: list[TemplateInfo]
    puzzle: list[TemplateInfo]


class FlowNextRequest(BaseModel):
    rating: float = Field(ge=0, le=3000)  # /rating/update returns fractional ratings
    history: FlowHistory = FlowHistory()
    options: Optional[FlowOptions] = None
    seed: Optional[int] = None  # fixed seed → reproducible item


class FlowNextResponse(BaseModel):
    item: FlowItem
    history: FlowHistory


class PuzzleNextRequest(BaseModel):
    rating: float = Field(ge=0, le=3000)
    history: PuzzleHistory = PuzzleHistory()
    choices: int = Field(default=1, ge=1, le=4)
    seed: Optional[int] = None


class PuzzleNextResponse(BaseModel):
    items: list[PuzzleItem]
    history: PuzzleHistory


class RatingUpdateRequest(BaseModel):
    rating: float
    difficulty: int
    correct: bool
    correct_streak: int = Field(default=0, ge=0)
    history: Optional[FlowHistory] = None  # when sent, its streak wins over correct_streak


class RatingUpdateResponse(BaseModel):
    rating: float
    expected: float
    tier: str
    history: Optional[FlowHistory] = None


class BonusNextRequest(BaseModel):
    game_mode: BonusGameMode = "galaxy_mix"
    last_segment: BonusSegment = "flow"
    rating: float = Field(ge=0, le=3000)
    run_difficulties: list[int] = Field(default_factory=list, max_length=200)
    seed: Optional[int] = None


class BonusNextResponse(BaseModel):
    challenge: BonusChallenge
    points_target: Literal["fast_math", "puzzle"]
