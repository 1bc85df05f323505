from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from typing import Literal, Optional

from galaxy_genius.utils.quality_gate import (
    find_decimal_fields,
    flow_text_fields,
    puzzle_text_fields,
)


class FlowItem(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    template: str
    shape_signature: Optional[str] = Field(default=None, alias="shapeSignature")
    tier: Optional[Literal["Rookie", "Easy", "Medium", "Hard", "Expert", "Master"]] = None
    difficulty: int
    format: Literal["numeric_input", "multiple_choice"] = "numeric_input"
    prompt: str
    answer: str
    choices: Optional[list[str]] = None
    hints: list[str]
    solution_steps: list[str]
    tags: list[str] = []
    difficulty_breakdown: dict[str, int] = {}

    @field_validator("hints")
    @classmethod
    def _three_hints(cls, hints: list[str]) -> list[str]:
        if len(hints) != 3:
            raise ValueError(f"flow items carry exactly 3 hints, got {len(hints)}")
        return hints

    @model_validator(mode="after")
    def _no_decimals(self) -> "FlowItem":
        problems = find_decimal_fields(flow_text_fields(self))
        if problems:
            raise ValueError(f"decimal number in {problems[0]}")
        return self


class PuzzleExtension(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: str
    prompt: str
    answer: str


class PuzzleItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    core_prompt: str
    core_answer: str
    hint_ladder: list[str]
    solution_steps: list[str]
    difficulty: int
    template: Optional[str] = None
    puzzle_type: Optional[Literal["constraint", "logic", "pattern", "word", "spatial"]] = None
    answer_type: Literal["choice", "short_text"] = "short_text"
    choices: Optional[list[str]] = None
    tags: list[str] = []
    extensions: list[PuzzleExtension] = []

    @model_validator(mode="after")
    def _no_decimals(self) -> "PuzzleItem":
        problems = find_decimal_fields(puzzle_text_fields(self))
        if problems:
            raise ValueError(f"decimal number in {problems[0]}")
        return self


class BonusChallenge(BaseModel):
    """End-of-run bonus question wrapped around a Flow or Puzzle item.

    An empty `choices` list means the answer is typed in.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    title: str
    prompt: str
    choices: list[str] = []
    answer: str
    hint: str
    flavor: Literal["fraction", "fast_math", "puzzle"]
    difficulty: int
    label: Literal["Rookie", "Easy", "Medium", "Hard", "Expert", "Master"]
    template_key: str
    shape_signature: str = Field(alias="shapeSignature")
    run_median_difficulty: int
    bonus_target_difficulty: int

    @model_validator(mode="after")
    def _no_decimals(self) -> "BonusChallenge":
        problems = find_decimal_fields([
            ("title", self.title),
            ("prompt", self.prompt),
            ("choices", self.choices),
            ("answer", self.answer),
            ("hint", self.hint),
        ])
        if problems:
            raise ValueError(f"decimal number in {problems[0]}")
        if self.choices and self.answer not in self.choices:
            raise ValueError("bonus answer missing from choices")
        return self
