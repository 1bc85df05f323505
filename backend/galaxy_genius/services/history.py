"""
Caller-side session history for Flow and Puzzle runs.

The generators never remember anything between calls. A session keeps one of
these objects, passes its fields into the generator and replaces it with the
result of `record(item)`:

    history = FlowHistory()
    item = generate_adaptive_flow_item(rating, **history.generator_kwargs())
    history = history.record(item)

Recent windows hold the last `recent_history_size` entries (duplicates past
that are allowed); used ids roll over after `used_id_window` entries.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict

from galaxy_genius.core.config import get_settings
from galaxy_genius.models.items import FlowItem, PuzzleItem
from galaxy_genius.services.adaptive import trim_recent_history


def _pattern_tags(tags: list[str]) -> list[str]:
    return [tag for tag in tags if tag.startswith("pattern:")]


class FlowHistory(BaseModel):
    model_config = ConfigDict(frozen=True)

    used_ids: list[str] = []
    prev_difficulty: Optional[int] = None
    recent_templates: list[str] = []
    recent_shapes: list[str] = []
    recent_pattern_tags: list[str] = []
    correct_streak: int = 0

    def record(self, item: FlowItem) -> "FlowHistory":
        settings = get_settings()
        size = settings.recent_history_size
        return self.model_copy(update={
            "used_ids": trim_recent_history(self.used_ids + [item.id], settings.used_id_window),
            "prev_difficulty": item.difficulty,
            "recent_templates": trim_recent_history(self.recent_templates + [item.template], size),
            "recent_shapes": trim_recent_history(
                self.recent_shapes + [item.shape_signature or "none"], size
            ),
            "recent_pattern_tags": trim_recent_history(
                self.recent_pattern_tags + _pattern_tags(item.tags), size
            ),
        })

    def record_answer(self, correct: bool) -> "FlowHistory":
        return self.model_copy(update={"correct_streak": self.correct_streak + 1 if correct else 0})

    def generator_kwargs(self) -> dict:
        return {
            "used_ids": list(self.used_ids),
            "prev_difficulty": self.prev_difficulty,
            "recent_templates": list(self.recent_templates),
            "recent_shapes": list(self.recent_shapes),
            "recent_pattern_tags": list(self.recent_pattern_tags),
            "correct_streak": self.correct_streak,
        }


class PuzzleHistory(BaseModel):
    """Template repeats are penalised from the used-id prefixes, so no template window is kept."""

    model_config = ConfigDict(frozen=True)

    used_ids: list[str] = []
    prev_difficulty: Optional[int] = None

    def record(self, item: PuzzleItem) -> "PuzzleHistory":
        settings = get_settings()
        return self.model_copy(update={
            "used_ids": trim_recent_history(self.used_ids + [item.id], settings.used_id_window),
            "prev_difficulty": item.difficulty,
        })

    def generator_kwargs(self) -> dict:
        return {
            "used_ids": list(self.used_ids),
            "prev_difficulty": self.prev_difficulty,
        }
