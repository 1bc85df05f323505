"""Tests for the caller-side FlowHistory / PuzzleHistory helpers."""
import pytest
from pydantic import ValidationError

from galaxy_genius.models.items import FlowItem, PuzzleItem
from galaxy_genius.services.history import FlowHistory, PuzzleHistory


def _flow(n: int, template: str = "mult_div", shape: str | None = "mul_basic", tags=None) -> FlowItem:
    return FlowItem(
        id=f"{template}-{n}", template=template, shapeSignature=shape, difficulty=1000 + n,
        prompt=f"{n} × 3 = ?", answer=str(n * 3), hints=["a", "b", "c"], solution_steps=["s"],
        tags=tags or [],
    )


def _puzzle(n: int) -> PuzzleItem:
    return PuzzleItem(
        id=f"stars-{n}", title="Star Grab", core_prompt="p", core_answer="yes",
        hint_ladder=["a", "b", "c"], solution_steps=["1", "2", "3"], difficulty=1100 + n,
        template="stars",
    )


class TestFlowHistory:
    def test_record_appends_and_truncates(self):
        history = FlowHistory()
        for n in range(10):
            history = history.record(_flow(n))
        assert history.recent_templates == ["mult_div"] * 6
        assert len(history.recent_shapes) == 6
        assert history.prev_difficulty == 1009
        assert history.used_ids == [f"mult_div-{n}" for n in range(10)]

    def test_used_id_window_rolls(self):
        history = FlowHistory()
        for n in range(20):
            history = history.record(_flow(n))
        assert len(history.used_ids) == 12
        assert history.used_ids[0] == "mult_div-8"

    def test_missing_shape_recorded_as_none(self):
        history = FlowHistory().record(_flow(1, shape=None))
        assert history.recent_shapes == ["none"]

    def test_pattern_tags_only(self):
        history = FlowHistory().record(_flow(1, tags=["add_sub", "pattern:-10", "requires:borrow"]))
        assert history.recent_pattern_tags == ["pattern:-10"]

    def test_streak(self):
        history = FlowHistory().record_answer(True).record_answer(True)
        assert history.correct_streak == 2
        assert history.record_answer(False).correct_streak == 0

    def test_immutable(self):
        history = FlowHistory()
        with pytest.raises(ValidationError):
            history.prev_difficulty = 5
        assert history.record(_flow(1)) is not history
        assert history.used_ids == []

    def test_generator_kwargs(self):
        kwargs = FlowHistory().record(_flow(2)).generator_kwargs()
        assert kwargs["used_ids"] == ["mult_div-2"]
        assert kwargs["prev_difficulty"] == 1002
        assert kwargs["correct_streak"] == 0


class TestPuzzleHistory:
    def test_record(self):
        history = PuzzleHistory()
        for n in range(8):
            history = history.record(_puzzle(n))
        assert history.prev_difficulty == 1107
        assert set(history.model_dump()) == {"used_ids", "prev_difficulty"}
        assert history.generator_kwargs() == {
            "used_ids": [f"stars-{n}" for n in range(8)],
            "prev_difficulty": 1107,
        }
