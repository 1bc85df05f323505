"""Tests for hint_ladder.build_hint_ladder / ensure_step_count."""
from galaxy_genius.services.hint_ladder import (
    GENERIC_RUNGS,
    STEP_FALLBACK,
    build_hint_ladder,
    ensure_step_count,
)


class TestBuildHintLadder:
    def test_exact_three_kept(self):
        assert build_hint_ladder(["a", "b", "c"]) == ["a", "b", "c"]

    def test_truncates_extra(self):
        assert build_hint_ladder(["a", "b", "c", "d"]) == ["a", "b", "c"]

    def test_trims_and_dedupes(self):
        ladder = build_hint_ladder(["  a ", "a", "", "b"], ["c"])
        assert ladder == ["a", "b", "c"]

    def test_fills_from_unused_solution_steps(self):
        ladder = build_hint_ladder(["First"], ["First", "Second", "Third"])
        assert ladder == ["First", "Second", "Third"]

    def test_fills_from_generic_rungs(self):
        ladder = build_hint_ladder([], [])
        assert ladder == list(GENERIC_RUNGS)

    def test_rungs_are_standalone(self):
        ladder = build_hint_ladder(["Split 27 into 20 and 7."], ["27 = 20 + 7."])
        assert len(ladder) == 3
        for earlier, later in zip(ladder, ladder[1:]):
            assert not later.startswith(earlier)


class TestEnsureStepCount:
    def test_pads_with_fallback(self):
        assert ensure_step_count(["one"]) == ["one", STEP_FALLBACK, STEP_FALLBACK]

    def test_cuts_to_length(self):
        assert ensure_step_count(["1", "2", "3", "4"]) == ["1", "2", "3"]
