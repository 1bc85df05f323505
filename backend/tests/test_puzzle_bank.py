"""Tests for the puzzle wording bank loader."""
import json
import logging
import random

from galaxy_genius.services.puzzle_bank import FALLBACK_BANK, load_puzzle_bank
from galaxy_genius.skills.puzzle_word import story_values


class TestLoadPuzzleBank:
    def test_shipped_bank_has_every_section(self):
        bank = load_puzzle_bank()
        assert len(bank["word_stories"]) >= 8
        assert bank["logic"]
        assert bank["patterns"]

    def test_cached(self):
        assert load_puzzle_bank() is load_puzzle_bank()

    def test_missing_file_falls_back(self, tmp_path, caplog):
        with caplog.at_level(logging.WARNING):
            bank = load_puzzle_bank(tmp_path / "missing.json")
        assert bank["word_stories"] == FALLBACK_BANK["word_stories"]
        assert "not found" in caplog.text

    def test_bad_json_falls_back(self, tmp_path, caplog):
        path = tmp_path / "bank.json"
        path.write_text("{not json", encoding="utf-8")
        with caplog.at_level(logging.WARNING):
            bank = load_puzzle_bank(path)
        assert bank is FALLBACK_BANK
        assert "Failed to parse" in caplog.text

    def test_empty_section_filled(self, tmp_path):
        path = tmp_path / "bank.json"
        path.write_text(json.dumps({"version": 2, "word_stories": [], "logic": [], "patterns": []}), encoding="utf-8")
        bank = load_puzzle_bank(path)
        assert bank["version"] == 2
        assert bank["logic"] == FALLBACK_BANK["logic"]


class TestShippedStories:
    def test_every_story_renders(self):
        rng = random.Random(1)
        for story in load_puzzle_bank()["word_stories"]:
            values = story_values(story["kind"], rng, story["ranges"])
            story["prompt"].format(**values)
            for line in story["hints"] + story["steps"]:
                line.format(**values)
            assert len(story["hints"]) == 3
            assert len(story["steps"]) == 3
