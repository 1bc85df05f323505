"""
Puzzle wording bank.

Loads data/puzzle_bank.json once per process. Word stories carry {a}/{b}/{c}
placeholders plus integer ranges; logic and pattern entries are fixed variants.
"""

import json
import logging
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

BANK_PATH = Path(__file__).parent.parent / "data" / "puzzle_bank.json"

_BANK_CACHE: Optional[dict] = None

# Used when the bank file is missing or unreadable.
FALLBACK_BANK: dict = {
    "version": 0,
    "word_stories": [
        {
            "slug": "fuel-cells",
            "kind": "multiply",
            "title": "Space Story: Fuel Cells",
            "prompt": "A shuttle uses {a} fuel cells per hop. It makes {b} hops. How many fuel cells are used?",
            "ranges": {"a": [4, 9], "b": [3, 9]},
            "hints": [
                "Find the number used in one hop.",
                "Count how many hops there are.",
                "Multiply to get the total used.",
            ],
            "steps": [
                "Each hop uses {a} cells.",
                "Multiply hops by cells per hop: {b}×{a}.",
                "{b}×{a} = {answer} cells total.",
            ],
            "difficulty_hint": -5,
        }
    ],
    "logic": [
        {
            "slug": "deduction-docks",
            "title": "Dock Deduction",
            "prompt": "The map is not at Sun Dock. Star Dock is closed for repairs. Which dock has the map?",
            "choices": ["Sun Dock", "Moon Dock", "Star Dock"],
            "answer": "Moon Dock",
            "hints": [
                "Cross out places that are impossible.",
                "Sun Dock is ruled out by the first clue.",
                "Star Dock is ruled out by the second clue, so one dock remains.",
            ],
            "steps": [
                "Not at Sun Dock removes one choice.",
                "Star Dock closed removes another choice.",
                "Only Moon Dock is left, so that is the answer.",
            ],
            "difficulty_hint": 0,
            "tags": ["deduction"],
        }
    ],
    "patterns": [
        {
            "slug": "next-plus-3",
            "kind": "sequence",
            "sequence": "4, 7, 10, 13, ?",
            "choices": ["14", "15", "16", "17"],
            "answer": "16",
            "strategy": "Each number goes up by 3.",
            "difficulty_hint": -35,
        }
    ],
}


def load_puzzle_bank(path: Optional[Path] = None) -> dict:
    """Load puzzle_bank.json once and cache it. An explicit path bypasses the cache."""
    global _BANK_CACHE
    if path is None and _BANK_CACHE is not None:
        return _BANK_CACHE

    source = path or BANK_PATH
    bank = None
    if source.exists():
        try:
            with open(source, encoding="utf-8") as f:
                bank = json.load(f)
            logger.debug("[puzzle_bank] Loaded puzzle bank from %s", source)
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("[puzzle_bank] Failed to parse %s: %s", source, exc)
    else:
        logger.warning("[puzzle_bank] %s not found; using built-in bank", source)

    if bank is None:
        bank = FALLBACK_BANK

    for section in ("word_stories", "logic", "patterns"):
        if not bank.get(section):
            logger.warning("[puzzle_bank] section %r empty; using built-in entries", section)
            bank = {**bank, section: FALLBACK_BANK[section]}

    if path is None:
        _BANK_CACHE = bank
    return bank
