#!/usr/bin/env python3
"""
Galaxy Genius Puzzle Verification
=================================
Draws N puzzles per rating and checks decimal freedom, the stars parity law
and that area_yn produces both "yes" and "no".

Usage:
    cd backend
    python scripts/verify_puzzles.py         # N = 8000 per rating
    python scripts/verify_puzzles.py -n 500 --seed 3
"""

import argparse
import logging
import os
import random
import sys
from collections import Counter

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from galaxy_genius.services.history import PuzzleHistory  # noqa: E402
from galaxy_genius.services.puzzle_generator import generate_adaptive_puzzle_item  # noqa: E402
from galaxy_genius.utils.quality_gate import run_puzzle_audit  # noqa: E402

logger = logging.getLogger("galaxy_genius.verify_puzzles")

RATINGS = (1050, 1250, 1450)


def run_rating(rating: int, n: int, rng: random.Random) -> bool:
    history = PuzzleHistory()
    items = []
    for _ in range(n):
        item = generate_adaptive_puzzle_item(rating, rng=rng, **history.generator_kwargs())
        items.append(item)
        history = history.record(item)

    templates = Counter(item.template for item in items)
    area = Counter(item.core_answer for item in items if item.template == "area_yn")
    print(f"\n=== Puzzles (rating {rating}) ===")
    print("Template frequency:", ", ".join(f"{k} {v}" for k, v in templates.most_common()))
    print("area_yn answers:", dict(area))

    passed, failures = run_puzzle_audit(items)
    for failure in failures[:20]:
        logger.error("[verify_puzzles] rating %d: %s", rating, failure)
    return passed


def main() -> int:
    parser = argparse.ArgumentParser(description="Sample puzzles per rating and audit them.")
    parser.add_argument("-n", "--count", type=int, default=8000, help="puzzles per rating")
    parser.add_argument("--seed", type=int, default=None)
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s %(message)s")
    rng = random.Random(args.seed)
    if all([run_rating(rating, args.count, rng) for rating in RATINGS]):
        print("\nAll puzzle audits passed.")
        return 0
    print("\nPuzzle audit FAILED.")
    return 1


if __name__ == "__main__":
    sys.exit(main())
