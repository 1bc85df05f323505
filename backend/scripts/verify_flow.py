#!/usr/bin/env python3
"""
Galaxy Genius Flow Verification
===============================
Draws N Flow items per tier the way a real run does (caller-held history,
used ids cleared every 10 items) and reports template mix, tier labels,
negative-subtraction rate, trivial rate at Hard+ and geometry subtype
coverage at rating >= 1275.

Usage:
    cd backend
    python scripts/verify_flow.py            # N = 20000 per tier
    python scripts/verify_flow.py -n 2000 --seed 7

Exit code 1 when any audit fails.
"""

import argparse
import logging
import os
import random
import sys
from collections import Counter

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from galaxy_genius.services.flow_generator import generate_adaptive_flow_item  # noqa: E402
from galaxy_genius.services.history import FlowHistory  # noqa: E402
from galaxy_genius.utils.quality_gate import parse_add_sub, run_flow_audit  # noqa: E402

logger = logging.getLogger("galaxy_genius.verify_flow")

# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------

TIERS = (
    ("Rookie", 810),
    ("Easy", 850),
    ("Medium", 975),
    ("Hard", 1125),
    ("Expert", 1275),
    ("Master", 1425),
)
CLEAR_USED_EVERY = 10


def _percent(part: int, whole: int) -> str:
    return f"{(part / whole * 100) if whole else 0:.2f}%"


def run_tier(name: str, rating: int, n: int, rng: random.Random) -> bool:
    history = FlowHistory()
    items = []
    for i in range(n):
        if i % CLEAR_USED_EVERY == 0:
            history = history.model_copy(update={"used_ids": []})
        item = generate_adaptive_flow_item(rating, rng=rng, **history.generator_kwargs())
        items.append(item)
        history = history.record(item)

    templates = Counter(item.template for item in items)
    tiers = Counter(item.tier for item in items)
    subtractions = [item for item in items if (parse_add_sub(item.prompt) or (0, ""))[1] == "-"]
    negative = sum(1 for item in subtractions if int(item.answer) < 0)
    geometry = Counter(item.shape_signature for item in items if item.template == "geometry")

    print(f"\n=== {name} (rating {rating}) ===")
    print("Template frequency:", ", ".join(f"{k} {_percent(v, n)}" for k, v in templates.most_common()))
    print("Label frequency:", ", ".join(f"{k} {_percent(v, n)}" for k, v in tiers.most_common()))
    print(f"Negative subtraction rate: {_percent(negative, len(subtractions))} ({negative}/{len(subtractions)})")
    if rating >= 1275:
        print("Geometry subtype counts:", dict(geometry))

    passed, failures = run_flow_audit(items, rating)
    for failure in failures[:20]:
        logger.error("[verify_flow] %s: %s", name, failure)
    return passed


def main() -> int:
    parser = argparse.ArgumentParser(description="Sample Flow items per tier and audit them.")
    parser.add_argument("-n", "--count", type=int, default=20000, help="items per tier")
    parser.add_argument("--seed", type=int, default=None)
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s %(message)s")
    rng = random.Random(args.seed)
    results = [run_tier(name, rating, args.count, rng) for name, rating in TIERS]
    if all(results):
        print("\nAll Flow audits passed.")
        return 0
    print("\nFlow audit FAILED.")
    return 1


if __name__ == "__main__":
    sys.exit(main())
