"""
answer_computer.py: deterministic integer arithmetic for item builders.

Python computes every answer, distractor and worked step. All helpers stay in
integer arithmetic so nothing downstream can render a decimal.
"""
import math
import random
from dataclasses import dataclass


def lcm(a: int, b: int) -> int:
    return abs(a * b) // max(1, math.gcd(a, b))


def split_into_friendly_parts(value: int) -> tuple[int, int]:
    """
    Split a factor into two parts that are easy to multiply by.

    Examples:
        27 → (20, 7)
        30 → (15, 15)
        7  → (5, 2)
        3  → (2, 1)
    """
    if value >= 12:
        tens = (value // 10) * 10
        ones = value - tens
        if ones > 0:
            return tens, ones
        half = value // 2
        return half, value - half
    if value >= 4:
        return value - 2, 2
    return value - 1, 1


@dataclass(frozen=True)
class BreakApartPlan:
    split_target: str
    original: int
    part_a: int
    part_b: int
    rewrite_line: str
    part_line_a: str
    part_line_b: str
    value_a: int
    value_b: int


def build_break_apart_plan(left: int, right: int) -> BreakApartPlan:
    """Distributive rewrite of left×right, splitting whichever factor reads easier."""
    if (right >= 10 and right % 10 != 0) or left < 10 or right >= left:
        split_target = "right"
    else:
        split_target = "left"

    original = right if split_target == "right" else left
    part_a, part_b = split_into_friendly_parts(original)

    if split_target == "right":
        return BreakApartPlan(
            split_target=split_target,
            original=original,
            part_a=part_a,
            part_b=part_b,
            rewrite_line=f"{left}×{right} = {left}×{part_a} + {left}×{part_b}",
            part_line_a=f"{left}×{part_a}",
            part_line_b=f"{left}×{part_b}",
            value_a=left * part_a,
            value_b=left * part_b,
        )

    return BreakApartPlan(
        split_target=split_target,
        original=original,
        part_a=part_a,
        part_b=part_b,
        rewrite_line=f"{left}×{right} = {part_a}×{right} + {part_b}×{right}",
        part_line_a=f"{part_a}×{right}",
        part_line_b=f"{part_b}×{right}",
        value_a=part_a * right,
        value_b=part_b * right,
    )


_FILL_OFFSETS = (2, 3, 4, 5, 6, 8, 10, 12, 15, 18, 21, 24, 30)


def make_unique_choices(
    rng: random.Random,
    correct: int,
    candidates: list[int],
    count: int = 4,
) -> list[int]:
    """
    Return `count` distinct positive choices containing `correct` exactly once.

    Candidate distractors are tried first (in shuffled order); any shortfall is
    filled with offsets around the correct answer.
    """
    target_count = max(2, count)
    seen = {correct}
    ordered = [correct]

    pool = list(candidates)
    rng.shuffle(pool)
    for candidate in pool:
        if candidate <= 0 or candidate in seen:
            continue
        seen.add(candidate)
        ordered.append(candidate)
        if len(ordered) >= target_count:
            break

    step = 2
    while len(ordered) < target_count:
        pivot = _FILL_OFFSETS[(len(ordered) + step) % len(_FILL_OFFSETS)]
        for value in (correct + pivot, correct - pivot):
            if value > 0 and value not in seen:
                seen.add(value)
                ordered.append(value)
                if len(ordered) >= target_count:
                    break
        step += 1
        if step > 60 and len(ordered) < target_count:
            value = correct + len(ordered) + step
            if value not in seen:
                seen.add(value)
                ordered.append(value)

    result = ordered[:target_count]
    rng.shuffle(result)
    return result
