"""Spatial puzzles: square-to-rectangle yes/no and border tiles."""

from .base import PuzzleSkillContract
import random

YES_PROBABILITY = 0.55
OPEN_ENDED_ANSWER = "varies"


def bonus_extensions(one: str, two: str) -> list[tuple[str, str]]:
    """Two open-ended follow-ups. They have no single right answer, so both
    carry OPEN_ENDED_ANSWER and are never auto-graded."""
    return [(one, OPEN_ENDED_ANSWER), (two, OPEN_ENDED_ANSWER)]


def factor_pairs(value: int) -> list[tuple[int, int]]:
    pairs = []
    a = 2
    while a * a <= value:
        if value % a == 0:
            pairs.append((a, value // a))
        a += 1
    return pairs


def near_miss_rectangles(area: int, limit: int = 24) -> list[tuple[int, int]]:
    """Rectangles whose area is close to, but not equal to, `area`."""
    window = max(18, area // 4)
    return [
        (a, b)
        for a in range(2, limit + 1)
        for b in range(2, limit + 1)
        if a * b != area and abs(a * b - area) <= window
    ]


class AreaYesNoContract(PuzzleSkillContract):
    template = "area_yn"
    puzzle_type = "spatial"
    min_difficulty = 930
    max_difficulty = 1600
    base_difficulty = 1130
    weight = 8

    def build_variant(self, rng: random.Random, difficulty: int) -> dict:
        side, rectangles = 12, []
        for _ in range(20):
            candidate = rng.randint(4, 18)
            rectangles = [pair for pair in factor_pairs(candidate * candidate) if pair != (candidate, candidate)]
            if rectangles:
                side = candidate
                break
        if not rectangles:
            side = 12
            rectangles = [pair for pair in factor_pairs(144) if pair != (12, 12)]

        area = side * side
        if rng.random() < YES_PROBABILITY:
            rect_a, rect_b = rng.choice(rectangles)
        else:
            misses = near_miss_rectangles(area)
            rect_a, rect_b = rng.choice(misses) if misses else (side + 1, side)

        rect_area = rect_a * rect_b
        answer = "yes" if rect_area == area else "no"
        return {
            "signature": f"shape-{side}-{rect_a}-{rect_b}-{answer}",
            "title": "Shape Swap",
            "core_prompt": f"Can a {side}×{side} square become a {rect_a}×{rect_b} rectangle with no stretching?",
            "core_answer": answer,
            "answer_type": "choice",
            "choices": ["yes", "no"],
            "hints": [
                f"Find the square area first: {side}×{side}.",
                f"Now find the rectangle area: {rect_a}×{rect_b}.",
                "If both areas match, answer yes. If not, answer no.",
            ],
            "steps": [
                f"Square area = {side}×{side} = {area}.",
                f"Rectangle area = {rect_a}×{rect_b} = {rect_area}.",
                "Areas match, so the answer is yes." if answer == "yes"
                else "Areas do not match, so the answer is no.",
            ],
            "tags": ["spatial", "reasoning", "geometry_area"],
            "extensions": bonus_extensions(
                "Make your own yes example with different dimensions.",
                "Make your own no example with close numbers.",
            ),
            "difficulty_hint": 20 if answer == "no" else 0,
        }


class BorderTilesContract(PuzzleSkillContract):
    template = "border"
    puzzle_type = "spatial"
    min_difficulty = 980
    max_difficulty = 1650
    base_difficulty = 1220
    weight = 7

    def build_variant(self, rng: random.Random, difficulty: int) -> dict:
        top = 12 if difficulty < 1300 else 18
        width = rng.randint(4, top)
        height = rng.randint(4, top)
        walk = 2 * (width + height)
        border = walk - 4
        return {
            "signature": f"{width}-{height}",
            "title": "Border Tiles",
            "core_prompt": f"A launch pad is {width} by {height} tiles. How many tiles touch the outer edge?",
            "core_answer": str(border),
            "answer_type": "short_text",
            "choices": None,
            "hints": [
                "Count around the edge, not the inside.",
                f"Use 2×({width}+{height}) for the border walk.",
                "Corner tiles get counted twice, so subtract 4.",
            ],
            "steps": [
                f"Start with 2×({width}+{height}) = {walk}.",
                f"Subtract 4 corner repeats: {walk} - 4 = {border}.",
                f"So {border} tiles touch the edge.",
            ],
            "tags": ["spatial", "geometry_area", "perimeter"],
            "extensions": bonus_extensions(
                "Try a 10 by 10 pad.",
                "How does the border change if you add one row?",
            ),
            "difficulty_hint": 25 if border > 30 else 5,
        }
