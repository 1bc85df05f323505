"""
Hint ladder builder.

Turns a builder's raw hints into a fixed-length ladder of standalone rungs:
trimmed, de-duplicated, topped up from unused solution steps and then from
generic nudges, and cut to length.
"""

from typing import Iterable, Optional

GENERIC_RUNGS = (
    "Try a smaller version first.",
    "Write down what you know before you start.",
    "Check your answer by working backwards.",
)

STEP_FALLBACK = "Now use that same idea on this puzzle."


def _clean(lines: Optional[Iterable[str]]) -> list[str]:
    return [line.strip() for line in (lines or []) if line and line.strip()]


def build_hint_ladder(
    hints: Optional[Iterable[str]],
    solution_steps: Optional[Iterable[str]] = None,
    length: int = 3,
) -> list[str]:
    rungs: list[str] = []
    for source in (_clean(hints), _clean(solution_steps), list(GENERIC_RUNGS)):
        for line in source:
            if len(rungs) >= length:
                return rungs
            if line not in rungs:
                rungs.append(line)
    while len(rungs) < length:
        rungs.append(GENERIC_RUNGS[len(rungs) % len(GENERIC_RUNGS)])
    return rungs[:length]


def ensure_step_count(steps: Optional[Iterable[str]], length: int = 3, fallback: str = STEP_FALLBACK) -> list[str]:
    normalized = _clean(steps)[:length]
    while len(normalized) < length:
        normalized.append(fallback)
    return normalized
