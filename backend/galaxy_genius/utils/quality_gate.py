"""quality_gate.py: invariant checks for generated Flow and Puzzle items.

Two layers live here:

  Draft checks   → run inside generation on every candidate draft (a plain
                   dict) before it becomes a FlowItem / PuzzleItem. They
                   return issue codes; any code in HARD_ISSUES rejects the
                   draft outright, the rest are preferences that the fallback
                   pass may relax.
  Text audit     → re-derive template, geometry shape, operands and the stars
                   count from rendered text only. Generation never depends on
                   these; the verification scripts and tests use them to
                   cross-check the structured fields.

Draft field conventions:
  prompt / answer / choices / hints / solution_steps   (Flow)
  title / core_prompt / core_answer / hint_ladder / solution_steps   (Puzzle)
"""
import re
from typing import Iterable, List, Optional, Tuple

_DECIMAL_RE = re.compile(r"\d+\.\d+")
_INTEGER_RE = re.compile(r"^-?\d+$")

HARD_RATING = 1125
HARD_FLOOR_DIFFICULTY = 1040
NO_NEGATIVE_BELOW_RATING = 975

HARD_ISSUES = frozenset({
    "decimal_token",
    "non_integer_answer",
    "hint_count",
    "negative_difference",
    "trivial_for_hard_plus",
    "banned_notation",
    "fast_math_like",
    "solution_step_count",
})

# Puzzles must read like puzzles, not like a Flow drill in disguise.
_FAST_MATH_STYLE = (
    re.compile(r"which fraction is (bigger|greater)", re.I),
    re.compile(r"\b\d+\s*/\s*\d+\s*(or|vs)\s*\d+\s*/\s*\d+", re.I),
    re.compile(r"\bx\s*[+\-*/÷×]\s*\d+\s*=\s*-?\d+", re.I),
    re.compile(r"^\s*(solve|what is)\s*:?\s*\d+\s*[+\-×x÷/*]\s*\d+", re.I),
    re.compile(r"^\s*\d+\s*[+\-×x÷/*]\s*\d+\s*=\s*\?\s*$", re.I),
)
_BANNED_ALGEBRA = re.compile(
    r"\bn\b|n\^2|n²|n\(\s*n\s*[+\-]\s*1\s*\)", re.I
)


def has_decimal_token(text: str) -> bool:
    return bool(_DECIMAL_RE.search(text or ""))


def is_integer_string(value: str) -> bool:
    return bool(_INTEGER_RE.match((value or "").strip()))


def find_decimal_fields(fields: Iterable[Tuple[str, object]]) -> List[str]:
    """Return "field: text" for every string (or list entry) with a decimal."""
    problems = []
    for name, value in fields:
        if isinstance(value, str):
            if has_decimal_token(value):
                problems.append(f"{name}: {value}")
        elif isinstance(value, (list, tuple)):
            for entry in value:
                if isinstance(entry, str) and has_decimal_token(entry):
                    problems.append(f"{name}[]: {entry}")
    return problems


def flow_text_fields(item) -> List[Tuple[str, object]]:
    get = item.get if isinstance(item, dict) else lambda key: getattr(item, key, None)
    return [
        ("prompt", get("prompt")),
        ("answer", get("answer")),
        ("choices", get("choices") or []),
        ("hints", get("hints") or []),
        ("solution_steps", get("solution_steps") or []),
    ]


def puzzle_text_fields(item) -> List[Tuple[str, object]]:
    get = item.get if isinstance(item, dict) else lambda key: getattr(item, key, None)
    return [
        ("title", get("title")),
        ("core_prompt", get("core_prompt")),
        ("core_answer", get("core_answer")),
        ("choices", get("choices") or []),
        ("hint_ladder", get("hint_ladder") or []),
        ("solution_steps", get("solution_steps") or []),
    ]


# ---------------------------------------------------------------------------
# Triviality rules (Hard+ only)
# ---------------------------------------------------------------------------

def is_trivial_multiplication(left: int, right: int) -> bool:
    return left <= 9 and right <= 9


def is_trivial_division(dividend: int, divisor: int) -> bool:
    return dividend <= 100 and divisor <= 12


def is_trivial_add_equation(k: int, m: int) -> bool:
    """x + k = m"""
    return k <= 12 and m <= 30


def is_trivial_mul_equation(k: int, m: int) -> bool:
    """kx = m"""
    return k <= 4 and m <= 40


# ---------------------------------------------------------------------------
# Draft checks
# ---------------------------------------------------------------------------

def flow_draft_issues(draft: dict, rating: int) -> List[str]:
    """Template-independent checks on a finished Flow draft."""
    issues = []
    if find_decimal_fields(flow_text_fields(draft)):
        issues.append("decimal_token")
    if draft.get("format") == "numeric_input" and not is_integer_string(draft.get("answer", "")):
        issues.append("non_integer_answer")
    if len(draft.get("hints") or []) != 3:
        issues.append("hint_count")
    if rating >= HARD_RATING and draft.get("difficulty", 0) < HARD_FLOOR_DIFFICULTY:
        issues.append("below_hard_floor")
    return issues


def puzzle_draft_issues(draft: dict) -> List[str]:
    issues = []
    fields = puzzle_text_fields(draft)
    if find_decimal_fields(fields):
        issues.append("decimal_token")

    texts = [draft.get("title") or "", draft.get("core_prompt") or "", draft.get("core_answer") or ""]
    texts += list(draft.get("hint_ladder") or []) + list(draft.get("solution_steps") or [])
    if any(_BANNED_ALGEBRA.search(text) for text in texts):
        issues.append("banned_notation")

    prompt = (draft.get("core_prompt") or "").strip()
    if any(pattern.search(prompt) for pattern in _FAST_MATH_STYLE):
        issues.append("fast_math_like")
    if len(draft.get("hint_ladder") or []) != 3:
        issues.append("hint_count")
    if len(draft.get("solution_steps") or []) != 3:
        issues.append("solution_step_count")
    return issues


def hard_issues(issues: Iterable[str]) -> List[str]:
    return [issue for issue in issues if issue in HARD_ISSUES]


# ---------------------------------------------------------------------------
# Text audit (verification only)
# ---------------------------------------------------------------------------

_ADD_SUB_RE = re.compile(r"^\s*(\d+)\s*([+-])\s*(\d+)\s*=\s*\?\s*$")
_MULT_RE = re.compile(r"^\s*(\d+)\s*[×x]\s*(\d+)\s*=\s*\?\s*$")
_DIV_RE = re.compile(r"^\s*(\d+)\s*÷\s*(\d+)\s*=\s*\?\s*$")
_EQ_ADD_RE = re.compile(r"^\s*x\s*\+\s*(\d+)\s*=\s*(\d+)\s*$")
_EQ_MUL_RE = re.compile(r"^\s*(\d+)x\s*=\s*(\d+)\s*$")
_STARS_RE = re.compile(r"^stars-(\d+)")


def infer_template(item) -> str:
    get = item.get if isinstance(item, dict) else lambda key: getattr(item, key, None)
    template = get("template")
    if template:
        return template
    return str(get("id") or "").split("-")[0] or "unknown"


def infer_geometry_shape(prompt: str) -> Optional[str]:
    p = (prompt or "").lower()
    if "rectangle" not in p and "triangle" not in p:
        return None
    if "perimeter" in p:
        return "geom_rect_perim"
    if "rectangle" in p and "area" in p:
        return "geom_rect_area"
    if "triangle" in p and "area" in p:
        return "geom_tri_area"
    return "geom_unknown"


def parse_add_sub(prompt: str) -> Optional[Tuple[int, str, int]]:
    match = _ADD_SUB_RE.match(prompt or "")
    if not match:
        return None
    return int(match.group(1)), match.group(2), int(match.group(3))


def is_trivial_prompt(prompt: str) -> bool:
    p = prompt or ""
    match = _MULT_RE.match(p)
    if match:
        return is_trivial_multiplication(int(match.group(1)), int(match.group(2)))
    match = _DIV_RE.match(p)
    if match:
        return is_trivial_division(int(match.group(1)), int(match.group(2)))
    match = _EQ_ADD_RE.match(p)
    if match:
        return is_trivial_add_equation(int(match.group(1)), int(match.group(2)))
    match = _EQ_MUL_RE.match(p)
    if match:
        return is_trivial_mul_equation(int(match.group(1)), int(match.group(2)))
    return False


def stars_count(puzzle_id: str) -> Optional[int]:
    match = _STARS_RE.match(puzzle_id or "")
    return int(match.group(1)) if match else None


def expected_stars_answer(n: int) -> str:
    return "no" if n % 4 == 0 else "yes"


def run_flow_audit(items: list, rating: int) -> Tuple[bool, List[str]]:
    """Audit a sample of Flow items drawn at one rating.

    Returns (passed: bool, failures: list[str]).
    """
    failures = []
    geometry_seen = set()
    for item in items:
        decimals = find_decimal_fields(flow_text_fields(item))
        if decimals:
            failures.append(f"{item.id}: decimal in {' | '.join(decimals)}")
        if len(item.hints) != 3:
            failures.append(f"{item.id}: {len(item.hints)} hints")
        parsed = parse_add_sub(item.prompt)
        if parsed and parsed[1] == "-" and rating < NO_NEGATIVE_BELOW_RATING and int(item.answer) < 0:
            failures.append(f"{item.id}: negative subtraction at rating {rating}")
        if rating >= HARD_RATING and is_trivial_prompt(item.prompt):
            failures.append(f"{item.id}: trivial at rating {rating}")
        shape = infer_geometry_shape(item.prompt)
        if shape:
            geometry_seen.add(shape)

    if rating >= 1275 and items:
        for shape in ("geom_rect_area", "geom_rect_perim", "geom_tri_area"):
            if shape not in geometry_seen:
                failures.append(f"missing geometry subtype {shape} at rating {rating}")

    return len(failures) == 0, failures


def run_puzzle_audit(items: list) -> Tuple[bool, List[str]]:
    """Audit a sample of Puzzle items. Returns (passed, failures)."""
    failures = []
    area_answers = set()
    stars_checked = 0
    for item in items:
        decimals = find_decimal_fields(puzzle_text_fields(item))
        if decimals:
            failures.append(f"{item.id}: decimal in {' | '.join(decimals)}")
        template = infer_template(item)
        if template == "area_yn":
            area_answers.add(item.core_answer.lower())
        if template == "stars":
            n = stars_count(item.id)
            if n is not None:
                stars_checked += 1
                if item.core_answer.lower() != expected_stars_answer(n):
                    failures.append(f"{item.id}: answer {item.core_answer!r} breaks the n%4 rule")

    if items:
        if not {"yes", "no"} <= area_answers:
            failures.append(f"area_yn outcomes seen: {sorted(area_answers)}")
        if stars_checked == 0:
            failures.append("no stars puzzles generated")

    return len(failures) == 0, failures
