"""Rating → tier label and item difficulty → builder band.

Two ladders live here:

  tier_for_rating  : the human-readable label shown to players and used to
                      tag items (Rookie … Master).
  difficulty_band  : the coarser band the item builders use to pick operand
                      ranges. Its cut points sit slightly above the tier
                      ladder so a builder only reaches for "hard" numbers once
                      the draw is comfortably inside Hard.
"""

TIER_THRESHOLDS: tuple[tuple[int, str], ...] = (
    (1350, "Master"),
    (1200, "Expert"),
    (1050, "Hard"),
    (900, "Medium"),
    (850, "Easy"),
)

BAND_THRESHOLDS: tuple[tuple[int, str], ...] = (
    (1400, "master"),
    (1250, "expert"),
    (1080, "hard"),
    (920, "medium"),
    (860, "easy"),
)

HARD_PLUS_BANDS = frozenset({"hard", "expert", "master"})

MIN_DIFFICULTY = 800
MAX_DIFFICULTY = 1700


def tier_for_rating(rating: int) -> str:
    for threshold, label in TIER_THRESHOLDS:
        if rating >= threshold:
            return label
    return "Rookie"


def difficulty_band(difficulty: int) -> str:
    for threshold, band in BAND_THRESHOLDS:
        if difficulty >= threshold:
            return band
    return "rookie"


def is_hard_plus(band: str) -> bool:
    return band in HARD_PLUS_BANDS


def clamp(value: float, low: float, high: float) -> float:
    return min(high, max(low, value))
