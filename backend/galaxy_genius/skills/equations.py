"""One-step and two-step equations.

equation_1 forms:
    x + c = m       eq_x_plus_c
    x - c = m       eq_x_minus_c
    kx = m          eq_ax_eq_b
    x/c = m         eq_x_over_c

equation_2 forms:
    k(x - c) = m    eq_a_paren_x_minus_c
    kx + c = m      eq_ax_plus_c

Every form is built from the answer outward, so x is always a whole number.
"""

from .base import FlowSkillContract
from galaxy_genius.services.tiers import difficulty_band, is_hard_plus
from galaxy_genius.utils.quality_gate import (
    HARD_RATING,
    NO_NEGATIVE_BELOW_RATING,
    is_trivial_add_equation,
    is_trivial_mul_equation,
)
import random


def _digits(value: int) -> int:
    return len(str(abs(value)))


def _by_band(band: str, easy, medium, other):
    if band in ("rookie", "easy"):
        return easy
    if band == "medium":
        return medium
    return other


class OneStepEquationContract(FlowSkillContract):
    template = "equation_1"
    label = "One-Step Equations"
    min_difficulty = 980
    max_difficulty = 1180
    shapes = ("eq_x_plus_c", "eq_x_minus_c", "eq_ax_eq_b", "eq_x_over_c")
    score_cap = 1045

    def build_variant(self, rng: random.Random, difficulty: int, directive: dict | None = None) -> dict:
        band = difficulty_band(difficulty)
        styles = _by_band(
            band,
            ["x_plus_c", "x_minus_c", "ax_eq_b"],
            ["x_plus_c", "x_minus_c", "ax_eq_b", "x_over_c"],
            ["x_minus_c", "ax_eq_b", "x_over_c"],
        )
        style = rng.choice(styles)

        if style == "x_plus_c":
            x = rng.randint(*_by_band(band, (6, 45), (14, 95), (26, 180)))
            c = rng.randint(*_by_band(band, (5, 18), (8, 30), (16, 60)))
            rhs = x + c
            return self._draft(
                f"eq-plus-{x}-{c}", "eq_x_plus_c", f"x + {c} = {rhs}", x,
                [f"Undo +{c}.", f"{rhs} - {c}", "That result is x."],
                {"form": "add", "k": c, "m": rhs, "undo": f"x = {rhs} - {c}."},
            )

        if style == "x_minus_c":
            x = rng.randint(*_by_band(band, (8, 50), (16, 100), (35, 210)))
            c = rng.randint(*_by_band(band, (3, 16), (6, 24), (14, 70)))
            if c >= x:
                x = c + rng.randint(3, 20)
            rhs = x - c
            return self._draft(
                f"eq-minus-{x}-{c}", "eq_x_minus_c", f"x - {c} = {rhs}", x,
                [f"Undo -{c}.", f"{rhs} + {c}", "That result is x."],
                {"form": "sub", "k": c, "m": rhs, "undo": f"x = {rhs} + {c}."},
            )

        if style == "ax_eq_b":
            x = rng.randint(*_by_band(band, (3, 16), (5, 24), (10, 36)))
            factor = rng.randint(*_by_band(band, (2, 10), (3, 12), (6, 18)))
            rhs = x * factor
            return self._draft(
                f"eq-mult-{x}-{factor}", "eq_ax_eq_b", f"{factor}x = {rhs}", x,
                [f"Undo ×{factor}.", f"{rhs} ÷ {factor}", "That quotient is x."],
                {"form": "mul", "k": factor, "m": rhs, "undo": f"x = {rhs} ÷ {factor}."},
            )

        c = rng.randint(*_by_band(band, (2, 8), (3, 12), (7, 18)))
        rhs = rng.randint(*_by_band(band, (3, 15), (6, 24), (12, 34)))
        x = c * rhs
        return self._draft(
            f"eq-div-{x}-{c}", "eq_x_over_c", f"x/{c} = {rhs}", x,
            [f"Undo ÷{c}.", f"{rhs} × {c}", "That product is x."],
            {"form": "div", "k": c, "m": rhs, "undo": f"x = {rhs} × {c}."},
        )

    def _draft(self, signature, shape, prompt, x, hints, slots) -> dict:
        slots["x"] = x
        return {
            "signature": signature,
            "shape_signature": shape,
            "format": "numeric_input",
            "prompt": prompt,
            "answer": str(x),
            "hints": hints,
            "tags": ["equations", "prealgebra"],
            "slots": slots,
        }

    def explain(self, variant: dict) -> dict:
        s = variant["slots"]
        return {"steps": [s["undo"], f"x = {s['x']}."], "final_answer": str(s["x"])}

    def validate(self, variant: dict, rating: int) -> list[str]:
        s = variant["slots"]
        tiny = (
            (s["form"] == "add" and is_trivial_add_equation(s["k"], s["m"]))
            or (s["form"] == "mul" and is_trivial_mul_equation(s["k"], s["m"]))
        )
        if not tiny:
            return []
        if rating >= HARD_RATING:
            return ["trivial_for_hard_plus"]
        if rating >= NO_NEGATIVE_BELOW_RATING:
            return ["tiny_one_step_equation"]
        return []

    def score(self, variant: dict) -> dict[str, int]:
        s = variant["slots"]
        k, m = s["k"], s["m"]
        tags = variant["tags"]
        tags.append("eq:one-step")
        breakdown = {"base": 885}
        if s["form"] in ("add", "sub"):
            tags.append("form:eq_one_step_add")
            breakdown["one_step_add"] = 30
            breakdown["size"] = (_digits(k) + _digits(m)) * 30
            if k <= 12 and m <= 35:
                breakdown["easy_tiny_add_eq"] = -120
            if k >= 20 or m >= 80:
                breakdown["larger_constants"] = 35
        else:
            tags.append("form:eq_one_step_mul")
            breakdown["one_step_mul"] = 60
            breakdown["size"] = (_digits(k) + _digits(m)) * 26
            if k <= 5 and m <= 12:
                breakdown["easy_tiny_mul_eq"] = -120
            if k >= 10 or m >= 40:
                breakdown["larger_constants"] = 45
        return breakdown


class TwoStepEquationContract(FlowSkillContract):
    template = "equation_2"
    label = "Two-Step Equations"
    min_difficulty = 1120
    max_difficulty = 1700
    shapes = ("eq_a_paren_x_minus_c", "eq_ax_plus_c")

    def build_variant(self, rng: random.Random, difficulty: int, directive: dict | None = None) -> dict:
        harder = is_hard_plus(difficulty_band(difficulty))

        if rng.random() < 0.55:
            x = rng.randint(10, 44) if harder else rng.randint(4, 18)
            shift = rng.randint(4, 16) if harder else rng.randint(2, 9)
            if shift >= x:
                x = shift + rng.randint(2, 12)
            factor = rng.randint(3, 11) if harder else rng.randint(2, 6)
            rhs = factor * (x - shift)
            return {
                "signature": f"eq-2step-paren-{x}-{shift}-{factor}",
                "shape_signature": "eq_a_paren_x_minus_c",
                "format": "numeric_input",
                "prompt": f"{factor}(x - {shift}) = {rhs}",
                "answer": str(x),
                "hints": [f"First divide by {factor}.", f"Then add {shift}.", "That result is x."],
                "tags": ["equations", "prealgebra"],
                "slots": {"form": "paren", "k": factor, "c": shift, "m": rhs, "x": x},
            }

        factor = rng.randint(3, 13) if harder else rng.randint(2, 7)
        c = rng.randint(8, 36) if harder else rng.randint(3, 14)
        x = rng.randint(10, 42) if harder else rng.randint(4, 18)
        rhs = factor * x + c
        return {
            "signature": f"eq-2step-axplusc-{factor}-{x}-{c}",
            "shape_signature": "eq_ax_plus_c",
            "format": "numeric_input",
            "prompt": f"{factor}x + {c} = {rhs}",
            "answer": str(x),
            "hints": [f"First subtract {c}.", f"Then divide by {factor}.", "That quotient is x."],
            "tags": ["equations", "prealgebra"],
            "slots": {"form": "linear", "k": factor, "c": c, "m": rhs, "x": x},
        }

    def explain(self, variant: dict) -> dict:
        s = variant["slots"]
        if s["form"] == "paren":
            steps = [f"x - {s['c']} = {s['m'] // s['k']}.", f"x = {s['x']}."]
        else:
            remaining = s["m"] - s["c"]
            steps = [f"{s['k']}x = {remaining}.", f"x = {remaining} ÷ {s['k']} = {s['x']}."]
        return {"steps": steps, "final_answer": str(s["x"])}

    def score(self, variant: dict) -> dict[str, int]:
        tags = variant["tags"]
        if variant["slots"]["form"] == "paren":
            tags.extend(["form:eq_parens", "form:eq_two_step"])
            return {"base": 1220, "paren_form": 150}
        tags.append("form:eq_two_step")
        return {"base": 1220, "two_step_form": 125}
