"""Geometry: rectangle area, rectangle perimeter, triangle area.

The prompt always names the shape and the measure, e.g.

    Rectangle: 12 by 7. Area = ?
    Rectangle: 12 by 7. Perimeter = ?
    Triangle: base 9, height 6. Area = ?

so an audit can recover the sub-shape from the text alone.
"""

from .base import FlowSkillContract
from galaxy_genius.services.tiers import difficulty_band
from galaxy_genius.utils.answer_computer import build_break_apart_plan
import random

GEOMETRY_SHAPES = ("geom_rect_area", "geom_rect_perim", "geom_tri_area")

# band → (a_min, a_max, b_min, b_max)
RECT_RANGES = {
    "easy": (4, 11, 3, 10),
    "medium": (5, 14, 4, 13),
    "hard": (8, 20, 7, 18),
    "expert": (11, 24, 8, 20),
    "master": (16, 32, 12, 26),
}

# band → (base_min, base_max, height_min, height_max)
TRI_RANGES = {
    "easy": (6, 14, 4, 10),
    "medium": (7, 17, 5, 14),
    "hard": (9, 24, 7, 18),
    "expert": (12, 28, 8, 20),
    "master": (16, 34, 12, 24),
}


class GeometryContract(FlowSkillContract):
    template = "geometry"
    label = "Geometry"
    min_difficulty = 1120
    max_difficulty = 1500
    shapes = GEOMETRY_SHAPES

    def build_variant(self, rng: random.Random, difficulty: int, directive: dict | None = None) -> dict:
        band = difficulty_band(difficulty)
        if band == "rookie":
            band = "easy"
        shape = (directive or {}).get("shape") or rng.choice(GEOMETRY_SHAPES)

        if shape == "geom_tri_area":
            base_min, base_max, h_min, h_max = TRI_RANGES[band]
            base = rng.randint(base_min, base_max)
            height = rng.randint(h_min, h_max)
            if (base * height) % 2:
                height += 1
            return self._triangle(base, height)

        a_min, a_max, b_min, b_max = RECT_RANGES[band]
        a = rng.randint(a_min, a_max)
        b = rng.randint(b_min, b_max)
        if shape == "geom_rect_perim":
            return self._perimeter(a, b)
        return self._area(a, b)

    def _area(self, a: int, b: int) -> dict:
        area = a * b
        plan = build_break_apart_plan(a, b)
        return {
            "signature": f"geo-rect-area-{a}-{b}",
            "shape_signature": "geom_rect_area",
            "format": "numeric_input",
            "prompt": f"Rectangle: {a} by {b}. Area = ?",
            "answer": str(area),
            "hints": [
                "Area means how many squares fit inside.",
                f"Rewrite: {plan.rewrite_line}.",
                f"Compute: {plan.part_line_a}={plan.value_a}, {plan.part_line_b}={plan.value_b}, "
                f"so area = {area}.",
            ],
            "tags": ["geometry_area"],
            "slots": {"dims": (a, b), "result": area},
        }

    def _perimeter(self, a: int, b: int) -> dict:
        perimeter = 2 * (a + b)
        return {
            "signature": f"geo-rect-perim-{a}-{b}",
            "shape_signature": "geom_rect_perim",
            "format": "numeric_input",
            "prompt": f"Rectangle: {a} by {b}. Perimeter = ?",
            "answer": str(perimeter),
            "hints": [
                "Perimeter means walk around the edge.",
                f"Add all sides: {a}+{b}+{a}+{b}.",
                f"Or do 2×({a}+{b}).",
            ],
            "tags": ["geometry_area"],
            "slots": {"dims": (a, b), "result": perimeter},
        }

    def _triangle(self, base: int, height: int) -> dict:
        product = base * height
        area = product // 2
        return {
            "signature": f"geo-tri-area-{base}-{height}",
            "shape_signature": "geom_tri_area",
            "format": "numeric_input",
            "prompt": f"Triangle: base {base}, height {height}. Area = ?",
            "answer": str(area),
            "hints": [
                "Triangle area is half of a rectangle.",
                f"{base}×{height} = ?",
                f"Half of that gives the area: {product} ÷ 2 = {area}.",
            ],
            "tags": ["geometry_area"],
            "slots": {"dims": (base, height), "result": area},
        }

    def explain(self, variant: dict) -> dict:
        shape = variant["shape_signature"]
        x, y = variant["slots"]["dims"]
        result = variant["slots"]["result"]
        if shape == "geom_rect_area":
            plan = build_break_apart_plan(x, y)
            steps = [
                f"Area = {x} × {y}.",
                plan.rewrite_line,
                f"{plan.part_line_a} = {plan.value_a}, {plan.part_line_b} = {plan.value_b}.",
                f"{plan.value_a} + {plan.value_b} = {result}.",
            ]
        elif shape == "geom_rect_perim":
            steps = [f"Perimeter = {x}+{y}+{x}+{y}.", f"Perimeter = {result}."]
        else:
            steps = [f"{x}×{y} = {x * y}.", f"{x * y} ÷ 2 = {result}."]
        return {"steps": steps, "final_answer": str(result)}

    def score(self, variant: dict) -> dict[str, int]:
        shape = variant["shape_signature"]
        tags = variant["tags"]
        breakdown = {"base": 980}
        if shape == "geom_rect_perim":
            tags.append("form:geometry_perimeter")
            breakdown["perimeter"] = 110
        elif shape == "geom_tri_area":
            tags.append("form:geometry_triangle_area")
            breakdown["triangle_area"] = 140
        else:
            tags.append("form:geometry_rect_area")
            breakdown["rect_area"] = 130
        dims = variant["slots"]["dims"]
        breakdown["dimension_scale"] = round(sum(dims) / len(dims) * 6)
        if max(dims) >= 14:
            breakdown["larger_dimensions"] = 80
        if max(dims) <= 8:
            breakdown["easy_small_dimensions"] = -60
        return breakdown
