"""Order of operations: a + b × c (- d) and (a + b) × c (- d)."""

from .base import FlowSkillContract
from galaxy_genius.services.tiers import difficulty_band, is_hard_plus
from galaxy_genius.utils.answer_computer import build_break_apart_plan
import random


class OrderOpsContract(FlowSkillContract):
    template = "order_ops"
    label = "Order of Operations"
    min_difficulty = 960
    max_difficulty = 1500
    shapes = ("expr_order_ops", "expr_order_ops_parens")

    def build_variant(self, rng: random.Random, difficulty: int, directive: dict | None = None) -> dict:
        band = difficulty_band(difficulty)
        easy = band in ("rookie", "easy")
        with_parens = not easy and rng.random() < (0.25 if band == "medium" else 0.55)

        if easy:
            a, b, c = rng.randint(3, 9), rng.randint(2, 8), rng.randint(2, 8)
        elif band == "medium":
            a, b, c = rng.randint(4, 12), rng.randint(3, 11), rng.randint(3, 12)
        else:
            a, b, c = rng.randint(6, 18), rng.randint(4, 14), rng.randint(5, 17)
        d = rng.randint(2, 11) if is_hard_plus(band) else rng.randint(2, 8)
        include_tail = not easy and rng.random() < 0.45

        tail = f" - {d}" if include_tail else ""
        if with_parens:
            expression = f"({a} + {b}) × {c}{tail}"
            head = (a + b) * c
            plugged = f"{a + b} × {c}{tail}"
            hints = [
                f"Find the chunk first: ({a} + {b}).",
                f"Rewrite: ({a} + {b}) × {c}{tail} = {plugged}.",
            ]
        else:
            expression = f"{a} + {b} × {c}{tail}"
            head = a + b * c
            plugged = f"{a} + {b * c}{tail}"
            plan = build_break_apart_plan(b, c)
            hints = [
                f"Do multiplication first. Circle {b}×{c}.",
                f"Break it: {plan.rewrite_line}.",
            ]
        result = head - d if include_tail else head
        hints.append(f"Plug back in: {plugged} = {result}.")

        return {
            "signature": "order-" + expression.replace(" ", ""),
            "shape_signature": "expr_order_ops_parens" if with_parens else "expr_order_ops",
            "format": "numeric_input",
            "prompt": f"{expression} = ?",
            "answer": str(result),
            "hints": hints,
            "tags": ["order_ops"],
            "slots": {
                "a": a,
                "b": b,
                "c": c,
                "d": d if include_tail else None,
                "parens": with_parens,
                "expression": expression,
                "plugged": plugged,
                "result": result,
            },
        }

    def explain(self, variant: dict) -> dict:
        s = variant["slots"]
        a, b, c = s["a"], s["b"], s["c"]
        if s["parens"]:
            first = f"({a} + {b}) = {a + b}, so {s['expression']} becomes {s['plugged']}."
        else:
            plan = build_break_apart_plan(b, c)
            first = (
                f"{plan.rewrite_line}; {plan.part_line_a}={plan.value_a}, "
                f"{plan.part_line_b}={plan.value_b}, so {b}×{c}={b * c}."
            )
        return {
            "steps": [first, f"Now solve {s['plugged']}.", f"Answer: {s['result']}."],
            "final_answer": str(s["result"]),
        }

    def score(self, variant: dict) -> dict[str, int]:
        s = variant["slots"]
        tags = variant["tags"]
        tags.append("expr:order-of-ops")
        terms = [s["a"], s["b"], s["c"]] + ([s["d"]] if s["d"] is not None else [])
        breakdown = {"base": 980, "term_count": len(terms) * 32}
        if s["parens"]:
            tags.append("expr:has-parens")
            breakdown["parens_bonus"] = 140
        else:
            breakdown["no_parens"] = 20
        breakdown["operand_scale"] = max(terms) * 3
        return breakdown
