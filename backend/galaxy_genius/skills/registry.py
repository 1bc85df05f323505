"""Read-only template registry: maps template key to contract instance."""

from .add_sub import AddSubContract
from .base import FlowSkillContract, PuzzleSkillContract
from .equations import OneStepEquationContract, TwoStepEquationContract
from .fraction_compare import FractionCompareContract
from .geometry import GeometryContract
from .lcm import LcmContract
from .mult_div import MultDivContract
from .order_ops import OrderOpsContract
from .percent import PercentContract
from .puzzle_logic import LogicContract, PatternContract
from .puzzle_spatial import AreaYesNoContract, BorderTilesContract
from .puzzle_strategy import ConstraintContract, StarsGameContract
from .puzzle_word import WordStoryContract
from .ratio import RatioContract

FLOW_SKILL_REGISTRY: dict[str, FlowSkillContract] = {
    "add_sub": AddSubContract(),
    "mult_div": MultDivContract(),
    "fraction_compare": FractionCompareContract(),
    "order_ops": OrderOpsContract(),
    "equation_1": OneStepEquationContract(),
    "percent": PercentContract(),
    "ratio": RatioContract(),
    "geometry": GeometryContract(),
    "equation_2": TwoStepEquationContract(),
    "lcm": LcmContract(),
}

PUZZLE_SKILL_REGISTRY: dict[str, PuzzleSkillContract] = {
    "word_story": WordStoryContract(),
    "logic": LogicContract(),
    "pattern": PatternContract(),
    "area_yn": AreaYesNoContract(),
    "border": BorderTilesContract(),
    "stars": StarsGameContract(),
    "constraint": ConstraintContract(),
}


def get_flow_skill(template: str) -> FlowSkillContract:
    """Raises KeyError for an unknown template key."""
    return FLOW_SKILL_REGISTRY[template]


def get_puzzle_skill(template: str) -> PuzzleSkillContract:
    """Raises KeyError for an unknown template key."""
    return PUZZLE_SKILL_REGISTRY[template]


def flow_catalog() -> list[dict]:
    return [
        {
            "key": key,
            "label": skill.label,
            "min_difficulty": skill.min_difficulty,
            "max_difficulty": skill.max_difficulty,
            "weight": skill.weight,
        }
        for key, skill in FLOW_SKILL_REGISTRY.items()
    ]


def puzzle_catalog() -> list[dict]:
    return [
        {
            "key": key,
            "puzzle_type": skill.puzzle_type,
            "min_difficulty": skill.min_difficulty,
            "max_difficulty": skill.max_difficulty,
            "weight": skill.weight,
        }
        for key, skill in PUZZLE_SKILL_REGISTRY.items()
    ]
