"""
Template selector.

Eligibility: a template is eligible when the draw difficulty lies inside its
catalog band widened by 80 on both sides. Among eligible templates the pick is
weighted random; templates seen in the recent window are damped but never
excluded. When nothing is eligible the template whose band is nearest wins.
"""

import logging
import random
from typing import Iterable, Optional, Sequence

from galaxy_genius.skills.base import FlowSkillContract
from galaxy_genius.skills.geometry import GEOMETRY_SHAPES
from galaxy_genius.skills.registry import FLOW_SKILL_REGISTRY

logger = logging.getLogger(__name__)

BAND_SLACK = 80
DAMP_LAST2 = 0.35
DAMP_LAST4 = 0.6


def damping(key: str, recent: Sequence[str]) -> float:
    recent = list(recent)
    if key in recent[-2:]:
        return DAMP_LAST2
    if key in recent[-4:]:
        return DAMP_LAST4
    return 1.0


def _weighted_choice(rng: random.Random, keys: list[str], weights: list[float]) -> str:
    return rng.choices(keys, weights=weights, k=1)[0]


class TemplateSelector:
    def __init__(self, registry: Optional[dict[str, FlowSkillContract]] = None):
        self.registry = registry if registry is not None else FLOW_SKILL_REGISTRY

    def eligible(self, difficulty: int, allowed: Optional[Iterable[str]] = None) -> list[FlowSkillContract]:
        allowed_set = set(allowed) if allowed else None
        return [
            skill
            for key, skill in self.registry.items()
            if (allowed_set is None or key in allowed_set) and skill.covers(difficulty, BAND_SLACK)
        ]

    def nearest(self, difficulty: int, allowed: Optional[Iterable[str]] = None) -> FlowSkillContract:
        allowed_set = set(allowed) if allowed else None
        pool = [
            skill for key, skill in self.registry.items()
            if allowed_set is None or key in allowed_set
        ]
        if not pool:
            logger.warning("[template_selector] no registered template in %s; ignoring filter", sorted(allowed_set))
            pool = list(self.registry.values())
        return min(pool, key=lambda skill: skill.band_distance(difficulty))

    def pick_template(
        self,
        difficulty: int,
        rng: random.Random,
        recent_templates: Sequence[str] = (),
        allowed: Optional[Iterable[str]] = None,
    ) -> FlowSkillContract:
        pool = self.eligible(difficulty, allowed)
        if not pool:
            fallback = self.nearest(difficulty, allowed)
            logger.info(
                "[template_selector] no template covers %d; using nearest band %s",
                difficulty, fallback.template,
            )
            return fallback

        keys = [skill.template for skill in pool]
        weights = [skill.weight * damping(skill.template, recent_templates) for skill in pool]
        return self.registry[_weighted_choice(rng, keys, weights)]

    def pick_shape(
        self,
        skill: FlowSkillContract,
        rng: random.Random,
        recent_shapes: Sequence[str] = (),
    ) -> Optional[str]:
        """Only geometry steers its sub-shape; other builders choose their own."""
        if skill.template != "geometry":
            return None
        shapes = list(GEOMETRY_SHAPES)
        weights = [DAMP_LAST2 if shape in list(recent_shapes)[-2:] else 1.0 for shape in shapes]
        return _weighted_choice(rng, shapes, weights)
