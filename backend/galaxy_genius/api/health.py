from fastapi import APIRouter

from galaxy_genius.core.config import get_settings
from galaxy_genius.skills.registry import FLOW_SKILL_REGISTRY, PUZZLE_SKILL_REGISTRY

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "service": get_settings().app_name,
        "flow_templates": len(FLOW_SKILL_REGISTRY),
        "puzzle_templates": len(PUZZLE_SKILL_REGISTRY),
    }
