from skill_radar.core.models import (  # noqa: F401
    RadarPoint,
    SkillRecord,
    TrendPoint,
)

__all__ = [
    "RadarPoint",
    "SkillRecord",
    "TrendPoint",
]
