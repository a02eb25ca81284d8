from __future__ import annotations

from typing import List, Sequence

from skill_radar.core import RadarPoint, SkillRecord, TrendPoint


def build_radar(snapshot: Sequence[SkillRecord]) -> List[RadarPoint]:
    return [RadarPoint(name=r.name, score=r.score) for r in snapshot]


def build_trend(snapshot: Sequence[SkillRecord]) -> List[TrendPoint]:
    """
    One point per record, in snapshot order.

    ``previous`` is a stand-in (current minus one, floored at zero), not a
    lookup into attempt history.
    """
    out: List[TrendPoint] = []
    for r in snapshot:
        current = round(r.score, 2)
        previous = round(max(0.0, current - 1), 2)
        out.append(TrendPoint(name=r.name, previous=previous, current=current))
    return out
