from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple


@dataclass(frozen=True)
class SkillRecord:
    """One named skill with its score and supporting evidence."""

    name: str
    score: float          # always within [0, 10]
    code_snippets: Tuple[str, ...] = ()
    attempt_timestamps: Tuple[datetime, ...] = ()   # oldest first
    iteration_depth: Optional[int] = None
    flagged: Optional[bool] = None

    @property
    def is_flagged(self) -> bool:
        return self.flagged is True


@dataclass(frozen=True)
class RadarPoint:
    name: str
    score: float


@dataclass(frozen=True)
class TrendPoint:
    """Previous/current pair for the trend chart.

    ``previous`` is not a historical value: it is ``max(0, current - 1)``.
    """

    name: str
    previous: float
    current: float
