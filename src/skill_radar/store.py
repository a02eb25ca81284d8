from __future__ import annotations

import math
from collections import Counter
from dataclasses import replace
from typing import Dict, Iterable, List, Optional, Tuple

from skill_radar.core import SkillRecord
from skill_radar.validation import clamp_score


class StoreError(Exception):
    """Base class for skill store failures."""


class NotFoundError(StoreError):
    """Raised when mutating a skill that was never loaded."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"unknown skill: {name!r}")


class LoadError(StoreError):
    """Raised when a load would install duplicate skill names."""

    def __init__(self, duplicates: Iterable[str]) -> None:
        self.duplicates = tuple(duplicates)
        super().__init__(f"duplicate skill names: {', '.join(self.duplicates)}")


class SkillStore:
    """
    In-memory, ordered collection of SkillRecord keyed by name.

    Load order is preserved; it drives chart axis order and report section
    order. Only ``score`` is mutable after load, and it never leaves [0, 10].
    """

    def __init__(self, records: Iterable[SkillRecord] = ()) -> None:
        self._records: List[SkillRecord] = []
        self._index: Dict[str, int] = {}
        self.load(records)

    def load(self, records: Iterable[SkillRecord]) -> None:
        incoming = list(records)
        counts = Counter(r.name for r in incoming)
        dupes = sorted(name for name, n in counts.items() if n > 1)
        if dupes:
            raise LoadError(dupes)

        self._records = incoming
        self._index = {r.name: idx for idx, r in enumerate(incoming)}

    def set_score(self, name: str, candidate: float) -> SkillRecord:
        idx = self._index.get(name)
        if idx is None:
            raise NotFoundError(name)

        current = self._records[idx]
        if candidate is None or math.isnan(candidate):
            return current

        updated = replace(current, score=clamp_score(candidate))
        self._records[idx] = updated
        return updated

    def snapshot(self) -> Tuple[SkillRecord, ...]:
        return tuple(self._records)

    def get(self, name: str) -> Optional[SkillRecord]:
        idx = self._index.get(name)
        return None if idx is None else self._records[idx]

    def names(self) -> List[str]:
        return [r.name for r in self._records]

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, name: object) -> bool:
        return name in self._index
