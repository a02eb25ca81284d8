from __future__ import annotations

import math
import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional

SCORE_MIN = 0.0
SCORE_MAX = 10.0

# Digits with at most one decimal point. The optional sign only exists so that
# negative input is reported as out of range rather than as garbage.
_NUMERIC_RE = re.compile(r"^-?\d*\.?\d*$")
_INCOMPLETE = {"", ".", "-", "-."}


class ScoreError(Enum):
    NOT_NUMERIC = "Numbers only"
    OUT_OF_RANGE = "Value must be 0-10"


class ScoreValidationError(ValueError):
    """Raised by ScoreValidation.require_ok() for rejected input."""

    def __init__(self, raw: str, error: ScoreError) -> None:
        self.raw = raw
        self.error = error
        super().__init__(f"{error.value}: {raw!r}")


@dataclass(frozen=True)
class ScoreValidation:
    """Outcome of validating one raw score string.

    Invariants
    ----------
    * Exactly one of ``value`` and ``error`` is set.
    * ``value`` is finite and within [0, 10] and is not rounded.
    * ``incomplete`` input is always rejected as NOT_NUMERIC; callers should
      hold it (keep typing) instead of showing a hard failure.
    """

    raw: str
    value: Optional[float] = None
    error: Optional[ScoreError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def message(self) -> str:
        return self.error.value if self.error else ""

    @property
    def incomplete(self) -> bool:
        return self.raw in _INCOMPLETE

    def require_ok(self) -> float:
        if self.error is not None:
            raise ScoreValidationError(self.raw, self.error)
        return self.value  # type: ignore[return-value]


def validate_score(raw: str) -> ScoreValidation:
    if not isinstance(raw, str) or not _NUMERIC_RE.match(raw):
        return ScoreValidation(raw=str(raw), error=ScoreError.NOT_NUMERIC)

    try:
        value = float(raw)
    except ValueError:
        return ScoreValidation(raw=raw, error=ScoreError.NOT_NUMERIC)

    if not math.isfinite(value):
        return ScoreValidation(raw=raw, error=ScoreError.NOT_NUMERIC)
    if value < SCORE_MIN or value > SCORE_MAX:
        return ScoreValidation(raw=raw, error=ScoreError.OUT_OF_RANGE)

    return ScoreValidation(raw=raw, value=value)


def clamp_score(value: float) -> float:
    return max(SCORE_MIN, min(SCORE_MAX, float(value)))


def format_score(value: float) -> str:
    """7.5 -> "7.5", 10.0 -> "10", 6.333 -> "6.33"."""
    return f"{round(float(value), 2):g}"
