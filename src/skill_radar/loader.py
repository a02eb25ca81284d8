from __future__ import annotations

import json
import math
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, List, Mapping, Optional, Tuple, Union

import requests

from skill_radar.core import SkillRecord
from skill_radar.validation import SCORE_MAX, SCORE_MIN, clamp_score

DEFAULT_TIMEOUT_S = 30


class LoaderError(Exception):
    """Raised when skill data cannot be fetched or parsed."""


@dataclass(frozen=True)
class LoadResult:
    records: List[SkillRecord]
    warnings: Tuple[str, ...] = ()


def parse_timestamp(value: str) -> datetime:
    """ISO-8601, with a trailing 'Z' accepted for UTC ("2025-08-06T13:45Z")."""
    s = value.strip()
    if s.endswith(("Z", "z")):
        s = s[:-1] + "+00:00"
    return datetime.fromisoformat(s)


def _parse_entry(item: Mapping[str, Any], *, ctx: str, strict: bool, warnings: List[str]) -> Optional[SkillRecord]:
    def problem(msg: str) -> None:
        if strict:
            raise LoaderError(f"{ctx}: {msg}")
        warnings.append(f"{ctx}: {msg}")

    name = item.get("skill", item.get("name"))
    if not isinstance(name, str) or not name.strip():
        problem("missing skill name")
        return None
    name = name.strip()
    ctx = f"{ctx} ({name})"

    score = item.get("score")
    if isinstance(score, bool) or not isinstance(score, (int, float)) or not math.isfinite(score):
        problem(f"invalid score {score!r}")
        return None
    if not SCORE_MIN <= score <= SCORE_MAX:
        problem(f"score {score} outside 0-10, clamped")
        score = clamp_score(score)

    snippets_raw = item.get("code_snippets") or []
    if not isinstance(snippets_raw, list):
        problem("code_snippets must be a list")
        snippets_raw = []
    snippets = tuple(str(s) for s in snippets_raw)

    stamps: List[datetime] = []
    for raw in item.get("timestamps") or []:
        try:
            stamps.append(parse_timestamp(str(raw)))
        except ValueError:
            problem(f"invalid timestamp {raw!r}")

    depth = item.get("iteration_depth")
    if depth is not None and (isinstance(depth, bool) or not isinstance(depth, int) or depth < 0):
        problem(f"invalid iteration_depth {depth!r}")
        depth = None

    flagged = item.get("ai_flagged", item.get("flagged"))
    if flagged is not None and not isinstance(flagged, bool):
        problem(f"invalid ai_flagged {flagged!r}")
        flagged = None

    return SkillRecord(
        name=name,
        score=float(score),
        code_snippets=snippets,
        attempt_timestamps=tuple(stamps),
        iteration_depth=depth,
        flagged=flagged,
    )


def parse_records(raw: Any, *, strict: bool = True) -> LoadResult:
    """
    Convert the dashboard wire format into SkillRecord list.

    Expected: a JSON list of objects like
      {"skill": "...", "score": 7.5, "code_snippets": [...], "timestamps": [...],
       "iteration_depth": 3, "ai_flagged": true}

    Name uniqueness is not checked here; SkillStore.load() owns that.
    """
    if not isinstance(raw, list):
        raise LoaderError("skill data must be a JSON list")

    records: List[SkillRecord] = []
    warnings: List[str] = []

    for idx, item in enumerate(raw):
        ctx = f"entry {idx}"
        if not isinstance(item, dict):
            if strict:
                raise LoaderError(f"{ctx}: expected an object")
            warnings.append(f"{ctx}: expected an object")
            continue
        record = _parse_entry(item, ctx=ctx, strict=strict, warnings=warnings)
        if record is not None:
            records.append(record)

    return LoadResult(records=records, warnings=tuple(warnings))


def load_records_from_file(path: Path, *, strict: bool = True) -> LoadResult:
    path = Path(path)
    if not path.exists():
        raise LoaderError(f"File not found: {path}")
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise LoaderError(f"Invalid JSON in {path}: {e}") from e
    return parse_records(data, strict=strict)


def fetch_records(
    url: str,
    *,
    session: Optional[requests.Session] = None,
    timeout_s: float = DEFAULT_TIMEOUT_S,
    strict: bool = True,
) -> LoadResult:
    if session is None:
        with requests.Session() as owned:
            return fetch_records(url, session=owned, timeout_s=timeout_s, strict=strict)

    try:
        r = session.get(url, timeout=timeout_s, headers={"Accept": "application/json"})
        r.raise_for_status()
        data = r.json()
    except requests.RequestException as e:
        raise LoaderError(f"fetch failed for {url}: {e}") from e
    except ValueError as e:
        raise LoaderError(f"Invalid JSON from {url}: {e}") from e
    return parse_records(data, strict=strict)


def load_records(
    source: Union[str, Path],
    *,
    strict: bool = True,
    timeout_s: float = DEFAULT_TIMEOUT_S,
    session: Optional[requests.Session] = None,
) -> LoadResult:
    text = str(source)
    if text.startswith(("http://", "https://")):
        return fetch_records(text, session=session, timeout_s=timeout_s, strict=strict)
    return load_records_from_file(Path(text), strict=strict)
