from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Sequence, Tuple, Union

import requests
from rapidfuzz import fuzz, process

from skill_radar.config import AppConfig, load_app_config
from skill_radar.core import SkillRecord
from skill_radar.loader import LoaderError, load_records
from skill_radar.report import DrawOp, RecordingSurface, ReportLabSurface, ReportPaginator, ReportSummary
from skill_radar.store import LoadError, NotFoundError, SkillStore
from skill_radar.validation import ScoreValidation, validate_score
from skill_radar.views import build_radar

Pathish = Union[str, Path]
Logger = Callable[[str], None]

SUGGEST_MIN_SCORE = 60


@dataclass(frozen=True)
class LoadOutcome:
    store: SkillStore
    status: str
    ok: bool
    warnings: Tuple[str, ...] = ()


@dataclass(frozen=True)
class EditResult:
    name: str
    raw: str
    validation: ScoreValidation
    score: float          # score after the edit (unchanged when rejected)

    @property
    def ok(self) -> bool:
        return self.validation.ok


@dataclass(frozen=True)
class ExportOutcome:
    path: Path
    summary: ReportSummary


def _config(app_config: Optional[AppConfig], config_path: Optional[Pathish]) -> AppConfig:
    cfg = app_config or load_app_config(override_path=Path(config_path) if config_path else None)
    cfg.validate(require_paths=False)
    return cfg


def load_store(
    source: Optional[Pathish] = None,
    *,
    app_config: Optional[AppConfig] = None,
    config_path: Optional[Pathish] = None,
    strict: Optional[bool] = None,
    session: Optional[requests.Session] = None,
    logger: Optional[Logger] = None,
) -> LoadOutcome:
    """
    Load skills into a fresh store.

    Fetch, parse and duplicate-name failures never raise: the outcome carries
    an empty store and an ``error:load:...`` status instead. An invalid
    configuration raises ValueError.
    """
    cfg = _config(app_config, config_path)
    src = str(source) if source is not None else cfg.source
    strict_load = cfg.strict_load if strict is None else strict

    def log(msg: str) -> None:
        if logger:
            logger(msg)

    log(f"loading skills from {src}")
    try:
        result = load_records(src, strict=strict_load, timeout_s=cfg.request_timeout_s, session=session)
        store = SkillStore(result.records)
    except (LoaderError, LoadError) as e:
        log(f"load failed: {e}")
        return LoadOutcome(store=SkillStore(), status=f"error:load:{e}", ok=False)

    for w in result.warnings:
        log(f"warning: {w}")

    status = f"loaded {len(store)} skills" if len(store) else "no skills found"
    log(status)
    return LoadOutcome(store=store, status=status, ok=True, warnings=result.warnings)


def parse_edit(text: str) -> Tuple[str, str]:
    """'System Design=6.3' -> ('System Design', '6.3')."""
    name, sep, raw = text.rpartition("=")
    if not sep or not name.strip():
        raise ValueError(f"Expected NAME=VALUE, got {text!r}")
    return name.strip(), raw.strip()


def apply_edits(store: SkillStore, edits: Iterable[Tuple[str, str]]) -> List[EditResult]:
    """
    Validate and apply score edits in order.

    Rejected values leave the record as it was; unknown names raise
    NotFoundError from the store.
    """
    out: List[EditResult] = []
    for name, raw in edits:
        validation = validate_score(raw)
        if validation.ok:
            record = store.set_score(name, validation.value)  # type: ignore[arg-type]
        else:
            record = store.get(name)
            if record is None:
                raise NotFoundError(name)
        out.append(EditResult(name=name, raw=raw, validation=validation, score=record.score))
    return out


def suggest_skill(name: str, candidates: Sequence[str]) -> Optional[str]:
    if not candidates:
        return None
    match = process.extractOne(name, candidates, scorer=fuzz.WRatio, score_cutoff=SUGGEST_MIN_SCORE)
    return match[0] if match else None


def next_report_path(output_dir: Pathish, filename: str) -> Path:
    """
    First free path: ``skill_report.pdf``, then ``skill_report-2.pdf``, ...
    """
    base = Path(output_dir) / filename
    if not base.exists():
        return base
    n = 2
    while True:
        candidate = base.with_name(f"{base.stem}-{n}{base.suffix}")
        if not candidate.exists():
            return candidate
        n += 1


def export_report(
    records: Sequence[SkillRecord],
    *,
    app_config: Optional[AppConfig] = None,
    config_path: Optional[Pathish] = None,
    output_path: Optional[Pathish] = None,
    logger: Optional[Logger] = None,
) -> ExportOutcome:
    cfg = _config(app_config, config_path)
    if output_path is not None:
        path = Path(output_path)
    else:
        Path(cfg.output_dir).mkdir(parents=True, exist_ok=True)
        path = next_report_path(cfg.output_dir, cfg.report_filename)

    paginator = ReportPaginator(cfg.page_layout, logger=logger)
    summary = paginator.export(records, build_radar(records), ReportLabSurface(), path)
    return ExportOutcome(path=path, summary=summary)


def layout_ops(
    records: Sequence[SkillRecord],
    *,
    app_config: Optional[AppConfig] = None,
    config_path: Optional[Pathish] = None,
) -> Tuple[List[DrawOp], ReportSummary]:
    cfg = _config(app_config, config_path)
    surface = RecordingSurface()
    summary = ReportPaginator(cfg.page_layout).render(records, build_radar(records), surface)
    return surface.ops, summary
