from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional, Tuple

from skill_radar import api
from skill_radar.charts import render_radar_png, render_trend_png
from skill_radar.config import AppConfig, load_app_config
from skill_radar.report import ReportError
from skill_radar.store import NotFoundError, SkillStore
from skill_radar.validation import format_score
from skill_radar.views import build_radar, build_trend


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(
        prog="skill-radar",
        description="Inspect skill scores, apply edits and export the paginated PDF skill report.",
    )
    subparsers = ap.add_subparsers(dest="command", required=True)

    show = subparsers.add_parser("show", help="Print skills with radar and trend views.")
    _add_common_args(show, edits=False)
    show.add_argument("--json", action="store_true", help="Emit JSON instead of a text table.")
    show.set_defaults(func=_cmd_show)

    report = subparsers.add_parser("report", help="Write the PDF skill report.")
    _add_common_args(report)
    report.add_argument("--output", "-o", default=None, help="PDF path. Default: next free name in output_dir.")
    report.set_defaults(func=_cmd_report)

    layout = subparsers.add_parser("layout", help="Print report drawing operations as JSON (no PDF).")
    _add_common_args(layout)
    layout.set_defaults(func=_cmd_layout)

    chart = subparsers.add_parser("chart", help="Render the radar or trend chart as PNG.")
    chart.add_argument("kind", choices=["radar", "trend"])
    _add_common_args(chart)
    chart.add_argument("--output", "-o", required=True, help="PNG path.")
    chart.set_defaults(func=_cmd_chart)

    args = ap.parse_args(argv)
    return args.func(args)


# ---------------- CLI subcommands ----------------


def _add_common_args(ap: argparse.ArgumentParser, *, edits: bool = True) -> None:
    ap.add_argument("--source", default=None, help="Skills JSON file or http(s) URL (default from config).")
    ap.add_argument("--config", default=None, help="Optional YAML/JSON/TOML config override (merged with pyproject.toml).")
    ap.add_argument("--lenient", action="store_true", help="Skip malformed entries instead of failing the load.")
    ap.add_argument("--verbose", "-v", action="store_true", help="Progress messages on stderr.")
    if edits:
        ap.add_argument(
            "--set",
            dest="edits",
            action="append",
            default=[],
            metavar="NAME=VALUE",
            help="Score edit applied before output; repeatable.",
        )
    ap.epilog = _EPILOG


def _stderr(msg: str) -> None:
    print(msg, file=sys.stderr)


class _Session:
    def __init__(self, args: argparse.Namespace) -> None:
        self.args = args
        self.logger = _stderr if args.verbose else None
        self.cfg: AppConfig = load_app_config(override_path=Path(args.config) if args.config else None)
        # a missing skills file surfaces later as a load failure
        self.cfg.validate(require_paths=False)
        self.rejected = 0

    def load(self) -> Optional[SkillStore]:
        outcome = api.load_store(
            self.args.source,
            app_config=self.cfg,
            strict=False if self.args.lenient else None,
            logger=self.logger,
        )
        if not outcome.ok:
            _stderr(outcome.status)
            return None
        return outcome.store

    def apply_edits(self, store: SkillStore) -> Optional[int]:
        """Returns an exit code when the edits cannot be applied at all."""
        try:
            edits = [api.parse_edit(e) for e in getattr(self.args, "edits", [])]
        except ValueError as e:
            _stderr(str(e))
            return 2

        try:
            results = api.apply_edits(store, edits)
        except NotFoundError as e:
            hint = api.suggest_skill(e.name, store.names())
            _stderr(f"{e}" + (f" (did you mean {hint!r}?)" if hint else ""))
            return 2

        for r in results:
            if r.ok:
                if self.logger:
                    self.logger(f"{r.name}: score set to {format_score(r.score)}")
            else:
                self.rejected += 1
                _stderr(f"{r.name}: {r.validation.message} ({r.raw!r}); kept {format_score(r.score)}")
        return None

    def prepare(self) -> Tuple[Optional[SkillStore], Optional[int]]:
        store = self.load()
        if store is None:
            return None, 1
        code = self.apply_edits(store)
        if code is not None:
            return None, code
        return store, None

    @property
    def exit_code(self) -> int:
        return 1 if self.rejected else 0


def _open_session(args: argparse.Namespace) -> Optional[_Session]:
    try:
        return _Session(args)
    except (FileNotFoundError, ValueError) as e:
        _stderr(str(e))
        return None


def _cmd_show(args: argparse.Namespace) -> int:
    session = _open_session(args)
    if session is None:
        return 2
    store = session.load()
    if store is None:
        return 1

    snapshot = store.snapshot()
    if args.json:
        print(json.dumps(_show_to_json(store), indent=2))
        return 0

    if not snapshot:
        print("No skills found.")
        return 0

    print("skill,score,previous,current,flagged")
    for rec, trend in zip(snapshot, build_trend(snapshot)):
        flagged = "yes" if rec.is_flagged else ""
        print(f"{rec.name},{format_score(rec.score)},{trend.previous:.2f},{trend.current:.2f},{flagged}")
    return 0


def _cmd_report(args: argparse.Namespace) -> int:
    session = _open_session(args)
    if session is None:
        return 2
    store, code = session.prepare()
    if store is None:
        return code or 1

    try:
        outcome = api.export_report(
            store.snapshot(),
            app_config=session.cfg,
            output_path=Path(args.output) if args.output else None,
            logger=session.logger,
        )
    except ReportError as e:
        _stderr(f"report failed: {e}")
        return 1

    print(f"{outcome.path} ({outcome.summary.page_count} page(s), {len(outcome.summary.sections)} section(s))")
    return session.exit_code


def _cmd_layout(args: argparse.Namespace) -> int:
    session = _open_session(args)
    if session is None:
        return 2
    store, code = session.prepare()
    if store is None:
        return code or 1

    ops, summary = api.layout_ops(store.snapshot(), app_config=session.cfg)
    payload = {
        "page_count": summary.page_count,
        "sections": [
            {"name": s.name, "page": s.page_index, "top_y": s.top_y, "bottom_y": s.bottom_y}
            for s in summary.sections
        ],
        "ops": [op.as_json() for op in ops],
    }
    print(json.dumps(payload, indent=2))
    return session.exit_code


def _cmd_chart(args: argparse.Namespace) -> int:
    session = _open_session(args)
    if session is None:
        return 2
    store, code = session.prepare()
    if store is None:
        return code or 1

    snapshot = store.snapshot()
    if args.kind == "radar":
        out = render_radar_png(build_radar(snapshot), args.output)
    else:
        out = render_trend_png(build_trend(snapshot), args.output)
    print(out)
    return session.exit_code


def _show_to_json(store: SkillStore) -> dict:
    snapshot = store.snapshot()
    return {
        "skills": [
            {
                "name": r.name,
                "score": r.score,
                "code_snippets": list(r.code_snippets),
                "timestamps": [ts.isoformat() for ts in r.attempt_timestamps],
                "iteration_depth": r.iteration_depth,
                "flagged": r.is_flagged,
            }
            for r in snapshot
        ],
        "radar": [{"name": p.name, "score": p.score} for p in build_radar(snapshot)],
        "trend": [
            {"name": p.name, "previous": p.previous, "current": p.current}
            for p in build_trend(snapshot)
        ],
    }


_EPILOG = """examples:
  skill-radar show --json
  skill-radar report --set "System Design=6.3" -o report.pdf
  skill-radar layout --source data/skills.json
  skill-radar chart radar -o radar.png

exit codes:
  0  success
  1  a --set value was rejected (other edits still applied) or loading failed
  2  usage error, invalid config or unknown skill name
"""


if __name__ == "__main__":
    raise SystemExit(main())
