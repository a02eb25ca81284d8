from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

try:  # Python <3.11 fallback
    import tomllib  # type: ignore
except ModuleNotFoundError:  # pragma: no cover - fallback path
    import tomli as tomllib  # type: ignore

import yaml

from skill_radar.report.layout import PageLayout


DEFAULT_DATA_DIR = Path("data")
DEFAULT_SKILLS_PATH = DEFAULT_DATA_DIR / "skills.json"
DEFAULT_OUTPUT_DIR = Path(".")
DEFAULT_REPORT_FILENAME = "skill_report.pdf"
DEFAULT_PENDING_MS = 400
DEFAULT_TIMEOUT_S = 30.0

_TOP_LAYOUT_KEYS = ("timestamp_format", "attempt_separator")


def _load_pyproject_config(project_root: Path) -> Dict[str, Any]:
    pyproject_path = project_root / "pyproject.toml"
    if not pyproject_path.exists():
        return {}

    with pyproject_path.open("rb") as f:
        data = tomllib.load(f)
    return data.get("tool", {}).get("skill_radar", {}) or {}


def _ensure_mapping(obj: Any, ctx: str) -> Dict[str, Any]:
    if obj is None:
        return {}
    if not isinstance(obj, dict):
        raise ValueError(f"{ctx} must be a mapping/object")
    return obj


def _load_override_file(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(f"Config override not found: {path}")

    suffix = path.suffix.lower()
    if suffix == ".json":
        return _ensure_mapping(json.loads(path.read_text(encoding="utf-8")), "JSON config")
    if suffix in {".yaml", ".yml"}:
        return _ensure_mapping(yaml.safe_load(path.read_text(encoding="utf-8")), "YAML config")
    if suffix == ".toml":
        with path.open("rb") as f:
            return _ensure_mapping(tomllib.load(f), "TOML config")

    raise ValueError(f"Unsupported config override format: {path}")


def _merge_section(base: Mapping[str, Any], override: Mapping[str, Any], key: str) -> Dict[str, Any]:
    merged = dict(_ensure_mapping(base.get(key), f"{key} section"))
    merged.update(_ensure_mapping(override.get(key), f"{key} section"))
    return merged


def _merge_top(base: Mapping[str, Any], override: Mapping[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    merged.update(override)
    merged.pop("paths", None)
    merged.pop("report", None)
    return merged


def _resolve_path(project_root: Path, candidate: Optional[object], default: Path) -> Path:
    path = default if candidate is None else Path(str(candidate))
    if path.is_absolute():
        return path
    return (project_root / path).resolve()


@dataclass(frozen=True)
class AppConfig:
    data_dir: Path = DEFAULT_DATA_DIR
    skills_path: Path = DEFAULT_SKILLS_PATH
    output_dir: Path = DEFAULT_OUTPUT_DIR
    source_url: Optional[str] = None
    strict_load: bool = True
    pending_ms: int = DEFAULT_PENDING_MS
    request_timeout_s: float = DEFAULT_TIMEOUT_S
    report_filename: str = DEFAULT_REPORT_FILENAME
    report: Mapping[str, Any] = field(default_factory=dict)

    @property
    def source(self) -> str:
        """Where skills load from: the URL when configured, else the JSON file."""
        return self.source_url or str(self.skills_path)

    @property
    def page_layout(self) -> PageLayout:
        return PageLayout.from_mapping(self.report)

    def validate(self, *, strict: bool = True, require_paths: bool = True) -> Dict[str, str]:
        issues: Dict[str, str] = {}

        try:
            layout = self.page_layout
        except (TypeError, ValueError) as e:
            issues["report"] = str(e)
        else:
            for key, msg in layout.validate().items():
                issues[f"report.{key}"] = msg

        if require_paths and not self.source_url and not Path(self.skills_path).exists():
            issues["skills_path"] = f"path does not exist: {self.skills_path}"

        if self.source_url and not self.source_url.startswith(("http://", "https://")):
            issues["source_url"] = f"source_url must be http(s): {self.source_url}"

        if not isinstance(self.strict_load, bool):
            issues["strict_load"] = "strict_load must be a bool"

        if self.pending_ms < 0:
            issues["pending_ms"] = "pending_ms must be >= 0"

        if not self.report_filename.lower().endswith(".pdf"):
            issues["report_filename"] = f"report_filename must end in .pdf: {self.report_filename}"

        if strict and issues:
            details = "\n- ".join(f"{k}: {v}" for k, v in issues.items())
            raise ValueError("Config validation failed:\n- " + details)
        return issues

    @classmethod
    def _from_maps(
        cls,
        *,
        project_root: Path,
        top: Mapping[str, Any],
        paths: Mapping[str, Any],
        report: Mapping[str, Any],
    ) -> "AppConfig":
        data_dir = _resolve_path(project_root, paths.get("data_dir") or top.get("data_dir"), DEFAULT_DATA_DIR)
        skills_default = data_dir / DEFAULT_SKILLS_PATH.name
        skills = paths.get("skills") or top.get("skills_path")
        output_dir = paths.get("output_dir") or top.get("output_dir")

        # timestamp/separator settings may sit at top level for convenience
        layout = {k: top[k] for k in _TOP_LAYOUT_KEYS if k in top}
        layout.update(report)

        strict_load = top.get("strict_load")
        source_url = top.get("source_url")

        return cls(
            data_dir=data_dir,
            skills_path=_resolve_path(project_root, skills, skills_default),
            output_dir=_resolve_path(project_root, output_dir, DEFAULT_OUTPUT_DIR),
            source_url=str(source_url) if source_url else None,
            strict_load=bool(True if strict_load is None else strict_load),
            pending_ms=int(top.get("pending_ms", DEFAULT_PENDING_MS)),
            request_timeout_s=float(top.get("request_timeout_s", DEFAULT_TIMEOUT_S)),
            report_filename=str(top.get("report_filename", DEFAULT_REPORT_FILENAME)),
            report=layout,
        )


def load_app_config(*, project_root: Optional[Path] = None, override_path: Optional[Path] = None) -> AppConfig:
    root = Path(project_root) if project_root else Path.cwd()

    base = _load_pyproject_config(root)
    override = _load_override_file(override_path) if override_path else {}

    top = _merge_top(base, override)
    paths = _merge_section(base, override, "paths")
    report = _merge_section(base, override, "report")

    return AppConfig._from_maps(project_root=root, top=top, paths=paths, report=report)
