import json

import pytest

from skill_radar.config import (
    AppConfig,
    DEFAULT_REPORT_FILENAME,
    DEFAULT_SKILLS_PATH,
    load_app_config,
)
from skill_radar.report import PageLayout


def test_load_app_config_reads_defaults_from_pyproject(project_root):
    cfg = load_app_config(project_root=project_root)
    cfg.validate()

    assert cfg.skills_path == project_root / DEFAULT_SKILLS_PATH
    assert cfg.source == str(project_root / DEFAULT_SKILLS_PATH)
    assert cfg.report_filename == DEFAULT_REPORT_FILENAME
    assert cfg.strict_load is True
    assert cfg.pending_ms == 400

    layout = cfg.page_layout
    assert layout.page_break_y == 270
    assert layout.top_margin == 15
    assert layout.wrap_width == 180
    assert layout.attempt_separator == " -> "


def test_load_app_config_json_override(tmp_path, project_root):
    override = tmp_path / "config.json"
    override.write_text(
        json.dumps(
            {
                "attempt_separator": " | ",
                "pending_ms": 0,
                "report": {"page_break_y": 250, "warning_color": [200, 0, 0]},
                "paths": {"output_dir": str(tmp_path / "out")},
            }
        ),
        encoding="utf-8",
    )

    cfg = load_app_config(project_root=project_root, override_path=override)
    cfg.validate()

    layout = cfg.page_layout
    assert layout.page_break_y == 250
    assert layout.top_margin == 15          # still from pyproject
    assert layout.warning_color == (200, 0, 0)
    assert layout.attempt_separator == " | "
    assert cfg.output_dir == tmp_path / "out"
    assert cfg.pending_ms == 0


def test_load_app_config_yaml_override(tmp_path, project_root):
    override = tmp_path / "config.yaml"
    override.write_text(
        "source_url: https://example.test/skills\nreport:\n  wrap_width: 150\n",
        encoding="utf-8",
    )

    cfg = load_app_config(project_root=project_root, override_path=override)

    assert cfg.source == "https://example.test/skills"
    assert cfg.page_layout.wrap_width == 150


def test_missing_override_file(tmp_path, project_root):
    with pytest.raises(FileNotFoundError):
        load_app_config(project_root=project_root, override_path=tmp_path / "nope.json")


def test_unsupported_override_format(tmp_path, project_root):
    override = tmp_path / "config.ini"
    override.write_text("[x]\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_app_config(project_root=project_root, override_path=override)


def test_defaults_without_pyproject(tmp_path):
    cfg = load_app_config(project_root=tmp_path)
    assert cfg.page_layout == PageLayout()
    assert cfg.skills_path == (tmp_path / DEFAULT_SKILLS_PATH).resolve()


def test_app_config_validation_collects_issues(tmp_path):
    cfg = AppConfig(
        skills_path=tmp_path / "missing.json",
        report={"wrap_width": 0, "top_margin": 300},
        report_filename="report.txt",
    )

    with pytest.raises(ValueError) as exc:
        cfg.validate()

    msg = str(exc.value)
    assert "skills_path" in msg
    assert "report.wrap_width" in msg
    assert "report.top_margin" in msg
    assert "report_filename" in msg


def test_unknown_report_setting_is_reported(tmp_path):
    cfg = AppConfig(skills_path=tmp_path, report={"font": "Comic"})
    issues = cfg.validate(strict=False)
    assert "report" in issues
