import json

import pytest

from skill_radar import api
from skill_radar.config import AppConfig
from skill_radar.report import RecordingSurface, ReportPaginator
from skill_radar.views import build_radar


def _config(tmp_path, skills_path):
    return AppConfig(data_dir=tmp_path, skills_path=skills_path, output_dir=tmp_path / "reports")


def test_load_edit_and_export(tmp_path, sample_skills_json):
    cfg = _config(tmp_path, sample_skills_json)

    outcome = api.load_store(app_config=cfg)
    assert outcome.ok
    assert outcome.status == "loaded 3 skills"

    results = api.apply_edits(outcome.store, [("System Design", "12"), ("Algorithms", "9")])
    assert [r.ok for r in results] == [False, True]
    assert results[0].score == 5.1
    assert results[0].validation.message == "Value must be 0-10"
    assert outcome.store.get("Algorithms").score == 9.0

    exported = api.export_report(outcome.store.snapshot(), app_config=cfg)
    assert exported.path == tmp_path / "reports" / "skill_report.pdf"
    assert exported.path.read_bytes().startswith(b"%PDF")
    assert exported.summary.page_count == 1

    again = api.export_report(outcome.store.snapshot(), app_config=cfg)
    assert again.path.name == "skill_report-2.pdf"


def test_recorded_report_matches_sample_content(sample_records):
    surface = RecordingSurface()
    ReportPaginator().render(sample_records, build_radar(sample_records), surface)
    lines = surface.lines()

    assert lines[:4] == [
        "Skill Radar Report",
        "Algorithms: 7.5/10",
        "Data Structures: 8.2/10",
        "System Design: 5.1/10",
    ]
    assert "Attempts: 2025-08-06 13:45 -> 2025-08-06 14:30" in lines
    assert lines.count("AI/Plagiarism Suspected") == 2
    system = lines.index("System Design Details")
    assert lines[system:] == [
        "System Design Details",
        "Attempts: N/A",
        "Iteration Depth: 4",
        "AI/Plagiarism Suspected",
        "Code Snippets:",
        "N/A",
    ]


def test_next_report_path(tmp_path):
    assert api.next_report_path(tmp_path, "skill_report.pdf") == tmp_path / "skill_report.pdf"
    (tmp_path / "skill_report.pdf").write_bytes(b"")
    (tmp_path / "skill_report-2.pdf").write_bytes(b"")
    assert api.next_report_path(tmp_path, "skill_report.pdf") == tmp_path / "skill_report-3.pdf"


def test_load_store_missing_file_is_error_state(tmp_path):
    cfg = _config(tmp_path, tmp_path / "missing.json")
    outcome = api.load_store(app_config=cfg)

    assert not outcome.ok
    assert len(outcome.store) == 0
    assert outcome.status.startswith("error:load:")


def test_load_store_duplicates_is_error_state(tmp_path):
    src = tmp_path / "dupes.json"
    src.write_text(json.dumps([{"skill": "A", "score": 1}, {"skill": "A", "score": 2}]), encoding="utf-8")

    logs = []
    outcome = api.load_store(src, app_config=_config(tmp_path, src), logger=logs.append)

    assert not outcome.ok
    assert len(outcome.store) == 0
    assert any(m.startswith("load failed") for m in logs)


def test_load_store_empty_list(tmp_path):
    src = tmp_path / "empty.json"
    src.write_text("[]", encoding="utf-8")
    outcome = api.load_store(src, app_config=_config(tmp_path, src))
    assert outcome.ok
    assert outcome.status == "no skills found"


def test_parse_edit_and_suggestion():
    assert api.parse_edit("System Design = 6.3") == ("System Design", "6.3")
    assert api.suggest_skill("algoritms", ["Algorithms", "System Design"]) == "Algorithms"
    assert api.suggest_skill("zzz", []) is None


def test_export_rejects_invalid_config(tmp_path, sample_records):
    cfg = AppConfig(output_dir=tmp_path, report={"wrap_width": -1})
    with pytest.raises(ValueError, match="report.wrap_width"):
        api.export_report(sample_records, app_config=cfg)
    assert not list(tmp_path.iterdir())
