import json
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import List

import pytest


ROOT = Path(__file__).resolve().parent.parent
SRC = ROOT / "src"
if SRC.exists():
    sys.path.insert(0, str(SRC))

from skill_radar.core import SkillRecord  # noqa: E402


def _utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


@pytest.fixture(scope="session")
def project_root() -> Path:
    return ROOT


@pytest.fixture(scope="session")
def data_dir(project_root: Path) -> Path:
    return project_root / "data"


@pytest.fixture()
def sample_records() -> List[SkillRecord]:
    return [
        SkillRecord(
            name="Algorithms",
            score=7.5,
            code_snippets=("function add(a, b) { return a + b; }",),
            attempt_timestamps=(_utc(2025, 8, 6, 13, 45), _utc(2025, 8, 6, 14, 30)),
            iteration_depth=3,
            flagged=True,
        ),
        SkillRecord(
            name="Data Structures",
            score=8.2,
            code_snippets=("class Stack { constructor() { this.items = []; } }",),
            attempt_timestamps=(_utc(2025, 8, 6, 11, 0), _utc(2025, 8, 6, 12, 30)),
            iteration_depth=2,
            flagged=False,
        ),
        SkillRecord(
            name="System Design",
            score=5.1,
            code_snippets=(),
            attempt_timestamps=(),
            iteration_depth=4,
            flagged=True,
        ),
    ]


@pytest.fixture()
def sample_skills_json(tmp_path: Path, data_dir: Path) -> Path:
    source = data_dir / "skills.json"
    if not source.exists():
        pytest.skip("sample skills.json missing")

    dest = tmp_path / source.name
    dest.write_text(json.dumps(json.loads(source.read_text(encoding="utf-8"))), encoding="utf-8")
    return dest
