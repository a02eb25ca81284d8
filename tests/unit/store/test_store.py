import dataclasses
import math

import pytest

from skill_radar.core import SkillRecord
from skill_radar.store import LoadError, NotFoundError, SkillStore


def test_snapshot_preserves_load_order(sample_records):
    store = SkillStore(sample_records)
    assert [r.name for r in store.snapshot()] == ["Algorithms", "Data Structures", "System Design"]
    assert len(store) == 3
    assert "Algorithms" in store
    assert "Unknown" not in store


def test_snapshot_is_immutable(sample_records):
    store = SkillStore(sample_records)
    snap = store.snapshot()

    assert isinstance(snap, tuple)
    with pytest.raises(dataclasses.FrozenInstanceError):
        snap[0].score = 1.0  # type: ignore[misc]

    store.set_score("Algorithms", 1.0)
    assert snap[0].score == 7.5
    assert store.snapshot()[0].score == 1.0


def test_load_rejects_duplicates_and_keeps_previous_collection(sample_records):
    store = SkillStore(sample_records)
    dupes = [SkillRecord(name="A", score=1.0), SkillRecord(name="B", score=2.0), SkillRecord(name="A", score=3.0)]

    with pytest.raises(LoadError) as exc:
        store.load(dupes)

    assert exc.value.duplicates == ("A",)
    assert store.names() == ["Algorithms", "Data Structures", "System Design"]


def test_load_replaces_collection(sample_records):
    store = SkillStore(sample_records)
    store.load([SkillRecord(name="Only", score=3.0)])
    assert store.names() == ["Only"]
    assert store.get("Algorithms") is None


def test_set_score_unknown_name():
    store = SkillStore([SkillRecord(name="A", score=1.0)])
    with pytest.raises(NotFoundError) as exc:
        store.set_score("B", 5.0)
    assert exc.value.name == "B"


def test_set_score_is_idempotent(sample_records):
    store = SkillStore(sample_records)
    first = store.set_score("System Design", 6.3)
    second = store.set_score("System Design", 6.3)
    assert first == second
    assert store.get("System Design").score == 6.3


@pytest.mark.parametrize("candidate, expected", [(0.0, 0.0), (10.0, 10.0), (-0.01, 0.0), (10.01, 10.0), (-50, 0.0), (99, 10.0)])
def test_set_score_never_leaves_range(candidate, expected):
    store = SkillStore([SkillRecord(name="A", score=5.0)])
    updated = store.set_score("A", candidate)
    assert updated.score == expected
    assert 0.0 <= store.get("A").score <= 10.0


def test_set_score_nan_is_ignored():
    store = SkillStore([SkillRecord(name="A", score=5.0)])
    assert store.set_score("A", math.nan).score == 5.0
    assert store.get("A").score == 5.0


def test_set_score_only_touches_score(sample_records):
    store = SkillStore(sample_records)
    before = store.get("Algorithms")
    after = store.set_score("Algorithms", 9.0)
    assert dataclasses.replace(before, score=9.0) == after
