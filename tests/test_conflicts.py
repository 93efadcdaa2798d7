from datetime import date, datetime

import pytest

from services.conflicts import (
    DATE,
    NONE,
    PRIORITY,
    TIME,
    Candidate,
    ConflictDetector,
    candidate_from_payload,
    check_conflicts,
    find_priority_groups,
    recommend_ordering,
)

DAY = date(2025, 12, 5)


def _task(title, due_time=None, priority="Medium", day=DAY, created=None, task_id=None):
    return Candidate(
        title=title,
        due_date=day,
        due_time=due_time,
        priority=priority,
        created_at=created,
        id=task_id,
    )


class FakeStore:
    def __init__(self, tasks):
        self.tasks = tasks
        self.calls = 0

    def list_incomplete_tasks(self, user_id):
        self.calls += 1
        return list(self.tasks)


class BrokenStore:
    def list_incomplete_tasks(self, user_id):
        raise ConnectionError("store unreachable")


def test_time_collision():
    existing = _task("Chemistry lab", "14:00")
    report = check_conflicts(_task("Essay", "14:00"), [existing])
    assert report.has_conflict
    assert report.conflict_type == TIME
    assert report.conflicting_tasks == [existing]
    assert "Chemistry lab" in report.recommendation
    assert "2:00 PM" in report.recommendation


def test_high_priority_contention():
    existing = _task("Exam prep", "09:00", priority="High")
    report = check_conflicts(_task("Project", "16:00", priority="High"), [existing])
    assert report.conflict_type == PRIORITY
    assert report.conflicting_tasks == [existing]
    assert "Exam prep" in report.recommendation
    assert 'Complete "Exam prep" first, then "Project".' in report.recommendation


def test_medium_priority_does_not_contend():
    existing = _task("Reading", "09:00", priority="Medium")
    report = check_conflicts(_task("Notes", "16:00", priority="Medium"), [existing])
    assert not report.has_conflict


def test_busy_day():
    existing = [
        _task("A", "08:00", priority="Low"),
        _task("B", "10:00", priority="Medium"),
        _task("C", "12:00", priority="High"),
    ]
    report = check_conflicts(_task("D", "15:00", priority="Medium"), existing)
    assert report.conflict_type == DATE
    assert report.conflicting_tasks == existing
    assert "3 tasks" in report.recommendation


def test_two_tasks_that_day_is_fine():
    existing = [_task("A", "08:00", "Low"), _task("B", "10:00", "Medium")]
    report = check_conflicts(_task("C", "15:00", "Medium"), existing)
    assert not report.has_conflict
    assert report.conflict_type == NONE
    assert report.conflicting_tasks == []
    assert report.recommendation == ""


def test_time_wins_over_busy_day():
    existing = [
        _task("A", "08:00"),
        _task("B", "10:00"),
        _task("C", "15:00"),
    ]
    report = check_conflicts(_task("D", "15:00"), existing)
    assert report.conflict_type == TIME


def test_time_wins_over_priority():
    existing = [_task("A", "15:00", "High")]
    assert check_conflicts(_task("B", "15:00", "High"), existing).conflict_type == TIME


def test_other_days_are_ignored():
    existing = [_task("A", "14:00", "High", day=date(2025, 12, 6))]
    assert not check_conflicts(_task("B", "14:00", "High"), existing).has_conflict


def test_missing_due_time_never_collides():
    existing = [_task("A", None)]
    assert not check_conflicts(_task("B", None), existing).has_conflict


def test_candidate_is_not_compared_with_itself():
    stored = _task("A", "14:00", task_id="abc")
    assert not check_conflicts(_task("A", "14:00", task_id="abc"), [stored]).has_conflict


def test_detector_reads_store_once():
    store = FakeStore([_task("A", "14:00")])
    report = ConflictDetector(store).check(_task("B", "14:00"), "user-1")
    assert report.conflict_type == TIME
    assert store.calls == 1


def test_detector_store_failure_is_not_a_conflict(caplog):
    with caplog.at_level("ERROR", logger="planner.conflicts"):
        report = ConflictDetector(BrokenStore()).check(_task("B", "14:00"), "user-1")
    assert not report.has_conflict
    assert report.conflict_type == NONE
    assert "task store query failed" in caplog.text


def test_check_proposal_from_assistant_payload():
    store = FakeStore([_task("A", "14:00")])
    payload = {
        "action": "create_task",
        "task": {"title": "Study", "priority": "High", "dueDate": "2025-12-05", "dueTime": "14:00"},
    }
    report = ConflictDetector(store).check_proposal(payload, "user-1")
    assert report.conflict_type == TIME


def test_check_proposal_without_date_skips_store():
    store = FakeStore([])
    report = ConflictDetector(store).check_proposal({"task": {"title": "Study"}}, "user-1")
    assert not report.has_conflict
    assert store.calls == 0


def test_candidate_from_payload_normalizes():
    candidate = candidate_from_payload({"title": " Essay ", "due_date": "12/05/2025", "priority": "high"})
    assert candidate.title == "Essay"
    assert candidate.due_date == DAY
    assert candidate.priority == "High"
    assert candidate.subject == "General"


def test_recommend_ordering_prefers_earlier_time():
    late = _task("Late", "18:00")
    early = _task("Early", "08:00")
    assert recommend_ordering(late, early) == 'Complete "Early" first, then "Late".'


def test_recommend_ordering_ties_broken_by_creation():
    older = _task("Older", "10:00", created=datetime(2025, 11, 1))
    newer = _task("Newer", "10:00", created=datetime(2025, 11, 2))
    assert recommend_ordering(newer, older) == 'Complete "Older" first, then "Newer".'


def test_recommend_ordering_missing_time_is_end_of_day():
    assert recommend_ordering(_task("Any time"), _task("Noon", "12:00")).startswith('Complete "Noon"')


class ExplodingGenerator:
    def suggest_ordering(self, task_a, task_b):
        raise RuntimeError("quota exceeded")


class EchoGenerator:
    def __init__(self, text):
        self.text = text

    def suggest_ordering(self, task_a, task_b):
        return self.text


@pytest.mark.parametrize(
    "generator",
    [
        ExplodingGenerator(),
        EchoGenerator(""),
        EchoGenerator("   "),
        EchoGenerator(None),
        EchoGenerator({"text": "x"}),
        EchoGenerator(42),
    ],
)
def test_recommend_ordering_falls_back(generator):
    text = recommend_ordering(_task("B", "18:00"), _task("A", "08:00"), generator)
    assert text == 'Complete "A" first, then "B".'


def test_recommend_ordering_uses_generator_output():
    detector = ConflictDetector(FakeStore([]), EchoGenerator(" Start with A. "))
    assert detector.recommend_ordering(_task("A"), _task("B")) == "Start with A."


def test_find_priority_groups():
    a = _task("A", priority="High")
    b = _task("B", priority="Low")
    c = _task("C", priority="High")
    assert find_priority_groups([a, b, c]) == [a, c]
    assert find_priority_groups([a, b]) == []


def test_importing_module_does_not_configure_logging(monkeypatch):
    import importlib

    import core.log
    import services.conflicts as conflicts_module

    calls = []
    monkeypatch.setattr(core.log, "get_logger", lambda area: calls.append(area))
    try:
        importlib.reload(conflicts_module)
        assert calls == []
    finally:
        monkeypatch.undo()
        importlib.reload(conflicts_module)
