from datetime import date

from services.conflicts import Candidate
from services.task_text import extract_task_fields, format_task, parse_action


def test_parse_action_with_nested_task():
    reply = (
        "Sure! Here it is:\n"
        '{"action": "create_task", "task": {"title": "Study Session", "priority": "High", '
        '"dueDate": "2026-01-15", "dueTime": "14:00"}}\nGood luck!'
    )
    action, payload = parse_action(reply)
    assert action == "create_task"
    assert payload["task"]["dueTime"] == "14:00"


def test_parse_action_without_json():
    assert parse_action("Go to the Focus tab and press Start.") is None
    assert parse_action('{"note": "no action here"}') is None
    assert parse_action("") is None


def test_extract_task_fields():
    fields = extract_task_fields("urgent essay for History due 12/5/25")
    assert fields == {"priority": "High", "subject": "History", "due_date": "2025-12-05"}
    assert extract_task_fields("nothing to see") is None


def test_format_task():
    task = Candidate(title="Essay", due_date=date(2025, 12, 5), priority="Low")
    assert format_task(task) == (
        "Essay\n   Priority: Low\n   Due: 2025-12-05 at End of day\n   Subject: General"
    )
