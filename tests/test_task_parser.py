"""Tests for task command interpretation."""
import pytest
from unittest.mock import patch

from interpreter.models import TaskContext, TaskUpdates
from interpreter.task_parser import (
    DEFAULT_NOT_FOUND_SUGGESTIONS,
    extract_updates,
    get_task_command_suggestions,
    parse_task_voice,
)

TASKS = [
    {"id": "t1", "title": "Drywall Installation", "status": "in_progress"},
    {"id": "t2", "title": "Framing Inspection", "status": "pending"},
    {"id": "t3", "title": "Electrical Rough-In", "status": "assigned"},
    {"id": "t4", "title": "Kitchen Cabinets", "status": "pending"},
    {"id": "t5", "title": "Roofing", "status": "in_progress"},
]


@pytest.fixture
def context():
    return TaskContext(tasks=TASKS, project_id="p1")


class TestParseTaskVoice:
    def test_mark_complete(self, context):
        # Act
        result = parse_task_voice("Mark drywall installation complete", context)

        # Assert
        assert result.is_success()
        command = result.unwrap()
        assert command.action == "complete"
        assert command.task_id == "t1"
        assert command.task_title == "Drywall Installation"
        assert command.updates == TaskUpdates(status="completed")
        assert command.confidence == pytest.approx(0.86)
        assert command.warnings == []

    def test_start_working(self, context):
        result = parse_task_voice("Start working on electrical rough in", context)

        command = result.unwrap()
        assert command.action == "start"
        assert command.task_id == "t3"
        assert command.updates == TaskUpdates(status="in_progress")
        assert command.confidence == pytest.approx(0.91)

    def test_pause_has_no_updates(self, context):
        result = parse_task_voice("Put the roofing task on hold", context)

        command = result.unwrap()
        assert command.action == "pause"
        assert command.task_id == "t5"
        assert command.updates is None
        assert command.confidence == pytest.approx(0.87)

    def test_already_completed_warning(self):
        # Arrange
        context = TaskContext(tasks=[{"id": "t1", "title": "Drywall Installation", "status": "completed"}])

        # Act
        command = parse_task_voice("Mark drywall installation complete", context).unwrap()

        # Assert
        assert command.warnings == ["This task is already marked as complete"]

    def test_already_in_progress_warning(self, context):
        command = parse_task_voice("Start the roofing", context).unwrap()

        assert command.task_id == "t5"
        assert command.warnings == ["This task is already in progress"]

    def test_no_task_name_uses_default_suggestions(self, context):
        # Act
        result = parse_task_voice("Mark complete", context)

        # Assert
        assert result.is_failure()
        assert result.message == 'Could not find a matching task for ""'
        assert result.suggestions == DEFAULT_NOT_FOUND_SUGGESTIONS

    def test_near_misses_offered(self, context):
        with patch("interpreter.task_parser.match_task", return_value=None):
            result = parse_task_voice("Mark drywall complete", context)

        assert result.message == 'Could not find a matching task for "drywall"'
        assert len(result.suggestions) == 1
        assert result.suggestions[0].startswith("Did you mean: Drywall Installation")

    def test_empty_transcript(self, context):
        assert parse_task_voice("", context).message == "No transcript provided"

    def test_to_dict_flattens_updates(self, context):
        data = parse_task_voice("Mark drywall installation complete", context).unwrap().to_dict()

        assert data["updates"] == {"status": "completed"}
        assert data["task_id"] == "t1"


class TestExtractUpdates:
    def test_status_only(self):
        assert extract_updates("mark framing inspection in progress") == TaskUpdates(status="in_progress")

    def test_priority_only(self):
        assert extract_updates("set the framing inspection to urgent") == TaskUpdates(priority="high")

    def test_status_and_priority(self):
        updates = extract_updates("Kitchen cabinets are done, it was minor")

        assert updates == TaskUpdates(status="completed", priority="low")

    def test_high_priority_table_checked_first(self):
        # "priority" is itself a high priority keyword
        assert extract_updates("low priority").priority == "high"

    def test_nothing(self):
        assert extract_updates("drywall") is None


def test_task_command_suggestions():
    assert len(get_task_command_suggestions()) == 3
