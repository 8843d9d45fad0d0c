"""Tests for project, task and activity matching."""
import pytest

from interpreter.entity_matcher import (
    extract_task_name,
    live_projects,
    match_activity,
    match_project,
    match_task,
    suggest_similar,
)
from interpreter.models import RosterEntry, coerce_roster


@pytest.fixture
def projects():
    return coerce_roster([
        {"id": "p1", "name": "Smith House", "status": "active"},
        {"id": "p2", "name": "Johnson Renovation", "status": "active"},
        {"id": "p3", "name": "Oak Street Renovation", "status": "planning"},
        {"id": "p4", "name": "Thompson Kitchen", "status": "completed"},
    ])


@pytest.fixture
def tasks():
    return coerce_roster([
        {"id": "t1", "title": "Drywall Installation", "status": "in_progress"},
        {"id": "t2", "title": "Framing Inspection", "status": "pending"},
        {"id": "t3", "title": "Electrical Rough-In", "status": "assigned"},
        {"id": "t4", "title": "Kitchen Cabinets", "status": "pending"},
    ])


class TestMatchProject:
    def test_direct_containment(self, projects):
        # Act
        match = match_project("Log 4 hours framing at Smith house", projects)

        # Assert
        assert match.id == "p1"
        assert match.label == "Smith House"
        assert match.confidence == pytest.approx(0.95)

    def test_misspelt_name_after_indicator(self, projects):
        match = match_project("Log 3 hours at Smyth house", projects)

        assert match.id == "p1"
        assert match.confidence == pytest.approx(0.85)

    def test_longest_match_wins(self, projects):
        match = match_project("Record thirty minutes meeting at Oak Street renovation", projects)

        assert match.id == "p3"

    def test_completed_project_skipped_when_live_ones_exist(self, projects):
        match = match_project("Put 8 hours electrical work on the Thompson job", projects)

        assert match is None

    def test_falls_back_to_full_roster_without_live_projects(self):
        # Arrange
        roster = coerce_roster([{"id": "p9", "name": "Thompson Kitchen", "status": "completed"}])

        # Act
        match = match_project("8 hours at Thompson Kitchen", roster)

        # Assert
        assert match.id == "p9"

    def test_first_entry_wins_ties(self):
        roster = [RosterEntry("a", "Main Street"), RosterEntry("b", "Main Street")]

        match = match_project("2 hours at main street", roster)

        assert match.id == "a"

    def test_empty_roster(self):
        assert match_project("Log 4 hours at Smith house", ()) is None

    def test_live_projects_filter(self, projects):
        assert [p.id for p in live_projects(projects)] == ["p1", "p2", "p3"]


class TestMatchTask:
    def test_exact_title(self, tasks):
        match = match_task("Mark drywall installation complete", tasks, "complete")

        assert match.id == "t1"
        assert match.confidence == pytest.approx(0.95)

    def test_extracted_name_inside_title(self, tasks):
        match = match_task("Finish the cabinets", tasks, "complete")

        assert match.id == "t4"
        assert match.confidence == pytest.approx(0.95)

    def test_misspelt_title(self, tasks):
        match = match_task("Mark drywal instalation done", tasks, "complete")

        assert match.id == "t1"
        assert match.confidence == pytest.approx(0.9 * 0.95)

    def test_empty_extracted_name_matches_nothing(self, tasks):
        assert match_task("Mark complete", tasks, "complete") is None

    def test_no_tasks(self):
        assert match_task("Mark drywall complete", [], "complete") is None


class TestExtractTaskName:
    def test_strips_action_and_filler_words(self):
        assert extract_task_name("Mark drywall installation complete", "complete") == "drywall installation"

    def test_strips_longest_action_phrase_first(self):
        assert extract_task_name("Start working on electrical rough in", "start") == "electrical rough"

    def test_put_on_hold(self):
        assert extract_task_name("Put the roofing task on hold", "pause") == "put roofing"


class TestMatchActivity:
    def test_keyword(self):
        match = match_activity("Log 4 hours framing")

        assert match.id == "framing"
        assert match.label == "Framing"
        assert match.confidence == pytest.approx(0.95)

    def test_short_keyword_scores_lower(self):
        match = match_activity("two hours of hvac")

        assert match.id == "hvac"
        assert match.confidence == pytest.approx(0.85)

    def test_short_keyword_needs_whole_word(self):
        match = match_activity("place the studs")

        assert match.id == "framing"

    def test_misspelt_keyword(self):
        match = match_activity("Log 2 hours framming")

        assert match.id == "framing"
        assert match.confidence == pytest.approx(0.875 * 0.9)

    def test_no_activity(self):
        assert match_activity("xyz qqq") is None


class TestSuggestSimilar:
    def test_closest_first(self, tasks):
        suggestions = suggest_similar("drywall", tasks)

        assert suggestions[0] == "Drywall Installation"
        assert len(suggestions) <= 3

    def test_nothing_above_floor(self, tasks):
        assert suggest_similar("", tasks) == []

    def test_labels_without_words_skipped(self):
        roster = [RosterEntry(id="t9", name="-")]

        assert suggest_similar("", roster) == []
