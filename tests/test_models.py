"""Tests for the record types and time entry helpers."""

from datetime import datetime
from datetime import timedelta
from datetime import timezone

import pytest

from toggl_client.exceptions import PreconditionError
from toggl_client.exceptions import TimeEntryRunningError
from toggl_client.models import Project
from toggl_client.models import TimeEntry

START = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)
STOP = datetime(2024, 3, 1, 10, 30, tzinfo=timezone.utc)


@pytest.fixture
def stopped() -> TimeEntry:
    return TimeEntry(
        wid=7,
        id=42,
        description="writing spec",
        start=START,
        stop=STOP,
        tags=["docs", "review", "billable"],
        duration=5400,
    )


@pytest.fixture
def running() -> TimeEntry:
    return TimeEntry(wid=7, id=43, start=START, duration=-1)


class TestIsRunning:
    def test_negative_duration_is_running(self) -> None:
        assert TimeEntry(duration=-1).is_running
        assert TimeEntry(duration=-1711000000, stop=STOP).is_running

    def test_missing_stop_is_not_running(self) -> None:
        assert not TimeEntry(start=START, stop=None, duration=0).is_running
        assert not TimeEntry(start=START, stop=None, duration=60).is_running


class TestTags:
    def test_has_tag(self, stopped: TimeEntry) -> None:
        assert stopped.has_tag("docs")
        assert not stopped.has_tag("missing")

    def test_add_tag(self, stopped: TimeEntry) -> None:
        stopped.add_tag("new")
        assert stopped.tags == ["docs", "review", "billable", "new"]

    def test_add_tag_is_idempotent(self, stopped: TimeEntry) -> None:
        stopped.add_tag("review")
        assert stopped.tags == ["docs", "review", "billable"]

    def test_remove_tag_preserves_order(self, stopped: TimeEntry) -> None:
        stopped.remove_tag("review")
        assert stopped.tags == ["docs", "billable"]

    def test_remove_absent_tag(self, stopped: TimeEntry) -> None:
        stopped.remove_tag("missing")
        assert stopped.tags == ["docs", "review", "billable"]

    def test_remove_one_occurrence(self) -> None:
        entry = TimeEntry(tags=["a", "b", "a"])
        entry.remove_tag("a")
        assert entry.tags == ["b", "a"]


class TestCopy:
    def test_copy_is_equal(self, stopped: TimeEntry) -> None:
        assert stopped.copy() == stopped

    def test_copy_tags_are_independent(self, stopped: TimeEntry) -> None:
        copied = stopped.copy()
        copied.add_tag("extra")
        copied.remove_tag("docs")
        assert stopped.tags == ["docs", "review", "billable"]

    def test_copy_times_are_independent(self, stopped: TimeEntry) -> None:
        copied = stopped.copy()
        copied.set_start_time(START - timedelta(hours=1), update_end=True)
        copied.set_stop_time(STOP + timedelta(hours=2))
        assert stopped.start == START
        assert stopped.stop == STOP
        assert stopped.duration == 5400


class TestSetters:
    def test_set_duration(self, stopped: TimeEntry) -> None:
        stopped.set_duration(600)
        assert stopped.duration == 600
        assert stopped.stop == START + timedelta(seconds=600)

    def test_set_duration_on_running_entry(self, running: TimeEntry) -> None:
        before = running.copy()
        with pytest.raises(TimeEntryRunningError):
            running.set_duration(600)
        assert running == before

    def test_set_stop_time(self, stopped: TimeEntry) -> None:
        stopped.set_stop_time(START + timedelta(minutes=20, milliseconds=900))
        assert stopped.duration == 1200
        assert stopped.stop == START + timedelta(minutes=20, milliseconds=900)

    def test_set_stop_time_on_running_entry(self, running: TimeEntry) -> None:
        before = running.copy()
        with pytest.raises(TimeEntryRunningError):
            running.set_stop_time(STOP)
        assert running == before

    def test_running_error_is_precondition_error(self, running: TimeEntry) -> None:
        with pytest.raises(PreconditionError):
            running.set_duration(1)

    def test_set_start_time_update_end(self, stopped: TimeEntry) -> None:
        new_start = START + timedelta(hours=1)
        stopped.set_start_time(new_start, update_end=True)
        assert stopped.start == new_start
        assert stopped.duration == 5400
        assert stopped.stop == new_start + timedelta(seconds=5400)

    def test_set_start_time_update_duration(self, stopped: TimeEntry) -> None:
        new_start = START + timedelta(minutes=30)
        stopped.set_start_time(new_start, update_end=False)
        assert stopped.start == new_start
        assert stopped.stop == STOP
        assert stopped.duration == 3600

    def test_set_start_time_counts_whole_seconds(self, stopped: TimeEntry) -> None:
        stopped.stop = START + timedelta(seconds=10, milliseconds=200)
        stopped.set_start_time(START + timedelta(milliseconds=500), update_end=False)
        assert stopped.duration == 10

    def test_set_start_time_on_running_entry(self, running: TimeEntry) -> None:
        new_start = START - timedelta(minutes=5)
        running.set_start_time(new_start, update_end=False)
        assert running.start == new_start
        assert running.stop is None
        assert running.duration == -1

    def test_set_duration_without_start(self) -> None:
        with pytest.raises(PreconditionError):
            TimeEntry(duration=10).set_duration(20)


class TestToDict:
    def test_to_dict(self, stopped: TimeEntry) -> None:
        data = stopped.to_dict()
        assert data["id"] == 42
        assert data["workspace_id"] == 7
        assert data["start"] == "2024-03-01T09:00:00+00:00"
        assert data["stop"] == "2024-03-01T10:30:00+00:00"
        assert data["duration"] == 5400
        assert data["tags"] == ["docs", "review", "billable"]
        assert "project_id" not in data

    def test_to_dict_omits_empty_fields(self) -> None:
        data = TimeEntry().to_dict()
        assert data == {"tags": [], "duronly": False, "billable": False}


class TestProject:
    def test_is_active(self) -> None:
        assert Project(wid=1, id=2, name="p", active=True).is_active

    def test_inactive(self) -> None:
        assert not Project(wid=1, id=2, name="p", active=False).is_active

    def test_deleted_is_not_active(self) -> None:
        project = Project(wid=1, id=2, name="p", active=True, server_deleted_at=STOP)
        assert not project.is_active
