from __future__ import annotations

from dataclasses import dataclass
from dataclasses import field
from datetime import datetime
from datetime import timedelta
from typing import Any
from typing import NamedTuple

from toggl_client.exceptions import PreconditionError
from toggl_client.exceptions import TimeEntryRunningError
from toggl_client.timestamps import format_timestamp


class Workspace(NamedTuple):
    id: int
    name: str
    rounding_minutes: int = 0
    rounding: int = 0
    premium: bool = False


class Client(NamedTuple):
    wid: int
    id: int
    name: str
    archived: bool = False
    notes: str = ""


class Project(NamedTuple):
    wid: int
    id: int
    name: str
    active: bool = True
    cid: int | None = None
    billable: bool | None = None
    server_deleted_at: datetime | None = None

    @property
    def is_active(self) -> bool:
        """True if the project exists and is active"""
        return self.active and self.server_deleted_at is None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "workspace_id": self.wid,
            "id": self.id,
            "name": self.name,
            "active": self.active,
        }
        if self.cid is not None:
            data["client_id"] = self.cid
        if self.billable is not None:
            data["billable"] = self.billable
        if self.server_deleted_at is not None:
            data["server_deleted_at"] = format_timestamp(self.server_deleted_at)
        return data


class Task(NamedTuple):
    wid: int
    pid: int
    id: int
    name: str


class Tag(NamedTuple):
    wid: int
    id: int
    name: str

    def to_dict(self) -> dict[str, Any]:
        return {"workspace_id": self.wid, "id": self.id, "name": self.name}


@dataclass
class TimeEntry:
    """
    A single Toggl time entry.

    An entry is running if and only if its duration is negative; a missing
    stop time says nothing about that on its own. Duration and stop time are
    derived from each other, so the setters below keep them consistent and
    refuse to touch a running entry.
    """

    wid: int = 0
    id: int = 0
    pid: int | None = None
    tid: int | None = None
    description: str = ""
    start: datetime | None = None
    stop: datetime | None = None
    tags: list[str] = field(default_factory=list)
    duration: int = 0
    duronly: bool = False
    billable: bool = False

    @property
    def is_running(self) -> bool:
        return self.duration < 0

    @property
    def start_time(self) -> datetime | None:
        return self.start

    @property
    def stop_time(self) -> datetime | None:
        return self.stop

    def copy(self) -> TimeEntry:
        # datetimes are immutable, only the tag list needs a fresh container
        return TimeEntry(
            wid=self.wid,
            id=self.id,
            pid=self.pid,
            tid=self.tid,
            description=self.description,
            start=self.start,
            stop=self.stop,
            tags=list(self.tags),
            duration=self.duration,
            duronly=self.duronly,
            billable=self.billable,
        )

    def has_tag(self, tag: str) -> bool:
        return tag in self.tags

    def add_tag(self, tag: str) -> None:
        if not self.has_tag(tag):
            self.tags.append(tag)

    def remove_tag(self, tag: str) -> None:
        if self.has_tag(tag):
            self.tags.remove(tag)

    def set_duration(self, duration: int) -> None:
        """Set the duration in seconds. The stop time is moved to match."""
        if self.is_running:
            raise TimeEntryRunningError("TimeEntry must be stopped")
        if self.start is None:
            raise PreconditionError("TimeEntry has no start time")
        self.stop = self.start + timedelta(seconds=duration)
        self.duration = duration

    def set_start_time(self, start: datetime, update_end: bool) -> None:
        """
        Set the start time. For a stopped entry either the stop time is moved
        to keep the duration (update_end=True) or the duration is recomputed
        against the existing stop time.
        """
        if not self.is_running:
            if update_end:
                self.stop = start + timedelta(seconds=self.duration)
            else:
                if self.stop is None:
                    raise PreconditionError("TimeEntry has no stop time")
                self.duration = int(self.stop.timestamp()) - int(start.timestamp())
        self.start = start

    def set_stop_time(self, stop: datetime) -> None:
        if self.is_running:
            raise TimeEntryRunningError("TimeEntry must be stopped")
        if self.start is None:
            raise PreconditionError("TimeEntry has no start time")
        self.duration = int((stop - self.start).total_seconds())
        self.stop = stop

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "tags": list(self.tags),
            "duronly": self.duronly,
            "billable": self.billable,
        }
        if self.wid:
            data["workspace_id"] = self.wid
        if self.id:
            data["id"] = self.id
        if self.pid is not None:
            data["project_id"] = self.pid
        if self.tid is not None:
            data["task_id"] = self.tid
        if self.description:
            data["description"] = self.description
        if self.start is not None:
            data["start"] = format_timestamp(self.start)
        if self.stop is not None:
            data["stop"] = format_timestamp(self.stop)
        if self.duration:
            data["duration"] = self.duration
        return data


@dataclass
class Account:
    api_token: str
    id: int
    timezone: str = ""
    beginning_of_week: int = 0
    workspaces: list[Workspace] = field(default_factory=list)
    clients: list[Client] = field(default_factory=list)
    projects: list[Project] = field(default_factory=list)
    tasks: list[Task] = field(default_factory=list)
    tags: list[Tag] = field(default_factory=list)
    time_entries: list[TimeEntry] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "api_token": self.api_token,
            "timezone": self.timezone,
            "id": self.id,
            "workspaces": [ws._asdict() for ws in self.workspaces],
            "clients": [client._asdict() for client in self.clients],
            "projects": [project.to_dict() for project in self.projects],
            "tasks": [task._asdict() for task in self.tasks],
            "tags": [tag.to_dict() for tag in self.tags],
            "time_entries": [entry.to_dict() for entry in self.time_entries],
            "beginning_of_week": self.beginning_of_week,
        }


# Reporting API shapes. These are only ever decoded, never sent.


class SummaryTitle(NamedTuple):
    project: str = ""
    client: str = ""
    color: str = ""
    hex_color: str = ""


class SummaryItem(NamedTuple):
    title: dict[str, str]
    time: int


class SummaryProject(NamedTuple):
    id: int | None
    time: int
    title: SummaryTitle
    items: list[SummaryItem]


class SummaryReport(NamedTuple):
    total_grand: int
    data: list[SummaryProject]


class DetailedTimeEntry(NamedTuple):
    id: int
    pid: int | None
    tid: int | None
    uid: int
    description: str
    start: datetime | None
    end: datetime | None
    updated: datetime | None
    duration: int
    tags: list[str]
    billable: bool = False
    user: str = ""
    project: str = ""
    project_color: str = ""
    project_hex_color: str = ""
    client: str = ""


class DetailedReport(NamedTuple):
    total_grand: int
    total_count: int
    per_page: int
    data: list[DetailedTimeEntry]
