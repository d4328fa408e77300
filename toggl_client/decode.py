"""
Converts raw API payloads into typed records.

Every decoder works in two steps: the response body is parsed into a
permissive JSON value, then each `decode_*` function checks the shape it
needs and builds the strict record, raising APIResponseParseException on
any mismatch.
"""
from __future__ import annotations

import json
from collections.abc import Callable
from json.decoder import JSONDecodeError
from typing import Any
from typing import TypeVar

from toggl_client.exceptions import APIResponseParseException
from toggl_client.models import Account
from toggl_client.models import Client
from toggl_client.models import DetailedReport
from toggl_client.models import DetailedTimeEntry
from toggl_client.models import Project
from toggl_client.models import SummaryItem
from toggl_client.models import SummaryProject
from toggl_client.models import SummaryReport
from toggl_client.models import SummaryTitle
from toggl_client.models import Tag
from toggl_client.models import Task
from toggl_client.models import TimeEntry
from toggl_client.models import Workspace
from toggl_client.timestamps import parse_optional_timestamp

T = TypeVar("T")

_MAX_FRAGMENT = 200


def _fragment(value: Any) -> str:
    text = value if isinstance(value, str) else json.dumps(value, default=str)
    if len(text) > _MAX_FRAGMENT:
        return text[:_MAX_FRAGMENT] + "..."
    return text


def _object(value: Any, kind: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        msg = f"Expected a JSON object for {kind}: '{_fragment(value)}'"
        raise APIResponseParseException(msg, _fragment(value))
    return value


def _field(
    obj: dict[str, Any],
    key: str,
    types: type,
    default: Any = None,
    required: bool = False,
) -> Any:
    val = obj.get(key)
    if val is None:
        if required:
            msg = f"Missing required field '{key}': '{_fragment(obj)}'"
            raise APIResponseParseException(msg, _fragment(obj))
        return default
    # bool is an int subclass, never accept it where a number is expected
    if isinstance(val, bool) and types is not bool:
        valid = False
    else:
        valid = isinstance(val, types)
    if not valid:
        msg = f"Invalid value for field '{key}': '{_fragment(val)}'"
        raise APIResponseParseException(msg, _fragment(obj))
    return val


def _strings(obj: dict[str, Any], key: str) -> list[str]:
    values = _field(obj, key, list, default=[])
    if not all(isinstance(v, str) for v in values):
        msg = f"Invalid value for field '{key}': '{_fragment(values)}'"
        raise APIResponseParseException(msg, _fragment(obj))
    return list(values)


def decode_json(data: bytes | str) -> Any:
    try:
        if isinstance(data, bytes):
            data = data.decode()
        return json.loads(data)
    except (UnicodeDecodeError, JSONDecodeError):
        if isinstance(data, bytes):
            data = data.decode(errors="replace")
        msg = f"Unable to parse response as JSON: '{_fragment(data)}'"
        raise APIResponseParseException(msg, _fragment(data))


def decode_list(decoder: Callable[[Any], T], value: Any) -> list[T]:
    if value is None:
        return []
    if not isinstance(value, list):
        msg = f"Expected a JSON array: '{_fragment(value)}'"
        raise APIResponseParseException(msg, _fragment(value))
    return [decoder(item) for item in value]


def decode_workspace(value: Any) -> Workspace:
    obj = _object(value, "workspace")
    return Workspace(
        id=_field(obj, "id", int, required=True),
        name=_field(obj, "name", str, default=""),
        rounding_minutes=_field(obj, "rounding_minutes", int, default=0),
        rounding=_field(obj, "rounding", int, default=0),
        premium=_field(obj, "premium", bool, default=False),
    )


def decode_client(value: Any) -> Client:
    obj = _object(value, "client")
    return Client(
        wid=_field(obj, "wid", int, default=0),
        id=_field(obj, "id", int, required=True),
        name=_field(obj, "name", str, default=""),
        archived=_field(obj, "archived", bool, default=False),
        notes=_field(obj, "notes", str, default=""),
    )


def decode_project(value: Any) -> Project:
    obj = _object(value, "project")
    return Project(
        wid=_field(obj, "workspace_id", int, default=0),
        id=_field(obj, "id", int, required=True),
        name=_field(obj, "name", str, default=""),
        active=_field(obj, "active", bool, default=False),
        cid=_field(obj, "client_id", int),
        billable=_field(obj, "billable", bool),
        server_deleted_at=parse_optional_timestamp(obj.get("server_deleted_at")),
    )


def decode_task(value: Any) -> Task:
    obj = _object(value, "task")
    return Task(
        wid=_field(obj, "wid", int, default=0),
        pid=_field(obj, "pid", int, default=0),
        id=_field(obj, "id", int, required=True),
        name=_field(obj, "name", str, default=""),
    )


def decode_tag(value: Any) -> Tag:
    obj = _object(value, "tag")
    return Tag(
        wid=_field(obj, "workspace_id", int, default=0),
        id=_field(obj, "id", int, required=True),
        name=_field(obj, "name", str, default=""),
    )


def decode_time_entry(value: Any) -> TimeEntry:
    obj = _object(value, "time entry")
    entry = TimeEntry(
        wid=_field(obj, "workspace_id", int, default=0),
        id=_field(obj, "id", int, default=0),
        pid=_field(obj, "project_id", int),
        tid=_field(obj, "task_id", int),
        description=_field(obj, "description", str, default=""),
        tags=_strings(obj, "tags"),
        duration=_field(obj, "duration", int, default=0),
        duronly=_field(obj, "duronly", bool, default=False),
        billable=_field(obj, "billable", bool, default=False),
    )
    # Timestamps are read as raw strings and converted last
    entry.start = parse_optional_timestamp(obj.get("start"))
    entry.stop = parse_optional_timestamp(obj.get("stop"))
    return entry


def decode_account(value: Any) -> Account:
    obj = _object(value, "account")
    return Account(
        api_token=_field(obj, "api_token", str, default=""),
        id=_field(obj, "id", int, required=True),
        timezone=_field(obj, "timezone", str, default=""),
        beginning_of_week=_field(obj, "beginning_of_week", int, default=0),
        workspaces=decode_list(decode_workspace, obj.get("workspaces")),
        clients=decode_list(decode_client, obj.get("clients")),
        projects=decode_list(decode_project, obj.get("projects")),
        tasks=decode_list(decode_task, obj.get("tasks")),
        tags=decode_list(decode_tag, obj.get("tags")),
        time_entries=decode_list(decode_time_entry, obj.get("time_entries")),
    )


def _decode_summary_item(value: Any) -> SummaryItem:
    obj = _object(value, "summary item")
    title = _field(obj, "title", dict, default={})
    return SummaryItem(
        title={str(k): str(v) for k, v in title.items() if v is not None},
        time=_field(obj, "time", int, default=0),
    )


def _decode_summary_project(value: Any) -> SummaryProject:
    obj = _object(value, "summary row")
    title = _field(obj, "title", dict, default={})
    return SummaryProject(
        id=_field(obj, "id", int),
        time=_field(obj, "time", int, default=0),
        title=SummaryTitle(
            project=_field(title, "project", str, default=""),
            client=_field(title, "client", str, default=""),
            color=_field(title, "color", str, default=""),
            hex_color=_field(title, "hex_color", str, default=""),
        ),
        items=decode_list(_decode_summary_item, obj.get("items")),
    )


def decode_summary_report(value: Any) -> SummaryReport:
    obj = _object(value, "summary report")
    return SummaryReport(
        total_grand=_field(obj, "total_grand", int, default=0),
        data=decode_list(_decode_summary_project, obj.get("data")),
    )


def decode_detailed_time_entry(value: Any) -> DetailedTimeEntry:
    obj = _object(value, "detailed time entry")
    return DetailedTimeEntry(
        id=_field(obj, "id", int, required=True),
        pid=_field(obj, "pid", int),
        tid=_field(obj, "tid", int),
        uid=_field(obj, "uid", int, default=0),
        description=_field(obj, "description", str, default=""),
        start=parse_optional_timestamp(obj.get("start")),
        end=parse_optional_timestamp(obj.get("end")),
        updated=parse_optional_timestamp(obj.get("updated")),
        duration=_field(obj, "dur", int, default=0),
        tags=_strings(obj, "tags"),
        billable=_field(obj, "billable", bool, default=False),
        user=_field(obj, "user", str, default=""),
        project=_field(obj, "project", str, default=""),
        project_color=_field(obj, "project_color", str, default=""),
        project_hex_color=_field(obj, "project_hex_color", str, default=""),
        client=_field(obj, "client", str, default=""),
    )


def decode_detailed_report(value: Any) -> DetailedReport:
    obj = _object(value, "detailed report")
    return DetailedReport(
        total_grand=_field(obj, "total_grand", int, default=0),
        total_count=_field(obj, "total_count", int, default=0),
        per_page=_field(obj, "per_page", int, default=0),
        data=decode_list(decode_detailed_time_entry, obj.get("data")),
    )
