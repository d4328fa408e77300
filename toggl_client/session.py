from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime
from datetime import timezone
from types import TracebackType
from typing import Any
from typing import TypeVar

from toggl_client.config import Config
from toggl_client.decode import decode_account
from toggl_client.decode import decode_client
from toggl_client.decode import decode_detailed_report
from toggl_client.decode import decode_json
from toggl_client.decode import decode_list
from toggl_client.decode import decode_project
from toggl_client.decode import decode_summary_report
from toggl_client.decode import decode_tag
from toggl_client.decode import decode_time_entry
from toggl_client.exceptions import PartialFailureException
from toggl_client.exceptions import TogglAPIException
from toggl_client.models import Account
from toggl_client.models import Client
from toggl_client.models import DetailedReport
from toggl_client.models import Project
from toggl_client.models import SummaryReport
from toggl_client.models import Tag
from toggl_client.models import TimeEntry
from toggl_client.timestamps import format_timestamp
from toggl_client.transport import Method
from toggl_client.transport import Transport
from toggl_client.urls import ResourceType
from toggl_client.urls import resource_url
from toggl_client.urls import resource_url_with_id
from toggl_client.urls import user_resource_url

logger = logging.getLogger("toggl-client")

T = TypeVar("T")


class Session:
    """
    An authenticated connection to the Toggl REST API.

    Build one with `Session.from_token` or `Session.from_login`. The
    credentials never change after construction.
    """

    def __init__(
        self,
        auth: tuple[str, str],
        config: Config | None = None,
        transport: Transport | None = None,
    ) -> None:
        self._auth = auth
        self.config = config or Config()
        self.transport = transport or Transport(self.config.timeout)

    @classmethod
    def from_token(
        cls,
        api_token: str,
        config: Config | None = None,
        transport: Transport | None = None,
    ) -> Session:
        return cls((api_token, "api_token"), config, transport)

    @classmethod
    def from_login(
        cls,
        username: str,
        password: str,
        config: Config | None = None,
        transport: Transport | None = None,
    ) -> Session:
        """Exchange a username and password for the account's API token."""
        login = cls((username, password), config, transport)
        account = decode_account(login._get_json(login.config.api_url, "/me"))
        return cls.from_token(account.api_token, login.config, login.transport)

    @property
    def api_token(self) -> str:
        return self._auth[0]

    def __enter__(self) -> Session:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        exc_traceback: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        self.transport.close()

    # account & reports

    def get_account(self) -> Account:
        """The user's account, with workspaces, projects and timers embedded."""
        data = self._get_json(
            self.config.api_url, "/me", {"with_related_data": "true"}
        )
        return self._decode(decode_account, data)

    def get_summary_report(
        self, workspace: int, since: str, until: str
    ) -> SummaryReport:
        params = {
            "user_agent": self.config.user_agent,
            "grouping": "projects",
            "since": since,
            "until": until,
            "rounding": "on",
            "workspace_id": str(workspace),
        }
        data = self._get_json(self.config.reports_url, "/summary", params)
        return self._decode(decode_summary_report, data)

    def get_detailed_report(
        self, workspace: int, since: str, until: str, page: int = 1
    ) -> DetailedReport:
        params = {
            "user_agent": self.config.user_agent,
            "since": since,
            "until": until,
            "page": str(page),
            "rounding": "on",
            "workspace_id": str(workspace),
        }
        data = self._get_json(self.config.reports_url, "/details", params)
        return self._decode(decode_detailed_report, data)

    # time entries

    def _new_start_entry_payload(self, description: str, wid: int) -> dict[str, Any]:
        return {
            "billable": False,
            "description": description,
            "duration": -1,
            "start": format_timestamp(datetime.now(timezone.utc)),
            "tags": [],
            "workspace_id": wid,
            "created_with": self.config.app_name,
        }

    @staticmethod
    def _with_metadata_from(
        payload: dict[str, Any], entry: TimeEntry
    ) -> dict[str, Any]:
        if entry.pid is not None:
            payload["project_id"] = entry.pid
        if entry.tid is not None:
            payload["task_id"] = entry.tid
        payload["tags"] = list(entry.tags)
        payload["billable"] = entry.billable
        return payload

    def _start_time_entry(self, payload: dict[str, Any]) -> TimeEntry:
        path = resource_url(ResourceType.TIME_ENTRIES, payload["workspace_id"])
        return self._time_entry(self._send("POST", path, payload))

    def start_time_entry(
        self,
        description: str,
        wid: int,
        project_id: int | None = None,
        task_id: int | None = None,
        tags: list[str] | None = None,
        billable: bool = False,
    ) -> TimeEntry:
        payload = self._new_start_entry_payload(description, wid)
        if project_id is not None:
            payload["project_id"] = project_id
        if task_id is not None:
            payload["task_id"] = task_id
        if tags:
            payload["tags"] = list(tags)
        payload["billable"] = billable
        return self._start_time_entry(payload)

    def start_time_entry_for_project(
        self,
        description: str,
        wid: int,
        project_id: int,
        billable: bool | None = None,
    ) -> TimeEntry:
        """
        Start a timer on a project. `billable` only has an effect on paid
        plans; the API ignores it otherwise.
        """
        return self.start_time_entry(
            description, wid, project_id=project_id, billable=bool(billable)
        )

    def get_current_time_entry(self) -> TimeEntry | None:
        """The running entry, or None when no timer is running."""
        path = user_resource_url(ResourceType.TIME_ENTRIES) + "/current"
        data = self._get_json(self.config.api_url, path)
        if data is None:
            return None
        return self._decode(decode_time_entry, data)

    def get_time_entries(
        self, start_date: datetime, end_date: datetime
    ) -> list[TimeEntry]:
        params = {
            "start_date": format_timestamp(start_date),
            "end_date": format_timestamp(end_date),
        }
        path = user_resource_url(ResourceType.TIME_ENTRIES)
        data = self._get_json(self.config.api_url, path, params)
        return self._decode_list(decode_time_entry, data)

    def update_time_entry(self, entry: TimeEntry) -> TimeEntry:
        self._debug("Updating timer %r", entry)
        path = resource_url_with_id(ResourceType.TIME_ENTRIES, entry.wid, entry.id)
        return self._time_entry(self._send("PUT", path, entry.to_dict()))

    def continue_time_entry(self, entry: TimeEntry, duronly: bool) -> TimeEntry:
        """
        Continue a time entry. A duration-only entry started today is
        unstopped; anything else gets a new running entry with the same
        description, project, task, tags and billable flag.
        """
        self._debug("Continuing timer %r", entry)
        if duronly and _started_today(entry):
            return self.unstop_time_entry(entry)
        payload = self._new_start_entry_payload(entry.description, entry.wid)
        return self._start_time_entry(self._with_metadata_from(payload, entry))

    def unstop_time_entry(self, entry: TimeEntry) -> TimeEntry:
        """
        Replace a stopped entry with a running copy that keeps its original
        start time, then delete the old entry.

        If the delete fails the new entry is still created and is returned
        on the raised PartialFailureException.
        """
        self._debug("Unstopping timer %r", entry)
        payload = self._new_start_entry_payload(entry.description, entry.wid)
        payload = self._with_metadata_from(payload, entry)
        if entry.start is not None:
            payload["start"] = format_timestamp(entry.start)

        new_entry = self._start_time_entry(payload)
        try:
            self.delete_time_entry(entry)
        except TogglAPIException as e:
            raise PartialFailureException("old entry not deleted", new_entry, e) from e
        return new_entry

    def stop_time_entry(self, entry: TimeEntry) -> TimeEntry:
        self._debug("Stopping timer %r", entry)
        path = resource_url_with_id(ResourceType.TIME_ENTRIES, entry.wid, entry.id)
        return self._time_entry(self._send("PATCH", path + "/stop"))

    def add_remove_tag(
        self, time_entry_id: int, tag: str, add: bool, wid: int
    ) -> TimeEntry:
        self._debug("Setting tag %s on time entry %d", tag, time_entry_id)
        body = {"tags": [tag], "tag_action": "add" if add else "remove"}
        path = resource_url_with_id(ResourceType.TIME_ENTRIES, wid, time_entry_id)
        return self._time_entry(self._send("PUT", path, body))

    def delete_time_entry(self, entry: TimeEntry) -> bytes:
        self._debug("Deleting timer %r", entry)
        path = resource_url_with_id(ResourceType.TIME_ENTRIES, entry.wid, entry.id)
        return self._send("DELETE", path)

    # projects

    def get_projects(self, wid: int) -> list[Project]:
        self._debug("Getting projects for workspace %d", wid)
        data = self._get_json(
            self.config.api_url, resource_url(ResourceType.PROJECTS, wid)
        )
        return self._decode_list(decode_project, data)

    def get_project(self, id: int, wid: int) -> Project:
        self._debug("Getting project with id %d", id)
        data = self._get_json(
            self.config.api_url, resource_url_with_id(ResourceType.PROJECTS, wid, id)
        )
        return self._decode(decode_project, data)

    def create_project(self, name: str, wid: int) -> Project:
        self._debug("Creating project %s", name)
        body = {"name": name, "wid": wid, "active": True}
        res = self._send("POST", resource_url(ResourceType.PROJECTS, wid), body)
        return self._decode(decode_project, decode_json(res))

    def update_project(self, project: Project) -> Project:
        self._debug("Updating project %r", project)
        path = resource_url_with_id(ResourceType.PROJECTS, project.wid, project.id)
        res = self._send("PUT", path, project.to_dict())
        return self._decode(decode_project, decode_json(res))

    def delete_project(self, project: Project) -> bytes:
        self._debug("Deleting project %r", project)
        path = resource_url_with_id(ResourceType.PROJECTS, project.wid, project.id)
        return self._send("DELETE", path)

    # tags

    def get_tags(self, wid: int) -> list[Tag]:
        data = self._get_json(
            self.config.api_url, resource_url(ResourceType.TAGS, wid)
        )
        return self._decode_list(decode_tag, data)

    def create_tag(self, name: str, wid: int) -> Tag:
        self._debug("Creating tag %s", name)
        body = {"name": name, "wid": wid}
        res = self._send("POST", resource_url(ResourceType.TAGS, wid), body)
        return self._decode(decode_tag, decode_json(res))

    def update_tag(self, tag: Tag) -> Tag:
        self._debug("Updating tag %r", tag)
        path = resource_url_with_id(ResourceType.TAGS, tag.wid, tag.id)
        res = self._send("PUT", path, tag.to_dict())
        return self._decode(decode_tag, decode_json(res))

    def delete_tag(self, tag: Tag) -> bytes:
        self._debug("Deleting tag %r", tag)
        path = resource_url_with_id(ResourceType.TAGS, tag.wid, tag.id)
        return self._send("DELETE", path)

    # clients

    def get_clients(self, wid: int) -> list[Client]:
        self._debug("Retrieving clients")
        data = self._get_json(
            self.config.api_url, resource_url(ResourceType.CLIENTS, wid)
        )
        return self._decode_list(decode_client, data)

    def get_client(self, id: int, wid: int) -> Client:
        data = self._get_json(
            self.config.api_url, resource_url_with_id(ResourceType.CLIENTS, wid, id)
        )
        return self._decode(decode_client, data)

    def create_client(self, name: str, wid: int) -> Client:
        self._debug("Creating client %s", name)
        body = {"name": name, "wid": wid}
        res = self._send("POST", resource_url(ResourceType.CLIENTS, wid), body)
        return self._decode(decode_client, decode_json(res))

    def update_client(self, client: Client) -> Client:
        self._debug("Updating client %r", client)
        path = resource_url_with_id(ResourceType.CLIENTS, client.wid, client.id)
        res = self._send("PUT", path, client._asdict())
        return self._decode(decode_client, decode_json(res))

    def delete_client(self, client: Client) -> bytes:
        self._debug("Deleting client %r", client)
        path = resource_url_with_id(ResourceType.CLIENTS, client.wid, client.id)
        return self._send("DELETE", path)

    # support

    def _debug(self, msg: str, *args: Any) -> None:
        if self.config.verbose:
            logger.debug(msg, *args)

    def _request(
        self,
        method: Method,
        url: str,
        params: dict[str, str] | None = None,
        body: Any = None,
    ) -> bytes:
        self._debug("%s %s", method, url)
        if body is not None:
            self._debug("data: %s", body)
        res = self.transport.request(method, url, self._auth, params, body)
        self._debug("Got data: %s", res)
        return res

    def _get_json(
        self, base_url: str, path: str, params: dict[str, str] | None = None
    ) -> Any:
        """Performs a GET request and returns the parsed JSON response."""
        return decode_json(self._request("GET", base_url + path, params))

    def _send(self, method: Method, path: str, body: Any = None) -> bytes:
        return self._request(method, self.config.api_url + path, body=body)

    def _decode(self, decoder: Callable[[Any], T], data: Any) -> T:
        value = decoder(data)
        self._debug("Decoded %r", value)
        return value

    def _decode_list(self, decoder: Callable[[Any], T], data: Any) -> list[T]:
        values = decode_list(decoder, data)
        self._debug("Decoded %d records", len(values))
        return values

    def _time_entry(self, res: bytes) -> TimeEntry:
        return self._decode(decode_time_entry, decode_json(res))


def _started_today(entry: TimeEntry) -> bool:
    if entry.start is None:
        return False
    today = datetime.now().astimezone().date()
    return entry.start.astimezone().date() == today
