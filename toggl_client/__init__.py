"""
A client for the Toggl Track REST API.

See https://engineering.toggl.com/docs/ for the upstream API reference.
"""
import logging

from toggl_client.config import Config
from toggl_client.exceptions import APIResponseParseException
from toggl_client.exceptions import HTTPStatusException
from toggl_client.exceptions import PartialFailureException
from toggl_client.exceptions import PreconditionError
from toggl_client.exceptions import TimeEntryRunningError
from toggl_client.exceptions import TimestampParseException
from toggl_client.exceptions import TogglAPIException
from toggl_client.exceptions import TransportException
from toggl_client.models import Account
from toggl_client.models import Client
from toggl_client.models import DetailedReport
from toggl_client.models import Project
from toggl_client.models import SummaryReport
from toggl_client.models import Tag
from toggl_client.models import Task
from toggl_client.models import TimeEntry
from toggl_client.models import Workspace
from toggl_client.session import Session

logging.getLogger("toggl-client").addHandler(logging.NullHandler())

__all__ = [
    "Account",
    "APIResponseParseException",
    "Client",
    "Config",
    "DetailedReport",
    "HTTPStatusException",
    "PartialFailureException",
    "PreconditionError",
    "Project",
    "Session",
    "SummaryReport",
    "Tag",
    "Task",
    "TimeEntry",
    "TimeEntryRunningError",
    "TimestampParseException",
    "TogglAPIException",
    "TransportException",
    "Workspace",
]
