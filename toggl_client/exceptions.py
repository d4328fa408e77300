from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from toggl_client.models import TimeEntry


class TogglAPIException(Exception):
    pass


class TransportException(TogglAPIException):
    """The request never produced an HTTP response (DNS, refused, timeout)."""


class HTTPStatusException(TogglAPIException):
    def __init__(self, status_code: int, status: str, body: bytes) -> None:
        super().__init__(status)
        self.status_code = status_code
        self.status = status
        self.body = body


class APIResponseParseException(TogglAPIException):
    def __init__(self, msg: str, fragment: str = "") -> None:
        super().__init__(msg)
        self.fragment = fragment


class TimestampParseException(APIResponseParseException):
    pass


class PartialFailureException(TogglAPIException):
    """
    A compound operation created its new record but could not clean up
    the old one. The new record is still available as `entry`.
    """

    def __init__(self, msg: str, entry: TimeEntry, cause: Exception) -> None:
        super().__init__(f"{msg}: {cause}")
        self.entry = entry
        self.cause = cause


class PreconditionError(TogglAPIException):
    pass


class TimeEntryRunningError(PreconditionError):
    pass


class ConfigError(TogglAPIException):
    pass


class APIKeyMissingError(ConfigError):
    pass
