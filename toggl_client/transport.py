from __future__ import annotations

import json
from types import TracebackType
from typing import Any
from typing import Literal

import requests

from toggl_client.exceptions import HTTPStatusException
from toggl_client.exceptions import TransportException

Method = Literal["GET", "POST", "PUT", "PATCH", "DELETE"]


class Transport:
    """
    Performs a single HTTP round trip against the Toggl API.

    There is no retry and no backoff. Connection pooling and its thread
    safety are left to `requests`.
    """

    def __init__(self, timeout: float | None = None) -> None:
        self.timeout = timeout
        self.session = requests.Session()
        self.headers = {"Content-Type": "application/json"}

    def __enter__(self) -> Transport:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_value: BaseException | None,
        exc_traceback: TracebackType | None,
    ) -> None:
        self.close()

    def close(self) -> None:
        self.session.close()

    def request(
        self,
        method: Method,
        url: str,
        auth: tuple[str, str],
        params: dict[str, str] | None = None,
        body: Any = None,
    ) -> bytes:
        """
        Returns the full response body. A status outside [200, 400) raises
        HTTPStatusException which still carries the body.
        """
        data = json.dumps(body) if body is not None else None
        try:
            res = self.session.request(
                method,
                url,
                params=params,
                data=data,
                headers=self.headers,
                auth=auth,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise TransportException(f"{method} {url} failed: {e}") from e

        content = res.content
        if res.status_code < 200 or res.status_code >= 400:
            # The response status code indicates an error
            status = f"{res.status_code} {res.reason}"
            raise HTTPStatusException(res.status_code, status, content)
        return content
