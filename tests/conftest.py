"""Pytest configuration and shared fixtures."""

import json
from typing import Any

import pytest

from toggl_client.config import Config
from toggl_client.session import Session
from toggl_client.transport import Transport


class FakeTransport(Transport):
    """Records every request and replays queued responses in order."""

    def __init__(self) -> None:
        super().__init__()
        self.calls: list[dict[str, Any]] = []
        self.responses: list[Any] = []

    def queue(self, response: Any) -> None:
        """Queue a JSON-serializable value, raw bytes or an exception."""
        self.responses.append(response)

    def request(  # type: ignore[override]
        self,
        method: str,
        url: str,
        auth: tuple[str, str],
        params: dict[str, str] | None = None,
        body: Any = None,
    ) -> bytes:
        self.calls.append(
            {
                "method": method,
                "url": url,
                "auth": auth,
                "params": params,
                "body": body,
            }
        )
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        if isinstance(response, bytes):
            return response
        return json.dumps(response).encode()


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def config() -> Config:
    return Config(api_token="token", app_name="test-app", user_agent="test-agent")


@pytest.fixture
def session(transport: FakeTransport, config: Config) -> Session:
    return Session.from_token("token", config, transport)


@pytest.fixture
def entry_payload() -> dict[str, Any]:
    return {
        "id": 42,
        "workspace_id": 7,
        "project_id": 3,
        "task_id": None,
        "description": "writing spec",
        "start": "2024-03-01T09:00:00Z",
        "stop": "2024-03-01T10:30:00+00:00",
        "duration": 5400,
        "tags": ["docs", "billable"],
        "duronly": False,
        "billable": True,
    }
