from __future__ import annotations

import json
import os
from typing import Any

from toggl_client.exceptions import APIKeyMissingError
from toggl_client.exceptions import ConfigError

TOGGL_API = "https://api.track.toggl.com/api/v9"
REPORTS_API = "https://api.track.toggl.com/reports/api/v2"
DEFAULT_APP_NAME = "toggl-client"
API_TOKEN_ENV_VAR = "TOGGL_API_TOKEN"


class Config:
    """
    Settings shared by every request a Session makes.

    `app_name` is sent as the `created_with` marker of new time entries and
    `verbose` turns on the diagnostic log channel for sessions using this
    config.
    """

    def __init__(
        self,
        api_token: str | None = None,
        app_name: str = DEFAULT_APP_NAME,
        user_agent: str = DEFAULT_APP_NAME,
        api_url: str = TOGGL_API,
        reports_url: str = REPORTS_API,
        timeout: float | None = None,
        verbose: bool = False,
    ) -> None:
        self.api_token = api_token or os.getenv(API_TOKEN_ENV_VAR)
        self.app_name = app_name
        self.user_agent = user_agent
        self.api_url = api_url.rstrip("/")
        self.reports_url = reports_url.rstrip("/")
        self.timeout = timeout
        self.verbose = verbose

    @classmethod
    def from_file(cls, config_file: str) -> Config:
        try:
            with open(config_file) as f:
                config: dict[str, Any] = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigError(f"Error in {config_file}: {e}")
        if not isinstance(config, dict):
            raise ConfigError(f"Invalid config: {config}")

        timeout = _get_setting(config, "timeout", required=False)
        if timeout is not None:
            try:
                timeout = float(timeout)
            except (TypeError, ValueError) as e:
                raise ConfigError(f"Invalid timeout: {e}")

        return cls(
            api_token=_get_setting(config, "api_token", required=False),
            app_name=_get_setting(config, "app_name", DEFAULT_APP_NAME),
            user_agent=_get_setting(config, "user_agent", DEFAULT_APP_NAME),
            api_url=_get_setting(config, "api_url", TOGGL_API),
            reports_url=_get_setting(config, "reports_url", REPORTS_API),
            timeout=timeout,
            verbose=bool(_get_setting(config, "verbose", False)),
        )


def _get_setting(
    config: dict[str, Any],
    setting: str,
    default: Any | None = None,
    required: bool = True,
) -> Any:
    val = config.get(setting, default)
    if required and val is None:
        raise ConfigError(f"Setting is required: {setting}")
    return val


def get_api_token(config: Config) -> str:
    if not config.api_token:
        raise APIKeyMissingError(
            f"'{API_TOKEN_ENV_VAR}' environment variable not set.\n"
            "Connection to Toggl's API requires an API token which can "
            "be found in your profile settings."
        )
    return config.api_token
