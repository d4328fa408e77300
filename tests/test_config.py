"""Tests for configuration loading."""

import json
from pathlib import Path

import pytest

from toggl_client.config import REPORTS_API
from toggl_client.config import TOGGL_API
from toggl_client.config import Config
from toggl_client.config import get_api_token
from toggl_client.exceptions import APIKeyMissingError
from toggl_client.exceptions import ConfigError


class TestConfig:
    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("TOGGL_API_TOKEN", raising=False)
        config = Config()

        assert config.api_token is None
        assert config.app_name == "toggl-client"
        assert config.api_url == TOGGL_API
        assert config.reports_url == REPORTS_API
        assert config.timeout is None
        assert config.verbose is False

    def test_token_from_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TOGGL_API_TOKEN", "from-env")
        assert Config().api_token == "from-env"
        assert Config(api_token="explicit").api_token == "explicit"

    def test_missing_token(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("TOGGL_API_TOKEN", raising=False)
        with pytest.raises(APIKeyMissingError):
            get_api_token(Config())

    def test_trailing_slash_is_stripped(self) -> None:
        config = Config(api_url="http://localhost:8080/api/v9/")
        assert config.api_url == "http://localhost:8080/api/v9"


class TestConfigFile:
    def test_from_file(self, tmp_path: Path) -> None:
        config_file = tmp_path / "config.json"
        config_file.write_text(
            json.dumps(
                {
                    "api_token": "abc",
                    "app_name": "my-app",
                    "timeout": "12.5",
                    "verbose": True,
                }
            )
        )

        config = Config.from_file(str(config_file))

        assert config.api_token == "abc"
        assert config.app_name == "my-app"
        assert config.user_agent == "toggl-client"
        assert config.timeout == 12.5
        assert config.verbose is True

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError):
            Config.from_file(str(tmp_path / "missing.json"))

    def test_malformed_file(self, tmp_path: Path) -> None:
        config_file = tmp_path / "config.json"
        config_file.write_text("{not json")
        with pytest.raises(ConfigError):
            Config.from_file(str(config_file))

    def test_not_an_object(self, tmp_path: Path) -> None:
        config_file = tmp_path / "config.json"
        config_file.write_text("[]")
        with pytest.raises(ConfigError):
            Config.from_file(str(config_file))

    def test_invalid_timeout(self, tmp_path: Path) -> None:
        config_file = tmp_path / "config.json"
        config_file.write_text(json.dumps({"timeout": "soon"}))
        with pytest.raises(ConfigError):
            Config.from_file(str(config_file))
