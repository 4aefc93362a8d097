"""Tests for settings, user .env handling and logging setup."""
import json
import logging

import pytest

from adapters.http_client import default_headers
from core.config import AppSettings, get_user_env_file, write_user_env_vars
from core.logging_config import JSONFormatter, setup_logging
from tests.utils import make_settings


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("FCM_IID_BASE_URL", "https://iid.example")
    monkeypatch.setenv("FCM_IID_HTTP_TIMEOUT_SECONDS", "3.5")

    settings = AppSettings(_env_file=None)

    assert settings.base_url == "https://iid.example"
    assert settings.http_timeout_seconds == 3.5
    assert settings.access_token is None


def test_write_user_env_vars_merges(tmp_path):
    write_user_env_vars({"FCM_IID_BASE_URL": "https://a"})
    path = write_user_env_vars({"FCM_IID_ACCESS_TOKEN": "tok", "FCM_IID_BASE_URL": "https://b"})

    assert path == get_user_env_file()
    assert path.is_relative_to(tmp_path)
    lines = path.read_text(encoding="utf-8").splitlines()
    assert lines[0].startswith("#")
    assert lines[1:] == ["FCM_IID_ACCESS_TOKEN=tok", "FCM_IID_BASE_URL=https://b"]


def test_default_headers_without_token():
    headers = default_headers(make_settings(access_token=None))
    assert "Authorization" not in headers
    assert headers["User-Agent"] == "fcm-iid/0.1"


def test_setup_logging_console():
    setup_logging(make_settings(log_level="debug"))

    root = logging.getLogger()
    assert root.level == logging.DEBUG
    assert len(root.handlers) == 1
    assert logging.getLogger("httpx").level == logging.WARNING


def test_setup_logging_json():
    setup_logging(make_settings(log_json=True, log_level="nonsense"))

    root = logging.getLogger()
    assert root.level == logging.INFO
    assert isinstance(root.handlers[0].formatter, JSONFormatter)


def test_json_formatter_output():
    record = logging.LogRecord("adapters.instance_api", logging.WARNING, __file__, 1, "failed: %s", ("x",), None)

    data = json.loads(JSONFormatter().format(record))

    assert data["level"] == "WARNING"
    assert data["logger"] == "adapters.instance_api"
    assert data["message"] == "failed: x"
