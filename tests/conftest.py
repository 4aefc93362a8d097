"""Pytest configuration and fixtures."""
import asyncio
import os

import pytest

from tests.utils import FakeIidApi, make_client, make_settings


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Keep the developer's FCM_IID_* variables and user .env out of the tests."""
    for key in list(os.environ):
        if key.startswith("FCM_IID_"):
            monkeypatch.delenv(key)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def settings():
    return make_settings()


@pytest.fixture
def api():
    return FakeIidApi()


@pytest.fixture
def client(api, settings):
    instance_client = make_client(api, settings)
    yield instance_client
    instance_client._client.close()
    loop = asyncio.new_event_loop()
    try:
        loop.run_until_complete(instance_client._async_client.aclose())
    finally:
        loop.close()
