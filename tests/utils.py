"""Test utilities: an in-memory fake of the Instance ID API."""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Callable

import httpx

from adapters.http_client import build_async_client, build_client
from adapters.instance_api import InstanceApiClient
from core.config import AppSettings

Reply = Callable[[httpx.Request], httpx.Response]


def json_reply(status_code: int, payload: Any, headers: dict[str, str] | None = None) -> Reply:
    def reply(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status_code, json=payload, headers=headers)

    return reply


@dataclass
class FakeIidApi:
    """Routes requests by endpoint and, for batch calls, by topic name.

    Unrouted requests answer 500 so a missing route shows up as a failure.
    """

    batch_add: dict[str, Reply] = field(default_factory=dict)
    batch_remove: dict[str, Reply] = field(default_factory=dict)
    instances: dict[str, Reply] = field(default_factory=dict)
    requests: list[httpx.Request] = field(default_factory=list)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if request.method == "POST" and path in ("/iid/v1:batchAdd", "/iid/v1:batchRemove"):
            body = json.loads(request.content)
            topic = body["to"].removeprefix("/topics/")
            routes = self.batch_add if path.endswith("batchAdd") else self.batch_remove
            if topic in routes:
                return routes[topic](request)

        if request.method == "GET" and path.startswith("/iid/"):
            token = path[len("/iid/"):]
            if token in self.instances:
                return self.instances[token](request)

        return httpx.Response(500, json={"error": f"no route for {request.method} {path}"})

    def bodies(self) -> list[dict[str, Any]]:
        return [json.loads(r.content) for r in self.requests if r.method == "POST"]


def make_settings(**overrides: Any) -> AppSettings:
    values: dict[str, Any] = {
        "base_url": "https://iid.test",
        "access_token": "test-access-token",
    }
    values.update(overrides)
    return AppSettings(_env_file=None, **values)


def make_client(api: FakeIidApi, settings: AppSettings | None = None) -> InstanceApiClient:
    settings = settings or make_settings()
    transport = httpx.MockTransport(api.handler)
    return InstanceApiClient(
        settings,
        client=build_client(settings, transport=transport),
        async_client=build_async_client(settings, transport=transport),
    )
