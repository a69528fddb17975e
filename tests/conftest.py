"""Shared fixtures for the nearby test suite.

Outbound HTTP never leaves the process: every test talks to a
``FakeUpstream`` wired into ``httpx.MockTransport``.
"""

import json

import httpx
import pytest

from nearby.core.config import get_settings
from nearby.services.http import run_blocking

HOSTS = {
    "overpass": ("overpass-api.de", "/api/interpreter"),
    "reverse": ("nominatim.openstreetmap.org", "/reverse"),
    "search": ("nominatim.openstreetmap.org", "/search"),
    "weather": ("archive-api.open-meteo.com", "/v1/archive"),
    "crime": ("www.ine.pt", "/ine/json_indicador/pindica.jsp"),
}
HOUSING_HOST = "api.habitacao.net"


class FakeUpstream:
    """Routes requests by (host, path) to handler callables; unknown routes get a 404."""

    def __init__(self):
        self.routes = {}
        self.requests = []

    def route(self, host, path, handler):
        self.routes[(host, path)] = handler
        return self

    def on(self, provider, handler):
        host, path = HOSTS[provider]
        return self.route(host, path, handler)

    def reply(self, provider, payload, status_code=200):
        return self.on(provider, lambda request: httpx.Response(status_code, json=payload))

    def housing(self, path, payload, status_code=200):
        return self.route(
            HOUSING_HOST, f"/graph{path}", lambda request: httpx.Response(status_code, json=payload)
        )

    def calls(self, provider):
        host, path = HOSTS[provider]
        return [r for r in self.requests if r.url.host == host and r.url.path == path]

    def housing_calls(self):
        return [r for r in self.requests if r.url.host == HOUSING_HOST]

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self.routes.get((request.url.host, request.url.path))
        if handler is None:
            return httpx.Response(404, text="no route")
        return handler(request)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


@pytest.fixture(autouse=True)
def _fresh_settings(monkeypatch, tmp_path):
    """Default settings for every test, with no district table on disk."""
    for key in ("NEARBY_APP_ENV", "NEARBY_LABEL_LANGUAGE"):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("NEARBY_DISTRICT_TABLE_PATH", str(tmp_path / "missing.json"))
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def district_table(monkeypatch, tmp_path):
    """Writes a district id table and points the settings at it."""

    def _write(rows):
        path = tmp_path / "district_osm_ids.json"
        path.write_text(json.dumps(rows), encoding="utf-8")
        monkeypatch.setenv("NEARBY_DISTRICT_TABLE_PATH", str(path))
        get_settings.cache_clear()
        return str(path)

    return _write


@pytest.fixture
def upstream():
    return FakeUpstream()


@pytest.fixture
def run(upstream):
    """Runs ``fn(client)`` against the fake upstream and returns its result."""
    def _run(fn):
        return run_blocking(fn, transport=upstream.transport)

    return _run
