# tests/conftest.py
from __future__ import annotations

from typing import Callable

import httpx
import pytest

from adapters.http_client import ApiClient
from core.config import ClientConfig, Environment

BASE_URL = "https://api.example.com"

_ENV_VARS = (
    "API_BASE_URL",
    "API_TIMEOUT_SECONDS",
    "API_USER_AGENT",
    "APP_ENV",
    "API_LANGUAGE",
)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    """Sin .env del proyecto ni variables del host."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


class RecordingServer:
    """Servidor falso: registra cada request y delega la respuesta en `handler`."""

    def __init__(self, handler: Callable[[httpx.Request], object]) -> None:
        self.handler = handler
        self.requests: list[httpx.Request] = []

    @property
    def calls(self) -> int:
        return len(self.requests)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def transport(self) -> httpx.MockTransport:
        def _handle(request: httpx.Request):
            self.requests.append(request)
            return self.handler(request)

        return httpx.MockTransport(_handle)


@pytest.fixture
def config() -> ClientConfig:
    return ClientConfig(
        base_url=BASE_URL,
        timeout_seconds=2.0,
        default_headers={"Accept": "application/json"},
        environment=Environment.TEST,
    )


@pytest.fixture
def make_api(config: ClientConfig):
    """Factory: `make_api(handler)` -> (ApiClient, RecordingServer)."""

    def _make(handler, **overrides) -> tuple[ApiClient, RecordingServer]:
        server = RecordingServer(handler)
        cfg = config.model_copy(update=overrides) if overrides else config
        return ApiClient(cfg, transport=server.transport()), server

    return _make


def json_response(status: int, payload: object) -> httpx.Response:
    return httpx.Response(status, json=payload)
