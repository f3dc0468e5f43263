"""Shared test fixtures and configuration."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import httpx
import pytest

from cloudsift.config.settings import ClientConfig

Handler = Callable[[httpx.Request], httpx.Response]


@pytest.fixture(autouse=True)
def _clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's environment from leaking into configuration."""
    monkeypatch.delenv("CLOUDSEARCH_API_VERSION", raising=False)
    for name in ("MODE", "SEARCH_DOMAIN", "AWS_REGION", "API_VERSION", "SERVICE_HOST", "TIMEOUT"):
        monkeypatch.delenv(f"CLOUDSIFT_{name}", raising=False)


@pytest.fixture
def config() -> ClientConfig:
    return ClientConfig("testdomain")


@pytest.fixture
def config_2013() -> ClientConfig:
    return ClientConfig("testdomain", api_version="2013-01-01")


@pytest.fixture
def search_body() -> dict[str, Any]:
    """Sample search response with two hits."""
    return {
        "rank": "-text_relevance",
        "match-expr": "(label 'fritters')",
        "hits": {"found": 2, "start": 0, "hit": [{"id": "13"}, {"id": "28"}]},
        "info": {"rid": "b7c167f6c2da6d93531b9a7b314ad030", "time-ms": 3, "cpu-time-ms": 0},
    }


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it served."""

    def __init__(self, handler: Handler) -> None:
        self.requests: list[httpx.Request] = []

        def _record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(_record)


@pytest.fixture
def make_transport() -> Callable[[Handler], RecordingTransport]:
    return RecordingTransport
