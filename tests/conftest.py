"""Pytest configuration and fixtures for Bankline tests."""

import json
from typing import Any, Callable, Union
from unittest.mock import AsyncMock, Mock

import httpx
import pytest

from bankline.config import Settings
from bankline.executor import RequestExecutor
from bankline.monitoring import reset_metrics
from bankline.observers import ExecutionObserver
from bankline.resilience.fallback import FallbackSource


API_URL = "http://bank.test"
FALLBACK_URL = "http://mirror.test"


@pytest.fixture(autouse=True)
def use_test_environment(monkeypatch):
    """Ensure all tests use test environment variables."""
    monkeypatch.setenv("API_URL", API_URL)
    monkeypatch.delenv("FALLBACK_API_URL", raising=False)


@pytest.fixture(autouse=True)
def clean_metrics():
    """Start every test with empty metrics."""
    reset_metrics()
    yield
    reset_metrics()


# A scripted step is either a response or an exception type raised for the request
Step = Union[httpx.Response, type, Callable[[httpx.Request], Any]]


class ScriptedBackend:
    """Mock backend that replays a script of responses and failures.

    Records every request together with the read timeout it was sent with.
    """

    def __init__(self):
        self.steps: list[Step] = []
        self.requests: list[httpx.Request] = []

    def then(self, *steps: Step) -> "ScriptedBackend":
        self.steps.extend(steps)
        return self

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self.steps:
            raise AssertionError(f"Unexpected request: {request.method} {request.url}")
        step = self.steps.pop(0)
        if isinstance(step, httpx.Response):
            return step
        if isinstance(step, type) and issubclass(step, Exception):
            raise step(f"scripted {step.__name__}", request=request)
        return step(request)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    @property
    def call_count(self) -> int:
        return len(self.requests)

    @property
    def timeouts(self) -> list[float]:
        return [r.extensions["timeout"]["read"] for r in self.requests]

    def body(self, index: int = 0) -> Any:
        return json.loads(self.requests[index].content.decode("utf-8"))


@pytest.fixture
def test_settings():
    """Settings pointing at the mock backend."""
    return Settings(api_url=API_URL, fallback_api_url=FALLBACK_URL)


@pytest.fixture
def backend():
    """Scripted mock backend."""
    return ScriptedBackend()


@pytest.fixture
def observer():
    """Observer mock recording lifecycle hooks."""
    return Mock(spec=ExecutionObserver)


@pytest.fixture
def fallback_source():
    """Fallback source with canned balance and history."""
    source = Mock(spec=FallbackSource)
    source.get_balance = AsyncMock(return_value={"customerId": 42, "balance": 990.0, "source": "fallback"})
    source.get_transactions = AsyncMock(return_value=[{"id": 7, "amount": 10.0, "source": "fallback"}])
    return source


@pytest.fixture
async def executor(test_settings, backend, observer):
    """Executor wired to the scripted backend."""
    executor = RequestExecutor(
        settings=test_settings,
        observer=observer,
        transport=backend.transport,
    )
    yield executor
    await executor.aclose()
