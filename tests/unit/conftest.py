"""Shared fixtures for unit tests."""

import os
from typing import Callable, List, Optional

import httpx
import pytest

from sagapay.api import AsyncSagaPayClient, ClientConfig, SagaPayClient
from sagapay.config import reset_config


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch, tmp_path):
    """Keep real SAGAPAY_* variables and .env files out of the tests."""
    for name in list(os.environ):
        if name.startswith("SAGAPAY_"):
            monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def config() -> ClientConfig:
    return ClientConfig(api_key="k", api_secret="s")


@pytest.fixture
def recorded() -> List[httpx.Request]:
    """Requests seen by the mock gateway."""
    return []


@pytest.fixture
def gateway(recorded) -> Callable[..., httpx.MockTransport]:
    """Build a mock gateway transport answering every request the same way."""

    def make(status_code: int = 200, body=None, content: Optional[bytes] = None) -> httpx.MockTransport:
        def handler(request: httpx.Request) -> httpx.Response:
            recorded.append(request)
            if content is not None:
                return httpx.Response(status_code, content=content)
            return httpx.Response(status_code, json=body if body is not None else {})

        return httpx.MockTransport(handler)

    return make


@pytest.fixture
def make_client(config, gateway) -> Callable[..., SagaPayClient]:
    def make(status_code: int = 200, body=None, content: Optional[bytes] = None) -> SagaPayClient:
        transport = gateway(status_code, body, content)
        return SagaPayClient(config, http_client=httpx.Client(transport=transport))

    return make


@pytest.fixture
def make_async_client(config, gateway) -> Callable[..., AsyncSagaPayClient]:
    def make(status_code: int = 200, body=None, content: Optional[bytes] = None) -> AsyncSagaPayClient:
        transport = gateway(status_code, body, content)
        return AsyncSagaPayClient(config, http_client=httpx.AsyncClient(transport=transport))

    return make

