import os
from typing import Callable

import httpx
import pytest
from fastapi.testclient import TestClient

# Config is read from the environment, so set the required variables up front.
os.environ["BACKEND"] = "http://backend:9000/2015-03-31/functions/function/invocations"

from services.common.core.http_client import HttpClientFactory  # noqa: E402
from services.proxy.config import ProxyConfig  # noqa: E402
from services.proxy.main import create_app  # noqa: E402

BACKEND_URL = "http://backend:9000/2015-03-31/functions/function/invocations"


@pytest.fixture
def proxy_config() -> ProxyConfig:
    return ProxyConfig(BACKEND=BACKEND_URL, DISCONNECT_POLL_INTERVAL=0.01, _env_file=None)


@pytest.fixture
def use_backend(monkeypatch) -> Callable:
    """
    Serve the backend from an httpx.MockTransport handler for apps created afterwards.
    """

    def _use(handler) -> None:
        def fake_create_async_client(self, max_connections: int = 100, **kwargs):
            kwargs.pop("limits", None)
            return httpx.AsyncClient(transport=httpx.MockTransport(handler), **kwargs)

        monkeypatch.setattr(HttpClientFactory, "create_async_client", fake_create_async_client)

    return _use


@pytest.fixture
def make_client(use_backend, proxy_config) -> Callable[..., TestClient]:
    """
    Build a TestClient whose backend is served by an httpx.MockTransport handler.
    """

    def _make(handler, **client_kwargs) -> TestClient:
        use_backend(handler)
        return TestClient(create_app(proxy_config), **client_kwargs)

    return _make
