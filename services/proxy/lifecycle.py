"""
Where: services/proxy/lifecycle.py
What: Proxy startup/shutdown orchestration for shared resources.
Why: Keep main.py focused on app assembly while preserving lifecycle behavior.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from services.common.core.http_client import HttpClientFactory

from .config import ProxyConfig
from .core.event_builder import FunctionUrlEventBuilder
from .core.response_builder import ResponseReconstructor
from .services.backend_invoker import BackendInvoker
from .services.processor import ProxyRequestProcessor

logger = logging.getLogger("proxy.main")


@asynccontextmanager
async def manage_lifespan(app: FastAPI, proxy_config: ProxyConfig) -> AsyncIterator[None]:
    """Manage application lifecycle."""
    factory = HttpClientFactory(proxy_config)
    factory.configure_global_settings()
    client = factory.create_async_client(
        max_connections=proxy_config.BACKEND_MAX_CONNECTIONS,
        timeout=proxy_config.BACKEND_TIMEOUT,
    )

    try:
        invoker = BackendInvoker(client=client, config=proxy_config)

        app.state.processor = ProxyRequestProcessor(
            invoker,
            FunctionUrlEventBuilder(proxy_config),
            ResponseReconstructor(),
            disconnect_poll_interval=proxy_config.DISCONNECT_POLL_INTERVAL,
        )

        logger.info(
            "Proxy initialized, forwarding to %s (timeout=%ss)",
            proxy_config.backend_url,
            proxy_config.BACKEND_TIMEOUT,
        )
        yield
    finally:
        logger.info("Proxy shutting down, closing http client.")
        await client.aclose()
