"""
Function URL Proxy - Lambda function URL compatible front door

Accepts any HTTP request, repackages it as a function URL invocation event,
forwards it to the configured backend and replays the backend's reply to the
caller.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request, Response

from services.common.core.logging_config import setup_logging

from .api.deps import InputContextDep, ProcessorDep
from .config import ProxyConfig, load_config
from .core.exceptions import ClientDisconnected
from .exceptions import register_exception_handlers
from .lifecycle import manage_lifespan
from .middleware import trace_logging_middleware

logger = logging.getLogger("proxy.main")

PROXY_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]

# Non-standard "client closed request" status; never reaches the caller.
CLIENT_CLOSED_REQUEST = 499


async def proxy_handler(request: Request, context: InputContextDep, processor: ProcessorDep):
    """
    Catch-all route: translate, forward to the backend, replay the reply.

    Failures are raised as ProxyError and answered by the registered
    exception handlers.
    """
    try:
        result = await processor.process_request(context, is_disconnected=request.is_disconnected)
    except ClientDisconnected:
        logger.info(
            "Caller disconnected, backend call cancelled",
            extra={"method": context.method, "path": context.path},
        )
        return Response(status_code=CLIENT_CLOSED_REQUEST)

    return Response(content=result.body, status_code=result.status_code, headers=result.headers)


def create_app(proxy_config: Optional[ProxyConfig] = None) -> FastAPI:
    """
    Assemble the proxy application.

    The configuration is read once here (from the environment when not
    given) and handed to the lifespan; it is never mutated afterwards.
    """
    if proxy_config is None:
        proxy_config = load_config()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        async with manage_lifespan(app, proxy_config):
            yield

    # Every path belongs to the backend, so the docs routes are disabled.
    app = FastAPI(
        title="Function URL Proxy",
        version="1.0.0",
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.middleware("http")(trace_logging_middleware)
    register_exception_handlers(app)
    app.add_api_route("/{path:path}", proxy_handler, methods=PROXY_METHODS)

    return app


def run() -> None:
    """
    Console entry point.

    uvicorn installs SIGINT/SIGTERM handlers: new connections are refused and
    in-flight requests get GRACEFUL_SHUTDOWN_TIMEOUT seconds to finish.
    """
    import uvicorn

    proxy_config = load_config()
    setup_logging(proxy_config.LOG_CONFIG_PATH)

    logger.debug("listening on %s", proxy_config.UVICORN_BIND_ADDR)
    uvicorn.run(
        create_app(proxy_config),
        host=proxy_config.bind_host,
        port=proxy_config.bind_port,
        log_config=None,
        timeout_graceful_shutdown=proxy_config.GRACEFUL_SHUTDOWN_TIMEOUT,
    )
    logger.info("Server has shut down.")


if __name__ == "__main__":
    run()
