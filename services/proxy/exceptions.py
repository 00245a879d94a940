"""
Where: services/proxy/exceptions.py
What: Exception handler registration for the proxy app.
Why: Keep error handling setup isolated from route and lifecycle concerns.
"""

from fastapi import FastAPI

from .core.exceptions import ProxyError, global_exception_handler, proxy_error_handler


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(Exception, global_exception_handler)  # ty: ignore[invalid-argument-type]  # Starlette type stubs incomplete
    app.add_exception_handler(ProxyError, proxy_error_handler)  # ty: ignore[invalid-argument-type]  # Starlette type stubs incomplete
