"""
Custom exception classes.

Every error is terminal for the request it occurs in. The caller only ever
sees the fixed public message of the error class; details stay in the logs.
"""

import logging

from fastapi import Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger("proxy.errors")

_BACKEND_CALL_FAILED = "Error calling backend."
_INVALID_BACKEND_REPLY = "Invalid response from backend."


class ProxyError(Exception):
    """Base exception class for request translation and forwarding."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    public_message: str = "Internal Server Error"


class InvalidHeaderEncoding(ProxyError):
    """Raised when an inbound header value is not valid text."""

    public_message = "Error reading request headers."

    def __init__(self, header_name: str, cause: Exception):
        self.header_name = header_name
        self.cause = cause
        super().__init__(f"Header {header_name!r} is not valid UTF-8: {cause}")


class BackendUnreachable(ProxyError):
    """Transport-level failure (refused, timeout, DNS, TLS) reaching the backend."""

    status_code = status.HTTP_502_BAD_GATEWAY
    public_message = _BACKEND_CALL_FAILED

    def __init__(self, backend_url: str, cause: Exception):
        self.backend_url = backend_url
        self.cause = cause
        super().__init__(f"Backend unreachable at {backend_url}: {type(cause).__name__}: {cause}")


class BackendError(ProxyError):
    """The backend answered with a 5xx status."""

    status_code = status.HTTP_502_BAD_GATEWAY
    public_message = _BACKEND_CALL_FAILED

    def __init__(self, backend_status: int, detail: str = ""):
        self.backend_status = backend_status
        self.detail = detail
        super().__init__(f"Backend error ({backend_status})")


class MalformedBackendReply(ProxyError):
    """The backend body is not a well-formed reply document."""

    status_code = status.HTTP_502_BAD_GATEWAY
    public_message = _INVALID_BACKEND_REPLY

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f"Malformed backend reply: {detail}")


class InvalidBodyEncoding(ProxyError):
    """isBase64Encoded is true but the body is not valid base64."""

    status_code = status.HTTP_502_BAD_GATEWAY
    public_message = _INVALID_BACKEND_REPLY

    def __init__(self, cause: Exception):
        self.cause = cause
        super().__init__(f"Backend body is not valid base64: {cause}")


class InvalidResponseHeader(ProxyError):
    """A reply header name or value is not a valid HTTP header."""

    status_code = status.HTTP_502_BAD_GATEWAY
    public_message = _INVALID_BACKEND_REPLY

    def __init__(self, header_name: str, reason: str):
        self.header_name = header_name
        self.reason = reason
        super().__init__(f"Invalid response header {header_name!r}: {reason}")


class InvalidStatusCode(ProxyError):
    """The reply statusCode is outside the HTTP status range."""

    status_code = status.HTTP_502_BAD_GATEWAY
    public_message = _INVALID_BACKEND_REPLY

    def __init__(self, value: int):
        self.value = value
        super().__init__(f"Invalid status code from backend: {value}")


class ClientDisconnected(Exception):
    """The caller went away before the backend answered; nothing is sent."""


# ===========================================
# Exception Handlers
# ===========================================


async def proxy_error_handler(request: Request, exc: ProxyError):
    """
    Answer the caller with the fixed message of the error class.
    """
    logger.error(
        f"Request failed: {exc}",
        extra={
            "path": request.url.path,
            "method": request.method,
            "error_type": type(exc).__name__,
            "error_detail": str(exc),
            "status": exc.status_code,
        },
    )
    return JSONResponse(status_code=exc.status_code, content={"message": exc.public_message})


async def global_exception_handler(request: Request, exc: Exception):
    """
    Catch-all handler for unhandled exceptions.
    """
    logger.error(
        f"Global exception handler caught: {exc}",
        exc_info=exc,
        extra={
            "path": request.url.path,
            "method": request.method,
        },
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Internal Server Error"},
    )
