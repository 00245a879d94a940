"""
Backend Invoker Service

Sends the invocation event to the configured backend and parses its reply.
Exactly one POST per call; nothing is retried or cached.
"""

import json
import logging
from typing import Any, Dict

import httpx
from pydantic import ValidationError

from services.proxy.config import ProxyConfig
from services.proxy.core.exceptions import BackendError, BackendUnreachable, MalformedBackendReply
from services.proxy.models.function_url import BackendReply

logger = logging.getLogger("proxy.backend_invoker")

# Upper bound of backend body characters copied into logs.
_LOG_SNIPPET_CHARS = 200


class BackendInvoker:
    def __init__(self, client: httpx.AsyncClient, config: ProxyConfig):
        """
        Args:
            client: Shared httpx.AsyncClient
            config: ProxyConfig instance
        """
        self.client = client
        self.config = config
        self.backend_url = config.backend_url

    async def invoke(self, event: Dict[str, Any]) -> BackendReply:
        """
        POST the event to the backend and return the parsed reply.

        Raises:
            BackendUnreachable: transport failure or timeout
            BackendError: backend answered 5xx
            MalformedBackendReply: body is not a valid reply document
        """
        payload = json.dumps(event).encode("utf-8")

        try:
            response = await self.client.post(
                self.backend_url,
                content=payload,
                headers={"Content-Type": "application/json"},
                timeout=self.config.BACKEND_TIMEOUT,
            )
        except httpx.RequestError as e:
            logger.error(
                "Backend invocation failed",
                extra={
                    "target_url": self.backend_url,
                    "timeout": self.config.BACKEND_TIMEOUT,
                    "error_type": type(e).__name__,
                    "error_detail": str(e),
                },
            )
            raise BackendUnreachable(self.backend_url, e) from e

        if response.is_server_error:
            logger.error(
                "Backend returned server error",
                extra={
                    "target_url": self.backend_url,
                    "backend_status": response.status_code,
                    "snippet": response.text[:_LOG_SNIPPET_CHARS],
                },
            )
            raise BackendError(response.status_code, response.text[:_LOG_SNIPPET_CHARS])

        return self.parse_reply(response.content)

    @staticmethod
    def parse_reply(content: bytes) -> BackendReply:
        """
        Parse a reply document.

        Raises:
            MalformedBackendReply: invalid JSON, not an object, missing fields or wrong types
        """
        try:
            return BackendReply.model_validate_json(content)
        except ValidationError as e:
            logger.warning(
                "Failed to parse backend reply",
                extra={
                    "snippet": content[:_LOG_SNIPPET_CHARS].decode("utf-8", errors="replace"),
                    "errors": e.errors(include_url=False, include_input=False),
                },
            )
            raise MalformedBackendReply(str(e)) from e
