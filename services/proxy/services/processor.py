"""
Proxy Request Processor - Service Layer

Standardizes the flow: InputContext -> Event -> BackendReply -> ReconstructedResponse.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional, TypeVar

from services.proxy.core.event_builder import EventBuilder
from services.proxy.core.exceptions import ClientDisconnected
from services.proxy.core.response_builder import ResponseReconstructor
from services.proxy.models.context import InputContext
from services.proxy.models.result import ReconstructedResponse
from services.proxy.services.backend_invoker import BackendInvoker

logger = logging.getLogger("proxy.processor")

T = TypeVar("T")

DisconnectProbe = Callable[[], Awaitable[bool]]


async def run_until_disconnected(
    awaitable: Awaitable[T], is_disconnected: DisconnectProbe, poll_interval: float
) -> T:
    """
    Await ``awaitable`` while watching the caller connection.

    The in-flight task is cancelled as soon as the probe reports a
    disconnect, so abandoned requests do not keep backend calls alive.

    Raises:
        ClientDisconnected: the caller went away first
    """
    task = asyncio.ensure_future(awaitable)
    try:
        while True:
            done, _ = await asyncio.wait({task}, timeout=poll_interval)
            if done:
                return task.result()
            if await is_disconnected():
                raise ClientDisconnected()
    finally:
        if not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
            except Exception:
                logger.debug("Cancelled backend call raised while unwinding", exc_info=True)


class ProxyRequestProcessor:
    """
    Orchestrates the request processing lifecycle.

    Received -> EventBuilt -> BackendCalled -> ReplyParsed -> ResponseBuilt.
    Any failure propagates as a ProxyError and ends the request.
    """

    def __init__(
        self,
        invoker: BackendInvoker,
        event_builder: EventBuilder,
        reconstructor: ResponseReconstructor,
        disconnect_poll_interval: float = 0.5,
    ):
        self.invoker = invoker
        self.event_builder = event_builder
        self.reconstructor = reconstructor
        self.disconnect_poll_interval = disconnect_poll_interval

    async def process_request(
        self, context: InputContext, is_disconnected: Optional[DisconnectProbe] = None
    ) -> ReconstructedResponse:
        """
        Process a request from InputContext to ReconstructedResponse.
        """
        logger.debug(f"Processing request ({context.method} {context.path})")

        event = self.event_builder.build(context)

        if is_disconnected is None:
            reply = await self.invoker.invoke(event)
        else:
            reply = await run_until_disconnected(
                self.invoker.invoke(event), is_disconnected, self.disconnect_poll_interval
            )

        return self.reconstructor.reconstruct(reply)
