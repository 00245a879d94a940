import base64
import logging
from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

from services.proxy.config import ProxyConfig
from services.proxy.models.context import InputContext
from services.proxy.models.function_url import (
    FunctionUrlEvent,
    FunctionUrlHttp,
    FunctionUrlRequestContext,
)

logger = logging.getLogger("proxy.event_builder")

# Real cookie extraction from the Cookie header is not implemented.
PLACEHOLDER_COOKIES: List[str] = ["cookie1=value1", "cookie2=value2"]

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def format_request_time(now: datetime) -> str:
    """
    Format an instant as ``DD/Mon/YYYY:HH:MM:SS +ZZZZ``.

    The month abbreviation is always English, whatever the process locale.
    Naive datetimes are taken as UTC.
    """
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return (
        f"{now.day:02d}/{_MONTHS[now.month - 1]}/{now.year:04d}:"
        f"{now:%H:%M:%S} {now:%z}"
    )


def epoch_millis(now: datetime) -> int:
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return (now - _EPOCH) // timedelta(milliseconds=1)


class EventBuilder(ABC):
    @abstractmethod
    def build(self, context: InputContext, now: Optional[datetime] = None) -> Dict[str, Any]:
        """
        Build an event dictionary from an InputContext.
        """
        pass


class FunctionUrlEventBuilder(EventBuilder):
    """Lambda function URL (payload format 2.0) compatible event builder."""

    def __init__(self, config: ProxyConfig):
        self.config = config

    def build(self, context: InputContext, now: Optional[datetime] = None) -> Dict[str, Any]:
        """
        Build a function URL invocation event from context.

        The body is base64-encoded unconditionally, so any byte content is
        accepted and isBase64Encoded is always true.
        """
        if now is None:
            now = datetime.now(timezone.utc)

        event_model = FunctionUrlEvent(
            rawPath=context.path,
            rawQueryString=context.raw_query,
            cookies=list(PLACEHOLDER_COOKIES),
            headers=context.headers,
            queryStringParameters=context.query_params,
            requestContext=FunctionUrlRequestContext(
                accountId=self.config.EVENT_ACCOUNT_ID,
                apiId=self.config.EVENT_API_ID,
                domainName=self.config.EVENT_DOMAIN_NAME,
                domainPrefix=self.config.EVENT_DOMAIN_PREFIX,
                http=FunctionUrlHttp(
                    method=context.method,
                    path=context.path,
                    sourceIp=self.config.EVENT_SOURCE_IP,
                    userAgent=self.config.EVENT_USER_AGENT,
                ),
                requestId=self.config.EVENT_REQUEST_ID,
                time=format_request_time(now),
                timeEpoch=epoch_millis(now),
            ),
            body=base64.b64encode(context.body).decode("ascii"),
            isBase64Encoded=True,
        )

        logger.debug(
            "Built function URL event",
            extra={"method": context.method, "path": context.path, "body_size": len(context.body)},
        )
        return event_model.model_dump(by_alias=True)
