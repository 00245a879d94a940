# services/proxy/models/function_url.py

"""
Pydantic models for the Lambda function URL event (payload format 2.0) and
the reply document returned by the function.

Reference: https://docs.aws.amazon.com/lambda/latest/dg/urls-invocation.html#urls-payloads

Field names follow the wire format (camelCase); use
model_dump(by_alias=True) to produce the JSON document.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt, StrictStr

PAYLOAD_VERSION = "2.0"
DEFAULT_ROUTE_KEY = "$default"


class FunctionUrlHttp(BaseModel):
    """requestContext.http object."""

    method: str
    path: str
    protocol: str = "HTTP/1.1"
    sourceIp: str
    userAgent: str

    model_config = ConfigDict(frozen=True)


class FunctionUrlRequestContext(BaseModel):
    """requestContext object."""

    accountId: str
    apiId: str
    domainName: str
    domainPrefix: str
    http: FunctionUrlHttp
    requestId: str
    routeKey: str = DEFAULT_ROUTE_KEY
    stage: str = DEFAULT_ROUTE_KEY
    time: str
    timeEpoch: int

    model_config = ConfigDict(frozen=True)


class FunctionUrlEvent(BaseModel):
    """
    Lambda function URL invocation event (payload format 2.0).

    The body is always base64-encoded and isBase64Encoded is always true,
    whatever the original payload looked like.
    """

    version: str = PAYLOAD_VERSION
    routeKey: str = DEFAULT_ROUTE_KEY
    rawPath: str
    rawQueryString: str = ""
    cookies: List[str] = Field(default_factory=list)
    headers: Dict[str, str]
    queryStringParameters: Dict[str, str] = Field(default_factory=dict)
    requestContext: FunctionUrlRequestContext
    body: str
    isBase64Encoded: bool = True

    model_config = ConfigDict(frozen=True)


class BackendReply(BaseModel):
    """
    Reply document returned by the backend.

    Types are strict: "200" is not a status code and 1 is not a boolean.
    """

    statusCode: StrictInt
    headers: Dict[StrictStr, StrictStr]
    body: StrictStr
    isBase64Encoded: Optional[StrictBool] = None

    model_config = ConfigDict(frozen=True, extra="ignore")

    @property
    def is_base64(self) -> bool:
        """isBase64Encoded, treating absent or null as false."""
        return bool(self.isBase64Encoded)
