"""
Dependency Injection for the proxy API.

Manage request handler dependencies using FastAPI Depends.
"""

from typing import Annotated, Dict, Iterable, Tuple
from urllib.parse import parse_qsl

from fastapi import Depends, Request

from ..core.exceptions import InvalidHeaderEncoding
from ..models.context import InputContext
from ..services.processor import ProxyRequestProcessor

# ==========================================
# 1. Service Accessors
# ==========================================


def get_processor(request: Request) -> ProxyRequestProcessor:
    return request.app.state.processor


ProcessorDep = Annotated[ProxyRequestProcessor, Depends(get_processor)]


# ==========================================
# 2. Request Extraction
# ==========================================


def decode_headers(raw_headers: Iterable[Tuple[bytes, bytes]]) -> Dict[str, str]:
    """
    Decode raw header pairs into a single-valued mapping.

    Later occurrences of a name overwrite earlier ones.

    Raises:
        InvalidHeaderEncoding: a value is not valid UTF-8
    """
    headers: Dict[str, str] = {}
    for raw_name, raw_value in raw_headers:
        name = raw_name.decode("latin-1")
        try:
            headers[name] = raw_value.decode("utf-8")
        except UnicodeDecodeError as e:
            raise InvalidHeaderEncoding(name, e) from e
    return headers


def parse_query(raw_query: str) -> Dict[str, str]:
    """Form-urlencoded decoding; the last value of a duplicate key wins."""
    return dict(parse_qsl(raw_query, keep_blank_values=True))


def request_path(request: Request) -> str:
    """The path as sent on the wire (still percent-encoded) when the server provides it."""
    raw_path = request.scope.get("raw_path")
    if raw_path:
        return raw_path.split(b"?", 1)[0].decode("latin-1")
    return request.url.path


async def build_input_context(request: Request) -> InputContext:
    """
    Snapshot the inbound request.

    Headers are decoded before the body is read so a request with bad
    headers is rejected without buffering its payload.
    """
    headers = decode_headers(request.headers.raw)
    raw_query = request.url.query
    body = await request.body()

    return InputContext(
        method=request.method,
        path=request_path(request),
        raw_query=raw_query,
        query_params=parse_query(raw_query),
        headers=headers,
        body=body,
    )


InputContextDep = Annotated[InputContext, Depends(build_input_context)]
