"""
Response reconstruction.

Turns a parsed backend reply document into a fully validated response.
Nothing is sent until every part (status, headers, body) has been checked,
so a bad reply never produces a half-applied response.
"""

import base64
import logging
import re
from typing import Dict

from services.proxy.core.exceptions import (
    InvalidBodyEncoding,
    InvalidResponseHeader,
    InvalidStatusCode,
)
from services.proxy.models.function_url import BackendReply
from services.proxy.models.result import ReconstructedResponse

logger = logging.getLogger("proxy.response_builder")

MIN_STATUS_CODE = 100
MAX_STATUS_CODE = 599

# RFC 9110 token
_HEADER_NAME_RE = re.compile(r"[!#$%&'*+\-.^_`|~0-9A-Za-z]+")
# Visible chars, SP, HTAB and obs-text; no CR, LF, NUL or other controls.
_HEADER_VALUE_RE = re.compile(r"[\t\x20-\x7e\x80-\xff]*")


def decode_body(reply: BackendReply) -> bytes:
    """
    Return the raw body bytes of a reply.

    Raises:
        InvalidBodyEncoding: body is not strict base64 (when flagged) or not encodable text
    """
    if reply.is_base64:
        try:
            return base64.b64decode(reply.body, validate=True)
        except ValueError as e:
            raise InvalidBodyEncoding(e) from e

    try:
        return reply.body.encode("utf-8")
    except UnicodeEncodeError as e:
        raise InvalidBodyEncoding(e) from e


def validate_headers(headers: Dict[str, str]) -> Dict[str, str]:
    """
    Check every header name and value; fail on the first invalid one.

    Raises:
        InvalidResponseHeader: name is not a token or value carries forbidden characters
    """
    validated: Dict[str, str] = {}
    for name, value in headers.items():
        if not _HEADER_NAME_RE.fullmatch(name):
            raise InvalidResponseHeader(name, "name is not a valid token")
        if not _HEADER_VALUE_RE.fullmatch(value):
            raise InvalidResponseHeader(name, "value contains forbidden characters")
        validated[name] = value
    return validated


class ResponseReconstructor:
    """Backend reply document -> ReconstructedResponse."""

    def reconstruct(self, reply: BackendReply) -> ReconstructedResponse:
        """
        Build the outgoing response for a reply.

        Raises:
            InvalidStatusCode: statusCode outside [100, 599]
            InvalidResponseHeader: malformed header name or value
            InvalidBodyEncoding: undecodable body
        """
        if not MIN_STATUS_CODE <= reply.statusCode <= MAX_STATUS_CODE:
            raise InvalidStatusCode(reply.statusCode)

        headers = validate_headers(reply.headers)
        body = decode_body(reply)

        logger.debug(
            "Reconstructed response",
            extra={"status": reply.statusCode, "body_size": len(body), "header_count": len(headers)},
        )
        return ReconstructedResponse(status_code=reply.statusCode, headers=headers, body=body)
