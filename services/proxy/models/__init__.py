"""
Data model definitions package.

Aggregates Pydantic models for use in other modules.
"""

from .context import InputContext
from .function_url import (
    BackendReply,
    FunctionUrlEvent,
    FunctionUrlHttp,
    FunctionUrlRequestContext,
)
from .result import ReconstructedResponse

__all__ = [
    "BackendReply",
    "FunctionUrlEvent",
    "FunctionUrlHttp",
    "FunctionUrlRequestContext",
    "InputContext",
    "ReconstructedResponse",
]
