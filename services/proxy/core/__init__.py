"""
Core logic package.

Provides the request/response translation logic.
"""

from .event_builder import EventBuilder, FunctionUrlEventBuilder
from .response_builder import ResponseReconstructor

__all__ = [
    "EventBuilder",
    "FunctionUrlEventBuilder",
    "ResponseReconstructor",
]
