"""
Services package.

Provides the backend integration and the request orchestration.
"""

from .backend_invoker import BackendInvoker
from .processor import ProxyRequestProcessor

__all__ = [
    "BackendInvoker",
    "ProxyRequestProcessor",
]
