"""
Transports carrying JSON-RPC requests to the node.
"""

from .base import Transport
from .http import ClientConfig, HttpTransport

__all__ = [
    "ClientConfig",
    "HttpTransport",
    "Transport",
]
