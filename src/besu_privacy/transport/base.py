"""
Transport capability.

The privacy client reaches the node through a single call(method, params)
operation so that any JSON-RPC carrier, or a scripted substitute in tests,
can be plugged in.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any, List, Optional


class Transport(ABC):
    """Narrow JSON-RPC capability: one request, one response."""

    @abstractmethod
    def call(self, method: str, params: Optional[List[Any]] = None) -> Any:
        """
        Invoke a JSON-RPC method.

        Args:
            method: RPC method name
            params: Positional parameters

        Returns:
            The decoded `result` member of the response

        Raises:
            TransportError: on network, HTTP or JSON-RPC failure
        """
        pass

    def close(self) -> None:
        """Release any resources held by the transport."""

    def __enter__(self) -> Transport:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
