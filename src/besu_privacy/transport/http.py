"""
JSON-RPC 2.0 over HTTP.

Timeouts are configured here and only here; the privacy client adds no
retry policy of its own.
"""

from __future__ import annotations
import itertools
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

import requests

from ..runtime.errors import ErrorCode, TransportError, error_from_response
from .base import Transport

logger = logging.getLogger(__name__)

# Well-known endpoint aliases
ENDPOINTS = {
    "local": "http://127.0.0.1:8545",
}


@dataclass
class ClientConfig:
    """Configuration for the HTTP transport."""

    endpoint: str
    timeout: float = 30.0
    debug: bool = False
    verify_ssl: bool = True
    user_agent: str = "besu-privacy-python/0.1.0"
    headers: Dict[str, str] = field(default_factory=dict)

    def resolved_endpoint(self) -> str:
        """Endpoint URL with well-known aliases expanded."""
        return ENDPOINTS.get(self.endpoint.lower(), self.endpoint)


class HttpTransport(Transport):
    """
    JSON-RPC transport over HTTP POST.

    Example:
        ```python
        with HttpTransport("http://127.0.0.1:8545") as transport:
            count = transport.call("priv_getTransactionCount", [address, group_id])
        ```
    """

    def __init__(
        self,
        config: Union[str, ClientConfig],
        session: Optional[requests.Session] = None
    ):
        """
        Initialize the transport.

        Args:
            config: Either an endpoint URL string or a ClientConfig object
            session: Optional requests.Session for connection pooling
        """
        if isinstance(config, str):
            self.config = ClientConfig(endpoint=config)
        else:
            self.config = config

        if self.config.debug:
            logger.setLevel(logging.DEBUG)

        self._endpoint = self.config.resolved_endpoint()
        self._session = session or requests.Session()
        self._owns_session = session is None
        self._ids = itertools.count(1)

    @property
    def endpoint(self) -> str:
        """Get the RPC endpoint."""
        return self._endpoint

    def close(self) -> None:
        """Close the HTTP session if owned by this transport."""
        if self._owns_session:
            self._session.close()

    def call(self, method: str, params: Optional[List[Any]] = None) -> Any:
        """
        Make a JSON-RPC 2.0 call.

        Args:
            method: RPC method name
            params: Positional parameters

        Returns:
            Result from the RPC call

        Raises:
            TransportError: If the call fails
        """
        request_data: Dict[str, Any] = {
            "jsonrpc": "2.0",
            "method": method,
            "params": list(params) if params is not None else [],
            "id": next(self._ids),
        }
        headers = {"Content-Type": "application/json", "User-Agent": self.config.user_agent}
        headers.update(self.config.headers)

        logger.debug("Request: %s -> %s", method, json.dumps(request_data))

        try:
            response = self._session.post(
                self._endpoint,
                json=request_data,
                headers=headers,
                timeout=self.config.timeout,
                verify=self.config.verify_ssl,
            )
        except requests.exceptions.Timeout as e:
            raise TransportError(f"{method} timed out after {self.config.timeout}s",
                                 ErrorCode.TIMEOUT, {"method": method}, e)
        except requests.exceptions.ConnectionError as e:
            raise TransportError(f"connection to {self._endpoint} failed",
                                 ErrorCode.CONNECTION_FAILED, {"method": method}, e)
        except requests.exceptions.RequestException as e:
            raise TransportError(f"HTTP request failed: {e}", ErrorCode.NETWORK_ERROR,
                                 {"method": method}, e)

        if response.status_code != 200:
            raise TransportError(
                f"HTTP {response.status_code}: {response.reason}",
                details={"method": method, "status": response.status_code},
            )

        try:
            response_data = response.json()
        except ValueError as e:
            raise TransportError(f"Invalid JSON response: {e}", ErrorCode.INVALID_JSON,
                                 {"method": method}, e)

        if not isinstance(response_data, dict):
            raise TransportError("JSON-RPC response is not an object", ErrorCode.INVALID_JSON,
                                 {"method": method})

        error = error_from_response(response_data)
        if error is not None:
            error.details["method"] = method
            logger.debug("Error: %s <- %s", method, error)
            raise error

        logger.debug("Response: %s <- %s", method, response_data.get("result"))
        return response_data.get("result")
