"""
EEA client.

Thin facade over a transport exposing the privacy resolver, raw private
transaction submission and private receipt retrieval. No retries, no
polling: callers own timing.
"""

from __future__ import annotations
import logging
from typing import Optional, Union

from .codec import hexutil
from .privacy.resolver import Privacy
from .runtime.errors import DecodeError, ErrorCode
from .transport.base import Transport
from .transport.http import ClientConfig, HttpTransport
from .tx.private_transaction import SignedPrivateTransaction
from .types.private_receipt import PrivateReceipt, marshal_private_receipt

logger = logging.getLogger(__name__)


class EeaClient:
    """
    Client for a node exposing the eea_* and priv_* JSON-RPC APIs.

    Example:
        ```python
        with EeaClient("http://127.0.0.1:8545") as client:
            group = client.privacy.find_root_privacy_group([private_from, *private_for])
            nonce = client.privacy.private_nonce(signer.address(), group)
            tx = new_transaction(nonce, to, 0, 3_000_000, 0, data, private_from, private_for)
            tx_hash = client.send_raw_transaction(tx.sign(chain_id, signer))
            receipt = client.get_private_transaction_receipt(tx_hash)
        ```
    """

    def __init__(self, transport: Union[Transport, ClientConfig, str]):
        """
        Initialize the client.

        Args:
            transport: A Transport, or a ClientConfig / endpoint URL from
                which an HttpTransport is built
        """
        if isinstance(transport, Transport):
            self.transport = transport
            self._owns_transport = False
        else:
            self.transport = HttpTransport(transport)
            self._owns_transport = True
        self.privacy = Privacy(self.transport)

    def close(self) -> None:
        """Close the transport if owned by this client."""
        if self._owns_transport:
            self.transport.close()

    def __enter__(self) -> EeaClient:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def send_raw_transaction(self, tx: Union[SignedPrivateTransaction, bytes]) -> str:
        """
        Submit a signed private transaction.

        Args:
            tx: Signed transaction or its wire encoding

        Returns:
            Transaction hash as 0x-prefixed hex

        Raises:
            TransportError: on RPC failure
        """
        raw = tx.encode() if isinstance(tx, SignedPrivateTransaction) else bytes(tx)
        result = self.transport.call("eea_sendRawTransaction", [hexutil.encode_bytes(raw)])
        if not isinstance(result, str):
            raise DecodeError(f"transaction hash must be a string, got {type(result).__name__}",
                              field="result", code=ErrorCode.INVALID_FIELD)
        logger.debug("Submitted private transaction %s", result)
        return result

    def get_private_transaction_receipt(self, tx_hash: Union[str, bytes]) -> Optional[PrivateReceipt]:
        """
        Fetch the private receipt of a transaction.

        Args:
            tx_hash: Transaction hash, hex string or 32 raw bytes

        Returns:
            PrivateReceipt, or None if the node has no receipt yet

        Raises:
            TransportError: on RPC failure
            DecodeError: if the receipt lacks a required field
        """
        if isinstance(tx_hash, (bytes, bytearray)):
            tx_hash = hexutil.encode_bytes(tx_hash)
        result = self.transport.call("priv_getTransactionReceipt", [tx_hash])
        if result is None:
            return None
        return marshal_private_receipt(result)
