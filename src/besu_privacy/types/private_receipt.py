"""
Private transaction receipt types.

Maps the JSON object returned by priv_getTransactionReceipt into typed
models. Required fields raise DecodeError naming the field when absent;
individual malformed privateFor and logs entries are skipped.
"""

from __future__ import annotations
import logging
from typing import Any, Callable, Dict, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from ..codec import hexutil
from ..runtime.errors import DecodeError, ErrorCode
from .address import hex_to_address, hex_to_hash
from .public_key import PublicKey

logger = logging.getLogger(__name__)

RESTRICTED = "restricted"
BLOOM_LENGTH = 256

T = TypeVar("T")


def _required(r: Dict[str, Any], name: str) -> Any:
    if name not in r:
        raise DecodeError.missing(name)
    return r[name]


def _parse(name: str, parse: Callable[[Any], T], value: Any) -> T:
    """Run `parse`, attributing any DecodeError to field `name`."""
    try:
        return parse(value)
    except DecodeError as e:
        raise DecodeError(f"invalid {name}: {e.message}", field=name,
                          code=ErrorCode.INVALID_FIELD, cause=e)


def _as_list(name: str, value: Any) -> List[Any]:
    if not isinstance(value, list):
        raise DecodeError(f"{name} must be a list, got {type(value).__name__}",
                          field=name, code=ErrorCode.INVALID_FIELD)
    return value


def _bloom(value: Any) -> bytes:
    raw = hexutil.decode_bytes(value)
    if len(raw) > BLOOM_LENGTH:
        raise DecodeError(f"bloom too big: {len(raw)} bytes", code=ErrorCode.INVALID_FIELD)
    return raw.rjust(BLOOM_LENGTH, b"\x00")


class Log(BaseModel):
    """Contract event emitted by a private transaction."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    address: bytes
    topics: List[bytes] = Field(default_factory=list)
    data: bytes = b""
    block_number: Optional[int] = Field(default=None, alias="blockNumber")
    transaction_hash: Optional[bytes] = Field(default=None, alias="transactionHash")
    transaction_index: Optional[int] = Field(default=None, alias="transactionIndex")
    block_hash: Optional[bytes] = Field(default=None, alias="blockHash")
    log_index: Optional[int] = Field(default=None, alias="logIndex")
    removed: bool = False

    @classmethod
    def from_rpc(cls, entry: Dict[str, Any]) -> Log:
        """
        Build a Log from its JSON-RPC representation.

        Raises:
            DecodeError: on a missing address, topics or data field, or a
                malformed value
        """
        if not isinstance(entry, dict):
            raise DecodeError(f"log entry must be an object, got {type(entry).__name__}",
                              code=ErrorCode.INVALID_FIELD)
        fields: Dict[str, Any] = {
            "address": _parse("address", hex_to_address, _required(entry, "address")),
            "topics": [
                _parse("topics", hex_to_hash, topic)
                for topic in _as_list("topics", _required(entry, "topics"))
            ],
            "data": _parse("data", hexutil.decode_bytes, _required(entry, "data")),
            "removed": bool(entry.get("removed", False)),
        }
        if entry.get("blockNumber") is not None:
            fields["block_number"] = _parse("blockNumber", hexutil.decode_uint64, entry["blockNumber"])
        if entry.get("transactionHash") is not None:
            fields["transaction_hash"] = _parse("transactionHash", hex_to_hash, entry["transactionHash"])
        if entry.get("transactionIndex") is not None:
            fields["transaction_index"] = _parse("transactionIndex", hexutil.decode_uint64,
                                                 entry["transactionIndex"])
        if entry.get("blockHash") is not None:
            fields["block_hash"] = _parse("blockHash", hex_to_hash, entry["blockHash"])
        if entry.get("logIndex") is not None:
            fields["log_index"] = _parse("logIndex", hexutil.decode_uint64, entry["logIndex"])
        return cls(**fields)


class PrivateReceipt(BaseModel):
    """Result of executing a private transaction."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True, populate_by_name=True)

    status: int = 0
    logs_bloom: bytes = Field(alias="logsBloom")
    logs: List[Log] = Field(default_factory=list)
    transaction_hash: bytes = Field(alias="transactionHash")
    contract_address: Optional[bytes] = Field(default=None, alias="contractAddress")
    block_hash: Optional[bytes] = Field(default=None, alias="blockHash")
    block_number: Optional[int] = Field(default=None, alias="blockNumber")
    transaction_index: int = Field(default=0, alias="transactionIndex")
    private_from: PublicKey = Field(alias="privateFrom")
    private_for: List[PublicKey] = Field(default_factory=list, alias="privateFor")
    restriction: str = RESTRICTED
    commitment_hash: bytes = Field(alias="commitmentHash")
    output: bytes = b""

    @property
    def succeeded(self) -> bool:
        """True when the private execution succeeded."""
        return self.status == 1


def marshal_private_receipt(r: Dict[str, Any]) -> PrivateReceipt:
    """
    Map a priv_getTransactionReceipt result into a PrivateReceipt.

    Args:
        r: Decoded JSON object

    Returns:
        PrivateReceipt

    Raises:
        DecodeError: naming the first required field that is missing or
            malformed
    """
    if not isinstance(r, dict):
        raise DecodeError(f"receipt must be an object, got {type(r).__name__}",
                          code=ErrorCode.INVALID_FIELD)

    contract_address = None
    if r.get("contractAddress") is not None:
        contract_address = _parse("contractAddress", hex_to_address, r["contractAddress"])

    output = b""
    if r.get("output") is not None:
        try:
            output = hexutil.decode_bytes(r["output"])
        except DecodeError as e:
            logger.debug("Ignoring malformed receipt output: %s", e)

    commitment_hash = _parse("commitmentHash", hex_to_hash, _required(r, "commitmentHash"))
    transaction_hash = _parse("transactionHash", hex_to_hash, _required(r, "transactionHash"))
    private_from = _parse("privateFrom", PublicKey.from_base64, _required(r, "privateFrom"))

    private_for: List[PublicKey] = []
    for entry in _as_list("privateFor", _required(r, "privateFor")):
        try:
            private_for.append(PublicKey.from_base64(entry))
        except DecodeError as e:
            logger.debug("Skipping malformed privateFor entry %r: %s", entry, e)

    status = 1 if r.get("status") == "0x1" else 0

    logs: List[Log] = []
    for entry in _as_list("logs", _required(r, "logs")):
        try:
            logs.append(Log.from_rpc(entry))
        except DecodeError as e:
            logger.debug("Skipping malformed log entry: %s", e)

    logs_bloom = _parse("logsBloom", _bloom, _required(r, "logsBloom"))

    block_hash = None
    if r.get("blockHash") is not None:
        block_hash = _parse("blockHash", hex_to_hash, r["blockHash"])

    block_number = None
    if r.get("blockNumber") is not None:
        block_number = _parse("blockNumber", hexutil.decode_big, r["blockNumber"])

    transaction_index = 0
    if r.get("transactionIndex") is not None:
        transaction_index = _parse("transactionIndex", hexutil.decode_uint64, r["transactionIndex"])

    return PrivateReceipt(
        status=status,
        logs_bloom=logs_bloom,
        logs=logs,
        transaction_hash=transaction_hash,
        contract_address=contract_address,
        block_hash=block_hash,
        block_number=block_number,
        transaction_index=transaction_index,
        private_from=private_from,
        private_for=private_for,
        restriction=RESTRICTED,
        commitment_hash=commitment_hash,
        output=output,
    )
