"""
RLP Writer

Implements the recursive-length-prefix encoding used by the node for both
transaction signing digests and wire transmission. Output is byte-for-byte
identical to go-ethereum's rlp package for the field shapes used here.
"""

import builtins
from typing import Any, Iterable, List, Optional

from ..runtime.errors import EncodingError

EMPTY_STRING = b"\x80"
EMPTY_LIST = b"\xc0"

UINT64_MAX = (1 << 64) - 1


def encode_length(length: int, offset: int) -> builtins.bytes:
    """
    Encode an item header.

    Short form for payloads up to 55 bytes, otherwise the length of the
    big-endian length followed by the length itself.

    Args:
        length: Payload length in bytes
        offset: 0x80 for strings, 0xC0 for lists

    Returns:
        Header bytes
    """
    if length < 56:
        return builtins.bytes([offset + length])
    length_bytes = uint_to_bytes(length)
    return builtins.bytes([offset + 55 + len(length_bytes)]) + length_bytes


def uint_to_bytes(value: int) -> builtins.bytes:
    """Minimal big-endian representation; zero is the empty byte string."""
    if value == 0:
        return b""
    return value.to_bytes((value.bit_length() + 7) // 8, "big")


def encode_string(data: builtins.bytes) -> builtins.bytes:
    """Encode a byte string item."""
    if len(data) == 1 and data[0] < 0x80:
        return builtins.bytes(data)
    return encode_length(len(data), 0x80) + builtins.bytes(data)


def encode_list_payload(payload: builtins.bytes) -> builtins.bytes:
    """Wrap already-encoded items in a list header."""
    return encode_length(len(payload), 0xC0) + payload


class RLPWriter:
    """
    Sequence writer for RLP lists.

    Each write appends one item to the sequence; to_bytes() returns the
    whole sequence encoded as a single list. Absent optional fields still
    occupy their position as the empty string.
    """

    def __init__(self):
        """Initialize writer with an empty item sequence."""
        self._items: List[builtins.bytes] = []

    def __len__(self) -> int:
        return len(self._items)

    def uint(self, v: int, bits: int = 64) -> None:
        """
        Write an unsigned integer of at most `bits` bits.

        Args:
            v: Non-negative integer
            bits: Maximum width of the value
        """
        if isinstance(v, bool) or not isinstance(v, int):
            raise EncodingError(f"uint field requires int, got {type(v).__name__}")
        if v < 0 or v.bit_length() > bits:
            raise EncodingError(f"value {v} does not fit in uint{bits}")
        self._items.append(encode_string(uint_to_bytes(v)))

    def big_int(self, v: Optional[int]) -> None:
        """
        Write an arbitrary-precision non-negative integer.

        None encodes as zero, matching a nil *big.Int.
        """
        if v is None:
            v = 0
        if isinstance(v, bool) or not isinstance(v, int):
            raise EncodingError(f"big integer field requires int, got {type(v).__name__}")
        if v < 0:
            raise EncodingError(f"cannot encode negative integer {v}")
        self._items.append(encode_string(uint_to_bytes(v)))

    def bytes(self, v: Optional[builtins.bytes]) -> None:
        """Write a variable-length byte string. None encodes as empty."""
        if v is None:
            v = b""
        if not isinstance(v, (builtins.bytes, bytearray, memoryview)):
            raise EncodingError(f"bytes field requires bytes, got {type(v).__name__}")
        self._items.append(encode_string(builtins.bytes(v)))

    def fixed_bytes(self, v: builtins.bytes, length: int) -> None:
        """Write a byte array that must be exactly `length` bytes."""
        if not isinstance(v, (builtins.bytes, bytearray, memoryview)):
            raise EncodingError(f"fixed bytes field requires bytes, got {type(v).__name__}")
        if len(v) != length:
            raise EncodingError(f"expected {length} bytes, got {len(v)}")
        self._items.append(encode_string(builtins.bytes(v)))

    def optional_fixed_bytes(self, v: Optional[builtins.bytes], length: int) -> None:
        """Write a fixed-length byte array, or the empty marker when absent."""
        if v is None:
            self._items.append(EMPTY_STRING)
            return
        self.fixed_bytes(v, length)

    def string(self, s: str) -> None:
        """Write a text string as its UTF-8 bytes."""
        if not isinstance(s, str):
            raise EncodingError(f"string field requires str, got {type(s).__name__}")
        self._items.append(encode_string(s.encode("utf-8")))

    def bytes_list(self, values: Optional[Iterable[builtins.bytes]]) -> None:
        """Write a nested list of byte strings. None encodes as the empty list."""
        nested = RLPWriter()
        for value in values or ():
            nested.bytes(value)
        self.list(nested)

    def list(self, writer: "RLPWriter") -> None:
        """Write the items of another writer as a nested list."""
        if not isinstance(writer, RLPWriter):
            raise EncodingError(f"nested list requires RLPWriter, got {type(writer).__name__}")
        self._items.append(writer.to_bytes())

    def to_bytes(self) -> builtins.bytes:
        """
        Return the sequence encoded as one RLP list.

        Returns:
            Encoded list bytes
        """
        return encode_list_payload(b"".join(self._items))


def encode(value: Any) -> builtins.bytes:
    """
    Encode a Python value as a single RLP item.

    Supported shapes:
        None                      -> empty string
        bool                      -> 0x01 / empty string
        int (non-negative)        -> big-endian minimal string
        bytes, bytearray, str     -> string
        list, tuple               -> list (recursively)
        RLPWriter                 -> its list

    Raises:
        EncodingError: for any other shape or a negative integer
    """
    if value is None:
        return EMPTY_STRING
    if isinstance(value, bool):
        return b"\x01" if value else EMPTY_STRING
    if isinstance(value, int):
        if value < 0:
            raise EncodingError(f"cannot encode negative integer {value}")
        return encode_string(uint_to_bytes(value))
    if isinstance(value, (builtins.bytes, bytearray, memoryview)):
        return encode_string(builtins.bytes(value))
    if isinstance(value, str):
        return encode_string(value.encode("utf-8"))
    if isinstance(value, (list, tuple)):
        return encode_list_payload(b"".join(encode(item) for item in value))
    if isinstance(value, RLPWriter):
        return value.to_bytes()
    raise EncodingError(
        f"unsupported type for encoding: {type(value).__name__}",
        details={"type": type(value).__name__},
    )
