"""
RLP Reader

Strict decoder for the recursive-length-prefix encoding. Rejects every
non-canonical form the node would reject: oversized length headers,
single bytes wrapped in a string header, integers with leading zeros and
trailing input.
"""

import builtins
from typing import List, Optional, Tuple, Union

from ..runtime.errors import UnmarshalError

Item = Union[builtins.bytes, List["Item"]]


def _read_size(data: builtins.bytes, offset: int, size_len: int) -> int:
    if offset + size_len > len(data):
        raise UnmarshalError("unexpected end of input reading size")
    size_bytes = data[offset:offset + size_len]
    if size_bytes[0] == 0:
        raise UnmarshalError("non-canonical size information (leading zero)")
    size = int.from_bytes(size_bytes, "big")
    if size < 56:
        raise UnmarshalError("non-canonical size information (should use short form)")
    return size


def _read_header(data: builtins.bytes, offset: int) -> Tuple[bool, int, int]:
    """
    Parse the header of the item at `offset`.

    Returns:
        Tuple of (is_list, payload_start, payload_length)
    """
    if offset >= len(data):
        raise UnmarshalError("unexpected end of input")
    prefix = data[offset]

    if prefix < 0x80:
        is_list, start, length = False, offset, 1
    elif prefix <= 0xB7:
        start, length = offset + 1, prefix - 0x80
        if length == 1 and start < len(data) and data[start] < 0x80:
            raise UnmarshalError("non-canonical size information (single byte below 128 must be self-encoded)")
        is_list = False
    elif prefix <= 0xBF:
        size_len = prefix - 0xB7
        is_list, start, length = False, offset + 1 + size_len, _read_size(data, offset + 1, size_len)
    elif prefix <= 0xF7:
        is_list, start, length = True, offset + 1, prefix - 0xC0
    else:
        size_len = prefix - 0xF7
        is_list, start, length = True, offset + 1 + size_len, _read_size(data, offset + 1, size_len)

    if start + length > len(data):
        raise UnmarshalError(
            "value size exceeds available input",
            details={"offset": offset, "length": length, "available": len(data) - start},
        )
    return is_list, start, length


def _decode_item(data: builtins.bytes, offset: int) -> Tuple[Item, int]:
    is_list, start, length = _read_header(data, offset)
    end = start + length
    if not is_list:
        return builtins.bytes(data[start:end]), end

    items: List[Item] = []
    pos = start
    while pos < end:
        item, pos = _decode_item(data, pos)
        if pos > end:
            raise UnmarshalError("list element exceeds list bounds")
        items.append(item)
    return items, end


def decode(data: builtins.bytes) -> Item:
    """
    Decode a single RLP item.

    Args:
        data: Complete encoding of exactly one item

    Returns:
        bytes for a string item, list (of bytes / lists) for a list item

    Raises:
        UnmarshalError: on malformed, non-canonical or trailing input
    """
    data = builtins.bytes(data)
    item, end = _decode_item(data, 0)
    if end != len(data):
        raise UnmarshalError(
            "input contains more than one value",
            details={"consumed": end, "length": len(data)},
        )
    return item


class RLPReader:
    """
    Sequential reader over the elements of a decoded RLP list.

    Mirrors RLPWriter: each typed read consumes one element.
    """

    def __init__(self, items: List[Item]):
        """
        Initialize reader with decoded list elements.

        Args:
            items: Elements of a decoded list
        """
        self._items = items
        self._off = 0

    @classmethod
    def from_bytes(cls, data: builtins.bytes) -> "RLPReader":
        """Decode `data`, which must hold one RLP list."""
        item = decode(data)
        if not isinstance(item, list):
            raise UnmarshalError("expected list, got string")
        return cls(item)

    @property
    def eof(self) -> bool:
        """True when every element has been consumed."""
        return self._off >= len(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def _next(self) -> Item:
        if self.eof:
            raise UnmarshalError("too few elements", details={"index": self._off})
        item = self._items[self._off]
        self._off += 1
        return item

    def bytes(self) -> builtins.bytes:
        """Read a byte string element."""
        item = self._next()
        if isinstance(item, list):
            raise UnmarshalError("expected string, got list", details={"index": self._off - 1})
        return item

    def big_int(self) -> int:
        """Read an arbitrary-precision non-negative integer."""
        raw = self.bytes()
        if raw and raw[0] == 0:
            raise UnmarshalError("non-canonical integer (leading zero bytes)", details={"index": self._off - 1})
        return int.from_bytes(raw, "big")

    def uint(self, bits: int = 64) -> int:
        """Read an unsigned integer of at most `bits` bits."""
        value = self.big_int()
        if value.bit_length() > bits:
            raise UnmarshalError(f"integer too large for uint{bits}", details={"index": self._off - 1})
        return value

    def fixed_bytes(self, length: int) -> builtins.bytes:
        """Read a byte array of exactly `length` bytes."""
        raw = self.bytes()
        if len(raw) != length:
            raise UnmarshalError(
                f"expected {length} bytes, got {len(raw)}", details={"index": self._off - 1}
            )
        return raw

    def optional_fixed_bytes(self, length: int) -> Optional[builtins.bytes]:
        """Read a fixed-length byte array; the empty marker yields None."""
        raw = self.bytes()
        if not raw:
            return None
        if len(raw) != length:
            raise UnmarshalError(
                f"expected {length} bytes, got {len(raw)}", details={"index": self._off - 1}
            )
        return raw

    def string(self) -> str:
        """Read a UTF-8 text element."""
        raw = self.bytes()
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise UnmarshalError("invalid UTF-8 string", cause=e)

    def list(self) -> "RLPReader":
        """Read a nested list element and return a reader over it."""
        item = self._next()
        if not isinstance(item, list):
            raise UnmarshalError("expected list, got string", details={"index": self._off - 1})
        return RLPReader(item)

    def bytes_list(self) -> List[builtins.bytes]:
        """Read a nested list of byte strings."""
        nested = self.list()
        values = []
        while not nested.eof:
            values.append(nested.bytes())
        return values

    def finish(self) -> None:
        """Ensure every element was consumed."""
        if not self.eof:
            raise UnmarshalError(
                "input list has too many elements",
                details={"consumed": self._off, "length": len(self._items)},
            )
