"""
Hex encoding helpers for JSON-RPC quantities and data.

Follows the node's rules: quantities are 0x-prefixed without leading
zeros, data is 0x-prefixed with an even number of digits.
"""

import re

from ..runtime.errors import DecodeError, EncodingError, ErrorCode

UINT64_MAX = (1 << 64) - 1

_HEX_DIGITS = re.compile(r"[0-9a-fA-F]*")


def encode_bytes(data: bytes) -> str:
    """Encode bytes as 0x-prefixed hex data."""
    return "0x" + bytes(data).hex()


def encode_uint(value: int) -> str:
    """Encode a non-negative integer as a hex quantity."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise EncodingError(f"quantity requires int, got {type(value).__name__}")
    if value < 0:
        raise EncodingError(f"cannot encode negative quantity {value}")
    return hex(value)


def _strip_prefix(value: str, what: str) -> str:
    if not isinstance(value, str):
        raise DecodeError(f"{what} must be a string, got {type(value).__name__}",
                          code=ErrorCode.INVALID_FIELD)
    if not value:
        raise DecodeError(f"empty {what} string", code=ErrorCode.INVALID_FIELD)
    if not (value.startswith("0x") or value.startswith("0X")):
        raise DecodeError(f"{what} string without 0x prefix: {value!r}", code=ErrorCode.INVALID_FIELD)
    digits = value[2:]
    if not _HEX_DIGITS.fullmatch(digits):
        raise DecodeError(f"invalid hex digits in {what} string: {value!r}", code=ErrorCode.INVALID_FIELD)
    return digits


def decode_bytes(value: str) -> bytes:
    """
    Decode 0x-prefixed hex data.

    Raises:
        DecodeError: on a missing prefix, odd length or invalid digit
    """
    digits = _strip_prefix(value, "hex")
    if len(digits) % 2:
        raise DecodeError(f"hex string of odd length: {value!r}", code=ErrorCode.INVALID_FIELD)
    return bytes.fromhex(digits)


def decode_big(value: str) -> int:
    """
    Decode a hex quantity of any size.

    Raises:
        DecodeError: on a missing prefix, empty number, leading zero digit
            or invalid digit
    """
    digits = _strip_prefix(value, "hex quantity")
    if not digits:
        raise DecodeError(f"hex quantity without digits: {value!r}", code=ErrorCode.INVALID_FIELD)
    if len(digits) > 1 and digits[0] == "0":
        raise DecodeError(f"hex quantity with leading zero digits: {value!r}", code=ErrorCode.INVALID_FIELD)
    return int(digits, 16)


def decode_uint64(value: str) -> int:
    """Decode a hex quantity that must fit in 64 bits."""
    result = decode_big(value)
    if result > UINT64_MAX:
        raise DecodeError(f"hex number > 64 bits: {value!r}", code=ErrorCode.INVALID_FIELD)
    return result
