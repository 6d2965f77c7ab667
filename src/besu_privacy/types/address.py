"""
Account address and hash helpers.

Addresses are 20 raw bytes internally and EIP-55 checksummed hex strings
at the RPC boundary.
"""

from typing import Union

from ..codec.hashes import keccak256
from ..runtime.errors import DecodeError, ErrorCode, FormatError

ADDRESS_LENGTH = 20
HASH_LENGTH = 32


def _from_hex(value: str) -> bytes:
    if not isinstance(value, str):
        raise DecodeError(f"expected hex string, got {type(value).__name__}", code=ErrorCode.INVALID_FIELD)
    digits = value[2:] if value[:2] in ("0x", "0X") else value
    if len(digits) % 2:
        digits = "0" + digits
    try:
        return bytes.fromhex(digits)
    except ValueError as e:
        raise DecodeError(f"invalid hex string: {value!r}", code=ErrorCode.INVALID_FIELD, cause=e)


def _fit(raw: bytes, length: int) -> bytes:
    # Longer input keeps the rightmost bytes, shorter input is left-padded.
    if len(raw) > length:
        return raw[-length:]
    return raw.rjust(length, b"\x00")


def hex_to_address(value: str) -> bytes:
    """
    Parse a hex address into 20 bytes.

    Args:
        value: Hex string, with or without 0x prefix

    Returns:
        20-byte address, cropped from the left or zero-padded
    """
    return _fit(_from_hex(value), ADDRESS_LENGTH)


def hex_to_hash(value: str) -> bytes:
    """Parse a hex hash into 32 bytes, cropped from the left or zero-padded."""
    return _fit(_from_hex(value), HASH_LENGTH)


def to_checksum_address(address: Union[bytes, str]) -> str:
    """
    Format an address with the EIP-55 mixed-case checksum.

    Args:
        address: 20 raw bytes or a hex string

    Returns:
        0x-prefixed checksummed address
    """
    if isinstance(address, str):
        address = hex_to_address(address)
    if len(address) != ADDRESS_LENGTH:
        raise FormatError(f"address must be {ADDRESS_LENGTH} bytes, got {len(address)}")

    lower = bytes(address).hex()
    digest = keccak256(lower.encode("ascii")).hex()
    checksummed = "".join(
        ch.upper() if ch.isalpha() and int(digest[i], 16) >= 8 else ch
        for i, ch in enumerate(lower)
    )
    return "0x" + checksummed
