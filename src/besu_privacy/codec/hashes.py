"""
Hash Functions

Keccak-256 as used by Ethereum-family nodes. This is the original Keccak
submission padding, not the standardized SHA3-256, so hashlib.sha3_256
gives different digests and must not be substituted.
"""

from typing import Any

from Crypto.Hash import keccak

from .writer import encode


def keccak256(data: bytes) -> bytes:
    """
    Compute Keccak-256 hash.

    Args:
        data: Input data to hash

    Returns:
        32-byte Keccak-256 digest
    """
    return keccak.new(digest_bits=256, data=bytes(data)).digest()


def rlp_hash(value: Any) -> bytes:
    """
    Keccak-256 of the canonical RLP encoding of `value`.

    Args:
        value: Any shape accepted by codec.encode()

    Returns:
        32-byte digest
    """
    return keccak256(encode(value))
