"""
Privacy-manager public key.

Keys are raw bytes internally and standard base64 strings at the RPC
boundary. Equality is byte-wise.
"""

from __future__ import annotations
import base64
import binascii

from ..runtime.errors import DecodeError, ErrorCode


class PublicKey(bytes):
    """Raw privacy-manager public key (32 bytes for Orion/Tessera keys)."""

    @classmethod
    def from_base64(cls, key: str) -> PublicKey:
        """
        Decode a standard (padded) base64 key.

        Raises:
            DecodeError: if `key` is not a string or not valid base64
        """
        if not isinstance(key, str):
            raise DecodeError(f"public key must be a base64 string, got {type(key).__name__}",
                              code=ErrorCode.INVALID_FIELD)
        try:
            return cls(base64.b64decode(key, validate=True))
        except (binascii.Error, ValueError) as e:
            raise DecodeError(f"invalid base64 public key: {key!r}", code=ErrorCode.INVALID_FIELD, cause=e)

    def to_base64(self) -> str:
        """Encode as a standard padded base64 string."""
        return base64.b64encode(self).decode("ascii")

    def hash_code(self) -> int:
        """
        32-bit signed ordering hash.

        Folds each byte, sign-extended from 8 bits, into an accumulator
        starting at 1 with acc = 31 * acc + byte, wrapping at 32 bits.
        Only used to order participants, never for identity.
        """
        acc = 1
        for b in self:
            acc = (31 * acc + (b - 0x100 if b & 0x80 else b)) & 0xFFFFFFFF
        return acc - 0x100000000 if acc & 0x80000000 else acc

    def __str__(self) -> str:
        return self.to_base64()

    def __repr__(self) -> str:
        return f"PublicKey({self.to_base64()!r})"


def to_public_key(key) -> PublicKey:
    """Coerce raw bytes or a base64 string into a PublicKey."""
    if isinstance(key, PublicKey):
        return key
    if isinstance(key, (bytes, bytearray, memoryview)):
        return PublicKey(bytes(key))
    return PublicKey.from_base64(key)
