"""
SECP256K1 cryptographic operations.

Provides Ethereum-style recoverable ECDSA signatures over 32-byte digests,
backed by coincurve (libsecp256k1).
"""

from __future__ import annotations
from typing import Optional

import coincurve

from ..codec.hashes import keccak256
from ..runtime.errors import ErrorCode, FormatError, SignatureError

SIGNATURE_LENGTH = 65
DIGEST_LENGTH = 32


class Secp256k1PublicKey:
    """SECP256K1 public key."""

    def __init__(self, public_key_bytes: bytes):
        """
        Initialize public key.

        Args:
            public_key_bytes: Public key bytes (33 or 65 bytes)
        """
        try:
            self._key = coincurve.PublicKey(bytes(public_key_bytes))
        except ValueError as e:
            raise SignatureError("invalid secp256k1 public key", ErrorCode.INVALID_KEY, cause=e)

    def to_bytes(self, compressed: bool = False) -> bytes:
        """Get public key as bytes, uncompressed (65 bytes) by default."""
        return self._key.format(compressed=compressed)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Secp256k1PublicKey):
            return NotImplemented
        return self.to_bytes() == other.to_bytes()

    def __hash__(self) -> int:
        return hash(self.to_bytes())

    def __repr__(self) -> str:
        return f"Secp256k1PublicKey({self.to_bytes(compressed=True).hex()})"


class Secp256k1KeyPair:
    """
    SECP256K1 key pair producing recoverable signatures.

    The private key never leaves this object except through to_bytes().
    """

    def __init__(self, private_key_bytes: Optional[bytes] = None):
        """
        Initialize key pair.

        Args:
            private_key_bytes: 32-byte private key; a random key when omitted

        Raises:
            SignatureError: if the key is not a valid secp256k1 scalar
        """
        if private_key_bytes is None:
            self._private_key = coincurve.PrivateKey()
            return
        if len(private_key_bytes) != 32:
            raise SignatureError(
                f"Private key must be 32 bytes, got {len(private_key_bytes)}", ErrorCode.INVALID_KEY
            )
        try:
            self._private_key = coincurve.PrivateKey(bytes(private_key_bytes))
        except ValueError as e:
            raise SignatureError("invalid secp256k1 private key", ErrorCode.INVALID_KEY, cause=e)

    @classmethod
    def generate(cls) -> Secp256k1KeyPair:
        """Generate a new random key pair."""
        return cls()

    @classmethod
    def from_hex(cls, private_key_hex: str) -> Secp256k1KeyPair:
        """Create key pair from private key hex string (0x prefix optional)."""
        if private_key_hex[:2] in ("0x", "0X"):
            private_key_hex = private_key_hex[2:]
        try:
            private_key_bytes = bytes.fromhex(private_key_hex)
        except ValueError as e:
            raise SignatureError("invalid private key hex string", ErrorCode.INVALID_KEY, cause=e)
        return cls(private_key_bytes)

    def sign_recoverable(self, digest: bytes) -> bytes:
        """
        Sign a 32-byte digest.

        Args:
            digest: Message digest (not re-hashed)

        Returns:
            65 bytes: r (32) || s (32) || recovery id (1)
        """
        if len(digest) != DIGEST_LENGTH:
            raise SignatureError(f"digest must be {DIGEST_LENGTH} bytes, got {len(digest)}")
        try:
            return self._private_key.sign_recoverable(bytes(digest), hasher=None)
        except Exception as e:
            raise SignatureError("secp256k1 signing failed", cause=e)

    def public_key(self) -> Secp256k1PublicKey:
        """Get the public key."""
        return Secp256k1PublicKey(self._private_key.public_key.format(compressed=False))

    def to_bytes(self) -> bytes:
        """Get private key as bytes."""
        return self._private_key.secret

    def to_hex(self) -> str:
        """Get private key as hex string."""
        return self.to_bytes().hex()

    def __repr__(self) -> str:
        return f"Secp256k1KeyPair(public={self.public_key().to_bytes(compressed=True).hex()[:16]}...)"


def recover_public_key(digest: bytes, signature: bytes) -> Secp256k1PublicKey:
    """
    Recover the signer's public key from a recoverable signature.

    Args:
        digest: 32-byte digest that was signed
        signature: 65 bytes r || s || recovery id (0-3)

    Raises:
        FormatError: if the signature is not 65 bytes
        SignatureError: if no public key can be recovered
    """
    if len(signature) != SIGNATURE_LENGTH:
        raise FormatError(
            f"wrong size for signature: got {len(signature)}, want {SIGNATURE_LENGTH}",
            ErrorCode.INVALID_SIGNATURE_LENGTH,
        )
    try:
        key = coincurve.PublicKey.from_signature_and_message(bytes(signature), bytes(digest), hasher=None)
    except Exception as e:
        raise SignatureError("public key recovery failed", ErrorCode.RECOVERY_FAILED, cause=e)
    return Secp256k1PublicKey(key.format(compressed=False))


def recover_address(digest: bytes, signature: bytes) -> bytes:
    """
    Recover the 20-byte account address that produced `signature`.

    The address is the last 20 bytes of the Keccak-256 of the 64-byte
    uncompressed public key.

    Raises:
        FormatError: if the signature is not 65 bytes
        SignatureError: if no public key can be recovered
    """
    public_key = recover_public_key(digest, signature)
    return keccak256(public_key.to_bytes()[1:])[-20:]


__all__ = [
    "SIGNATURE_LENGTH",
    "Secp256k1KeyPair",
    "Secp256k1PublicKey",
    "recover_address",
    "recover_public_key",
]
