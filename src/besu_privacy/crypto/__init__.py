"""
Cryptographic primitives for the privacy client.

Provides secp256k1 recoverable signatures and public key recovery.
"""

from .secp256k1 import (
    SIGNATURE_LENGTH,
    Secp256k1KeyPair,
    Secp256k1PublicKey,
    recover_address,
    recover_public_key,
)

__all__ = [
    "SIGNATURE_LENGTH",
    "Secp256k1KeyPair",
    "Secp256k1PublicKey",
    "recover_address",
    "recover_public_key",
]
