"""
ETH (Ethereum) signer.

Implements Ethereum-style secp256k1 signatures and Keccak-256 address
derivation.
"""

from typing import Optional, Union

from ..codec.hashes import keccak256
from ..crypto.secp256k1 import Secp256k1KeyPair, Secp256k1PublicKey
from ..types.address import to_checksum_address
from .signer import RecoverableSigner


def eth_hash(public_key_bytes: bytes) -> bytes:
    """
    Compute Ethereum-style public key hash: Keccak-256 truncated to 20 bytes.

    Args:
        public_key_bytes: Uncompressed public key (65 bytes starting with
            0x04, or the 64 bytes without it)

    Returns:
        20-byte Ethereum address
    """
    if len(public_key_bytes) == 65 and public_key_bytes[0] == 0x04:
        public_key_bytes = public_key_bytes[1:]
    elif len(public_key_bytes) == 33:
        public_key_bytes = Secp256k1PublicKey(public_key_bytes).to_bytes()[1:]
    elif len(public_key_bytes) != 64:
        raise ValueError(f"Invalid Ethereum public key length: {len(public_key_bytes)}")

    return keccak256(public_key_bytes)[-20:]


def eth_address(public_key_bytes: bytes) -> str:
    """
    Compute the checksummed Ethereum address string from a public key.

    Args:
        public_key_bytes: Public key bytes

    Returns:
        Ethereum address string (0x prefixed, EIP-55)
    """
    return to_checksum_address(eth_hash(public_key_bytes))


class ETHSigner(RecoverableSigner):
    """ETH signer using an in-memory secp256k1 key."""

    def __init__(self, private_key: Union[Secp256k1KeyPair, bytes, str, None] = None):
        """
        Initialize ETH signer.

        Args:
            private_key: Key pair, 32 raw bytes or hex string; random when omitted
        """
        if isinstance(private_key, Secp256k1KeyPair):
            self.private_key = private_key
        elif isinstance(private_key, str):
            self.private_key = Secp256k1KeyPair.from_hex(private_key)
        else:
            self.private_key = Secp256k1KeyPair(private_key)
        self._address: Optional[bytes] = None

    def get_public_key(self) -> bytes:
        """Get the uncompressed public key bytes."""
        return self.private_key.public_key().to_bytes()

    def address(self) -> bytes:
        """Get the 20-byte account address."""
        if self._address is None:
            self._address = eth_hash(self.get_public_key())
        return self._address

    def checksum_address(self) -> str:
        """Get the EIP-55 account address string."""
        return to_checksum_address(self.address())

    def sign_recoverable(self, digest: bytes) -> bytes:
        """Sign a 32-byte digest, returning r || s || recovery id."""
        return self.private_key.sign_recoverable(digest)
