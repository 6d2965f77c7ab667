"""
Base signer interface.

A signer is an opaque signing capability: private transactions only ever
ask it for a recoverable signature over a digest and for its address.
"""

from __future__ import annotations
from abc import ABC, abstractmethod


class RecoverableSigner(ABC):
    """
    Signing capability producing Ethereum-style recoverable signatures.

    Implementations may hold a key in memory, delegate to a hardware
    module or call a remote wallet.
    """

    @abstractmethod
    def sign_recoverable(self, digest: bytes) -> bytes:
        """
        Sign a digest.

        Args:
            digest: 32-byte hash to sign

        Returns:
            65 bytes: r (32) || s (32) || recovery id (1, value 0-3)
        """
        pass

    @abstractmethod
    def address(self) -> bytes:
        """
        Get the 20-byte account address of the signing key.

        Returns:
            Account address
        """
        pass
