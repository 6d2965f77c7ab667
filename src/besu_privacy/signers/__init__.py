"""
Signing capabilities for private transactions.
"""

from .eth import ETHSigner, eth_address, eth_hash
from .signer import RecoverableSigner

__all__ = [
    "ETHSigner",
    "RecoverableSigner",
    "eth_address",
    "eth_hash",
]
