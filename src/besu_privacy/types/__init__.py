"""
Value types shared across the privacy client.
"""

from .address import hex_to_address, hex_to_hash, to_checksum_address
from .privacy_group import PrivacyGroup
from .private_receipt import Log, PrivateReceipt, marshal_private_receipt
from .public_key import PublicKey, to_public_key

__all__ = [
    "Log",
    "PrivacyGroup",
    "PrivateReceipt",
    "PublicKey",
    "hex_to_address",
    "hex_to_hash",
    "marshal_private_receipt",
    "to_checksum_address",
    "to_public_key",
]
