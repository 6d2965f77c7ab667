"""
Besu Privacy Python Client

Builds, signs and encodes privacy-extended (EEA) transactions and derives
the privacy group identifiers needed to route them.
"""

from .client import EeaClient
from .codec import RLPReader, RLPWriter, decode, encode, keccak256, rlp_hash
from .crypto import Secp256k1KeyPair, recover_address, recover_public_key
from .privacy import Privacy, root_privacy_group_id, sort_participants
from .runtime.errors import *
from .signers import ETHSigner, RecoverableSigner
from .transport import ClientConfig, HttpTransport, Transport
from .tx import (
    PrivateTransactionData,
    SignedPrivateTransaction,
    UnsignedPrivateTransaction,
    decode_private_transaction,
    new_contract_creation,
    new_transaction,
)
from .types import Log, PrivacyGroup, PrivateReceipt, PublicKey, marshal_private_receipt

__version__ = "0.1.0"
__all__ = [
    # Client
    "EeaClient",
    "ClientConfig",
    "HttpTransport",
    "Transport",

    # Privacy groups
    "Privacy",
    "PrivacyGroup",
    "PublicKey",
    "root_privacy_group_id",
    "sort_participants",

    # Transactions
    "PrivateTransactionData",
    "UnsignedPrivateTransaction",
    "SignedPrivateTransaction",
    "new_transaction",
    "new_contract_creation",
    "decode_private_transaction",

    # Receipts
    "Log",
    "PrivateReceipt",
    "marshal_private_receipt",

    # Signing
    "ETHSigner",
    "RecoverableSigner",
    "Secp256k1KeyPair",
    "recover_address",
    "recover_public_key",

    # Codec
    "RLPReader",
    "RLPWriter",
    "decode",
    "encode",
    "keccak256",
    "rlp_hash",

    # Errors
    "ErrorCode",
    "BesuError",
    "TransportError",
    "DecodeError",
    "EncodingError",
    "UnmarshalError",
    "FormatError",
    "SignatureError",
    "error_from_response",
]
