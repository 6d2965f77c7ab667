"""
Private transaction construction, signing and encoding.
"""

from .private_transaction import (
    RESTRICTED,
    WIRE_FIELD_COUNT,
    PrivateTransactionData,
    SignedPrivateTransaction,
    UnsignedPrivateTransaction,
    decode_private_transaction,
    fold_v,
    new_contract_creation,
    new_transaction,
    participants,
    unfold_v,
    with_signature,
)

__all__ = [
    "RESTRICTED",
    "WIRE_FIELD_COUNT",
    "PrivateTransactionData",
    "SignedPrivateTransaction",
    "UnsignedPrivateTransaction",
    "decode_private_transaction",
    "fold_v",
    "new_contract_creation",
    "new_transaction",
    "participants",
    "unfold_v",
    "with_signature",
]
