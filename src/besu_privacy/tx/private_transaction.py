"""
Private transactions.

A private transaction is an Ethereum legacy transaction extended with the
privacy fields privateFrom, privateFor and restriction. It exists in two
immutable states: UnsignedPrivateTransaction, as built by the caller, and
SignedPrivateTransaction, produced by sign(). Only a signed transaction
can be encoded for eea_sendRawTransaction.

Signing digest (RLP list, Keccak-256):
    [nonce, gasPrice, gasLimit, to, value, data, chainId, 0, 0,
     privateFrom, privateFor, restriction]

Wire encoding (RLP list, exactly 12 elements):
    [nonce, gasPrice, gasLimit, to, value, data, v, r, s,
     privateFrom, privateFor, restriction]

with v = (recovery id + 27) + chainId * 2 + 8.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional, Sequence, Tuple, Union

from ..codec.hashes import keccak256
from ..codec.reader import RLPReader
from ..codec.writer import RLPWriter
from ..codec import hexutil
from ..crypto.secp256k1 import SIGNATURE_LENGTH, Secp256k1PublicKey, recover_address, recover_public_key
from ..runtime.errors import BesuError, ErrorCode, FormatError, SignatureError
from ..signers.signer import RecoverableSigner
from ..types.public_key import PublicKey, to_public_key

logger = logging.getLogger(__name__)

RESTRICTED = "restricted"
ADDRESS_LENGTH = 20
WIRE_FIELD_COUNT = 12
LEGACY_V_OFFSET = 27
UINT64_MAX = (1 << 64) - 1


def _check_uint64(name: str, value: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise FormatError(f"{name} must be an int, got {type(value).__name__}")
    if not 0 <= value <= UINT64_MAX:
        raise FormatError(f"{name} out of uint64 range: {value}")


def _check_big(name: str, value: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise FormatError(f"{name} must be an int, got {type(value).__name__}")
    if value < 0:
        raise FormatError(f"{name} must be non-negative, got {value}")


@dataclass(frozen=True)
class PrivateTransactionData:
    """
    Unsigned fields of a private transaction.

    recipient None means contract creation.
    """

    nonce: int
    gas_price: int
    gas_limit: int
    recipient: Optional[bytes]
    value: int
    payload: bytes
    private_from: PublicKey
    private_for: Tuple[PublicKey, ...] = field(default_factory=tuple)
    restriction: str = RESTRICTED

    def __post_init__(self):
        _check_uint64("nonce", self.nonce)
        _check_big("gas_price", self.gas_price)
        _check_uint64("gas_limit", self.gas_limit)
        _check_big("value", self.value)
        if self.recipient is not None and (
            not isinstance(self.recipient, bytes) or len(self.recipient) != ADDRESS_LENGTH
        ):
            raise FormatError(f"recipient must be {ADDRESS_LENGTH} bytes or None")
        if not isinstance(self.payload, bytes):
            raise FormatError(f"payload must be bytes, got {type(self.payload).__name__}")
        if not isinstance(self.private_from, bytes):
            raise FormatError(f"private_from must be bytes, got {type(self.private_from).__name__}")
        if not isinstance(self.private_for, tuple) or not all(isinstance(k, bytes) for k in self.private_for):
            raise FormatError("private_for must be a tuple of keys")
        if not isinstance(self.restriction, str):
            raise FormatError(f"restriction must be str, got {type(self.restriction).__name__}")

    @property
    def is_contract_creation(self) -> bool:
        return self.recipient is None

    def _write_head(self, w: RLPWriter) -> None:
        w.uint(self.nonce)
        w.big_int(self.gas_price)
        w.uint(self.gas_limit)
        w.optional_fixed_bytes(self.recipient, ADDRESS_LENGTH)
        w.big_int(self.value)
        w.bytes(self.payload)

    def _write_privacy(self, w: RLPWriter) -> None:
        w.bytes(self.private_from)
        w.bytes_list(self.private_for)
        w.string(self.restriction)

    def signing_payload(self, chain_id: int) -> bytes:
        """RLP encoding hashed for signing under `chain_id`."""
        _check_big("chain_id", chain_id)
        w = RLPWriter()
        self._write_head(w)
        w.big_int(chain_id)
        # Replay-protection placeholders, always encoded as zero
        w.uint(0)
        w.uint(0)
        self._write_privacy(w)
        return w.to_bytes()

    def signing_hash(self, chain_id: int) -> bytes:
        """Keccak-256 of signing_payload(chain_id)."""
        return keccak256(self.signing_payload(chain_id))


def fold_v(recovery_byte: int, chain_id: int) -> int:
    """
    Fold the chain id into an offset recovery byte.

    Args:
        recovery_byte: Recovery id already offset by 27
        chain_id: Chain id

    Returns:
        recovery_byte + chain_id * 2 + 8
    """
    return recovery_byte + chain_id * 2 + 8


def unfold_v(v: int, chain_id: int) -> int:
    """Inverse of fold_v: the raw recovery id (0-3) behind `v`."""
    recovery_id = v - chain_id * 2 - 8 - LEGACY_V_OFFSET
    if not 0 <= recovery_id <= 3:
        raise FormatError(f"v {v} is not valid for chain id {chain_id}")
    return recovery_id


class _PrivateTransaction:
    """Accessors shared by both transaction states."""

    data: PrivateTransactionData

    @property
    def nonce(self) -> int:
        return self.data.nonce

    @property
    def gas_price(self) -> int:
        return self.data.gas_price

    @property
    def gas_limit(self) -> int:
        return self.data.gas_limit

    @property
    def recipient(self) -> Optional[bytes]:
        return self.data.recipient

    @property
    def value(self) -> int:
        return self.data.value

    @property
    def payload(self) -> bytes:
        return self.data.payload

    @property
    def private_from(self) -> PublicKey:
        return self.data.private_from

    @property
    def private_for(self) -> Tuple[PublicKey, ...]:
        return self.data.private_for

    @property
    def restriction(self) -> str:
        return self.data.restriction

    def signing_hash(self, chain_id: int) -> bytes:
        """
        Digest to sign for `chain_id`.

        Args:
            chain_id: Chain id of the target network

        Returns:
            32-byte Keccak-256 digest
        """
        return self.data.signing_hash(chain_id)

    def sign(self, chain_id: int, signer: RecoverableSigner) -> SignedPrivateTransaction:
        """
        Sign the transaction.

        Returns a new SignedPrivateTransaction; this instance is unchanged.
        Signing an already signed transaction discards its signature.

        Args:
            chain_id: Chain id folded into v
            signer: Signing capability

        Raises:
            SignatureError: if the signer fails
            FormatError: if the signer returns other than 65 bytes
        """
        digest = self.signing_hash(chain_id)
        try:
            sig = signer.sign_recoverable(digest)
        except BesuError:
            raise
        except Exception as e:
            raise SignatureError("signer failed to produce a signature", cause=e)
        signed = with_signature(self.data, sig, chain_id)
        logger.debug("Signed private transaction nonce=%d chain_id=%d v=%d",
                     self.data.nonce, chain_id, signed.v)
        return signed


@dataclass(frozen=True)
class UnsignedPrivateTransaction(_PrivateTransaction):
    """Private transaction under construction; cannot be encoded for sending."""

    data: PrivateTransactionData


@dataclass(frozen=True)
class SignedPrivateTransaction(_PrivateTransaction):
    """Signed private transaction, ready for eea_sendRawTransaction."""

    data: PrivateTransactionData
    v: int
    r: int
    s: int

    def __post_init__(self):
        for name in ("v", "r", "s"):
            _check_big(name, getattr(self, name))

    def unsigned(self) -> UnsignedPrivateTransaction:
        """The unsigned transaction sharing these fields."""
        return UnsignedPrivateTransaction(self.data)

    def encode(self) -> bytes:
        """
        Wire encoding.

        Returns:
            RLP list of the 12 transaction fields
        """
        w = RLPWriter()
        self.data._write_head(w)
        w.big_int(self.v)
        w.big_int(self.r)
        w.big_int(self.s)
        self.data._write_privacy(w)
        return w.to_bytes()

    def to_hex(self) -> str:
        """0x-prefixed wire encoding, as sent to eea_sendRawTransaction."""
        return hexutil.encode_bytes(self.encode())

    def hash(self) -> bytes:
        """Keccak-256 of the wire encoding."""
        return keccak256(self.encode())

    def recovery_id(self, chain_id: int) -> int:
        """Raw recovery id (0-3) for a signature made under `chain_id`."""
        return unfold_v(self.v, chain_id)

    def signature(self, chain_id: int) -> bytes:
        """65-byte r || s || recovery id signature."""
        return (
            self.r.to_bytes(32, "big")
            + self.s.to_bytes(32, "big")
            + bytes([self.recovery_id(chain_id)])
        )

    def public_key(self, chain_id: int) -> Secp256k1PublicKey:
        """Recover the signer's public key."""
        return recover_public_key(self.signing_hash(chain_id), self.signature(chain_id))

    def sender(self, chain_id: int) -> bytes:
        """Recover the 20-byte address of the signer."""
        return recover_address(self.signing_hash(chain_id), self.signature(chain_id))


def with_signature(data: PrivateTransactionData, sig: bytes, chain_id: int) -> SignedPrivateTransaction:
    """
    Attach a raw recoverable signature to transaction fields.

    Args:
        data: Unsigned fields
        sig: 65 bytes r || s || recovery id
        chain_id: Chain id folded into v

    Raises:
        FormatError: if `sig` is not exactly 65 bytes or the recovery id
            is out of range
    """
    if len(sig) != SIGNATURE_LENGTH:
        raise FormatError(
            f"wrong size for signature: got {len(sig)}, want {SIGNATURE_LENGTH}",
            ErrorCode.INVALID_SIGNATURE_LENGTH,
        )
    if sig[64] > 3:
        raise FormatError(f"invalid recovery id {sig[64]}")
    r = int.from_bytes(sig[:32], "big")
    s = int.from_bytes(sig[32:64], "big")
    v = fold_v(sig[64] + LEGACY_V_OFFSET, chain_id)
    return SignedPrivateTransaction(data, v=v, r=r, s=s)


def _recipient_bytes(to: Union[bytes, str, None]) -> Optional[bytes]:
    if to is None:
        return None
    if isinstance(to, str):
        digits = to[2:] if to[:2] in ("0x", "0X") else to
        try:
            to = bytes.fromhex(digits)
        except ValueError as e:
            raise FormatError(f"invalid recipient address: {to!r}", cause=e)
    to = bytes(to)
    if len(to) != ADDRESS_LENGTH:
        raise FormatError(f"recipient must be {ADDRESS_LENGTH} bytes, got {len(to)}")
    return to


def new_transaction(
    nonce: int,
    to: Union[bytes, str, None],
    amount: Optional[int],
    gas_limit: int,
    gas_price: Optional[int],
    data: Optional[bytes],
    private_from: Union[bytes, str],
    private_for: Optional[Iterable[Union[bytes, str]]],
) -> UnsignedPrivateTransaction:
    """
    Build an unsigned private transaction.

    Args:
        nonce: Sequence number in the (account, privacy group) scope
        to: Recipient address; None for contract creation
        amount: Value transferred; None means zero
        gas_limit: Gas limit
        gas_price: Gas price; None means zero
        data: Call data or contract bytecode
        private_from: Sender's privacy-manager key (bytes or base64)
        private_for: Recipients' privacy-manager keys (bytes or base64)

    Raises:
        FormatError: on any field outside its allowed shape
    """
    return UnsignedPrivateTransaction(
        PrivateTransactionData(
            nonce=nonce,
            gas_price=0 if gas_price is None else gas_price,
            gas_limit=gas_limit,
            recipient=_recipient_bytes(to),
            value=0 if amount is None else amount,
            payload=bytes(data) if data else b"",
            private_from=to_public_key(private_from),
            private_for=tuple(to_public_key(k) for k in private_for or ()),
            restriction=RESTRICTED,
        )
    )


def new_contract_creation(
    nonce: int,
    amount: Optional[int],
    gas_limit: int,
    gas_price: Optional[int],
    data: Optional[bytes],
    private_from: Union[bytes, str],
    private_for: Optional[Iterable[Union[bytes, str]]],
) -> UnsignedPrivateTransaction:
    """Build an unsigned private contract-creation transaction."""
    return new_transaction(nonce, None, amount, gas_limit, gas_price, data, private_from, private_for)


def decode_private_transaction(raw: Union[bytes, str]) -> SignedPrivateTransaction:
    """
    Parse a wire-encoded signed private transaction.

    Args:
        raw: RLP bytes, or the 0x-prefixed hex form

    Raises:
        FormatError: if the list does not hold exactly 12 elements
        UnmarshalError: on malformed RLP or field shapes
    """
    if isinstance(raw, str):
        raw = hexutil.decode_bytes(raw)
    reader = RLPReader.from_bytes(raw)
    if len(reader) != WIRE_FIELD_COUNT:
        raise FormatError(
            f"private transaction must have {WIRE_FIELD_COUNT} fields, got {len(reader)}",
            details={"fields": len(reader)},
        )

    nonce = reader.uint()
    gas_price = reader.big_int()
    gas_limit = reader.uint()
    recipient = reader.optional_fixed_bytes(ADDRESS_LENGTH)
    value = reader.big_int()
    payload = reader.bytes()
    v = reader.big_int()
    r = reader.big_int()
    s = reader.big_int()
    private_from = PublicKey(reader.bytes())
    private_for = tuple(PublicKey(k) for k in reader.bytes_list())
    restriction = reader.string()
    reader.finish()

    data = PrivateTransactionData(
        nonce=nonce,
        gas_price=gas_price,
        gas_limit=gas_limit,
        recipient=recipient,
        value=value,
        payload=payload,
        private_from=private_from,
        private_for=private_for,
        restriction=restriction,
    )
    return SignedPrivateTransaction(data, v=v, r=r, s=s)


def participants(tx: Union[UnsignedPrivateTransaction, SignedPrivateTransaction]) -> Sequence[PublicKey]:
    """privateFrom followed by privateFor, the input to root group derivation."""
    return (tx.private_from,) + tx.private_for
