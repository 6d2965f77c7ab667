"""
Private transaction construction, signing and encoding tests.
"""

import dataclasses

import pytest

from besu_privacy.codec import RLPReader, keccak256
from besu_privacy.runtime.errors import FormatError, SignatureError, UnmarshalError
from besu_privacy.tx import (
    RESTRICTED,
    SignedPrivateTransaction,
    UnsignedPrivateTransaction,
    decode_private_transaction,
    fold_v,
    new_contract_creation,
    new_transaction,
    participants,
    unfold_v,
)

from conftest import CHAIN_ID
from helpers import FailingSigner, FixedSigner, mk_public_key

KEY_A = mk_public_key(0xA1)
KEY_B = mk_public_key(0xB2)
RECIPIENT = bytes.fromhex("627306090abab3a6e1400e9345bc60c78a8bef57")


@pytest.fixture
def deploy_tx():
    """Contract creation with empty payload."""
    return new_contract_creation(0, None, 3_000_000, None, None, KEY_A, [KEY_B])


class TestConstruction:
    """Unsigned construction."""

    def test_defaults(self, deploy_tx):
        """Test nil value and gas price become zero."""
        assert isinstance(deploy_tx, UnsignedPrivateTransaction)
        assert deploy_tx.value == 0
        assert deploy_tx.gas_price == 0
        assert deploy_tx.payload == b""
        assert deploy_tx.recipient is None
        assert deploy_tx.data.is_contract_creation
        assert deploy_tx.restriction == RESTRICTED

    def test_payload_copied(self):
        """Test later mutation of the caller's buffer has no effect."""
        buf = bytearray(b"\x60\x80")
        tx = new_transaction(1, RECIPIENT, 5, 21000, 1, buf, KEY_A, [KEY_B])
        buf[0] = 0
        assert tx.payload == b"\x60\x80"

    def test_accepts_base64_keys_and_hex_recipient(self):
        """Test key and address conversions."""
        tx = new_transaction(1, "0x" + RECIPIENT.hex(), 0, 21000, 0, b"", KEY_A.to_base64(),
                             [KEY_B.to_base64()])
        assert tx.recipient == RECIPIENT
        assert tx.private_from == KEY_A
        assert tx.private_for == (KEY_B,)

    def test_immutable(self, deploy_tx):
        """Test fields cannot be reassigned."""
        with pytest.raises(dataclasses.FrozenInstanceError):
            deploy_tx.data.nonce = 5

    @pytest.mark.parametrize("kwargs", [
        {"nonce": -1},
        {"nonce": 1 << 64},
        {"gas_limit": 1 << 64},
        {"amount": -5},
        {"gas_price": -1},
        {"to": b"\x01" * 19},
        {"to": "0xzz"},
    ])
    def test_shape_violations(self, kwargs):
        """Test out-of-shape fields raise FormatError."""
        args = dict(nonce=0, to=None, amount=0, gas_limit=21000, gas_price=0, data=b"",
                    private_from=KEY_A, private_for=[KEY_B])
        args.update(kwargs)
        with pytest.raises(FormatError):
            new_transaction(**args)

    def test_big_value(self):
        """Test values wider than 64 bits are kept exactly."""
        tx = new_transaction(0, RECIPIENT, 10 ** 30, 21000, 2 ** 70, b"", KEY_A, [])
        assert tx.value == 10 ** 30
        assert tx.gas_price == 2 ** 70

    def test_participants(self, deploy_tx):
        """Test participants are privateFrom then privateFor."""
        assert participants(deploy_tx) == (KEY_A, KEY_B)


class TestSigningHash:
    """Signing digest."""

    def test_signing_payload_layout(self, deploy_tx):
        """Test the exact bytes hashed for signing."""
        body = (
            b"\x80"                  # nonce
            b"\x80"                  # gas price
            b"\x83\x2d\xc6\xc0"      # gas limit 3000000
            b"\x80"                  # no recipient
            b"\x80"                  # value
            b"\x80"                  # payload
            b"\x82\x07\xe2"          # chain id 2018
            b"\x80\x80"              # placeholders
            + b"\xa0" + bytes(KEY_A)
            + b"\xe1\xa0" + bytes(KEY_B)
            + b"\x8arestricted"
        )
        assert len(body) == 92
        expected = b"\xf8\x5c" + body

        assert deploy_tx.data.signing_payload(CHAIN_ID) == expected
        assert deploy_tx.signing_hash(CHAIN_ID) == keccak256(expected)

    def test_twelve_elements(self, deploy_tx):
        """Test the digest covers twelve elements."""
        assert len(RLPReader.from_bytes(deploy_tx.data.signing_payload(CHAIN_ID))) == 12

    def test_chain_id_changes_digest(self, deploy_tx):
        """Test the chain id is part of the digest."""
        assert deploy_tx.signing_hash(1) != deploy_tx.signing_hash(CHAIN_ID)

    def test_empty_private_for(self):
        """Test an empty recipient list still encodes as a list."""
        tx = new_contract_creation(0, 0, 21000, 0, b"", KEY_A, None)
        reader = RLPReader.from_bytes(tx.data.signing_payload(1))
        for _ in range(10):
            reader.bytes()
        assert reader.bytes_list() == []


class TestSigning:
    """v normalization and signature handling."""

    def test_fold_example(self):
        """Test recovery byte 27 with chain id 2018 folds to 4071."""
        assert fold_v(27, 2018) == 4071
        assert unfold_v(4071, 2018) == 0
        assert unfold_v(4072, 2018) == 1

    def test_fixed_signature(self, deploy_tx):
        """Test r, s and folded v from a known raw signature."""
        signer = FixedSigner(r=1, s=2, recovery_id=0)
        signed = deploy_tx.sign(CHAIN_ID, signer)

        assert isinstance(signed, SignedPrivateTransaction)
        assert (signed.v, signed.r, signed.s) == (4071, 1, 2)
        assert signer.digests == [deploy_tx.signing_hash(CHAIN_ID)]

    def test_recovery_id_one(self, deploy_tx):
        """Test the recovery id offsets v by one."""
        signed = deploy_tx.sign(CHAIN_ID, FixedSigner(recovery_id=1))
        assert signed.v == 4072
        assert signed.recovery_id(CHAIN_ID) == 1

    def test_sign_returns_new_instance(self, deploy_tx):
        """Test signing leaves the unsigned transaction untouched."""
        signed = deploy_tx.sign(CHAIN_ID, FixedSigner())
        assert signed.data is deploy_tx.data
        assert not hasattr(deploy_tx, "v")
        assert signed.unsigned() == deploy_tx

    def test_resign_discards_signature(self, deploy_tx):
        """Test re-signing produces a fresh signed instance."""
        first = deploy_tx.sign(CHAIN_ID, FixedSigner(r=1, s=2))
        second = first.sign(1, FixedSigner(r=3, s=4, recovery_id=1))
        assert (second.v, second.r, second.s) == (28 + 2 + 8, 3, 4)
        assert (first.v, first.r, first.s) == (4071, 1, 2)

    @pytest.mark.parametrize("length", [64, 66, 0])
    def test_wrong_signature_length(self, deploy_tx, length):
        """Test non-65-byte signatures raise FormatError."""
        with pytest.raises(FormatError):
            deploy_tx.sign(CHAIN_ID, FixedSigner(length=length))

    def test_invalid_recovery_id(self, deploy_tx):
        """Test recovery ids above 3 are rejected."""
        with pytest.raises(FormatError):
            deploy_tx.sign(CHAIN_ID, FixedSigner(recovery_id=4))

    def test_signer_failure(self, deploy_tx):
        """Test primitive failures surface as SignatureError."""
        with pytest.raises(SignatureError) as exc_info:
            deploy_tx.sign(CHAIN_ID, FailingSigner())
        assert isinstance(exc_info.value.cause, RuntimeError)

    def test_real_key_recovers_sender(self, deploy_tx, eth_signer):
        """Test a secp256k1 signature recovers to the signer's address."""
        signed = deploy_tx.sign(CHAIN_ID, eth_signer)
        assert signed.v in (4071, 4072)
        assert fold_v(signed.recovery_id(CHAIN_ID) + 27, CHAIN_ID) == signed.v
        assert signed.sender(CHAIN_ID) == eth_signer.address()

    def test_real_key_deterministic_digest(self, eth_signer):
        """Test repeated signing of the same fields recovers the same sender."""
        tx = new_transaction(7, RECIPIENT, 1, 90000, 1000, b"\x01\x02", KEY_A, [KEY_B])
        senders = {tx.sign(CHAIN_ID, eth_signer).sender(CHAIN_ID) for _ in range(3)}
        assert senders == {eth_signer.address()}


class TestWireEncoding:
    """Signed encoding for eea_sendRawTransaction."""

    def test_exact_bytes(self, deploy_tx):
        """Test the 12-field wire layout."""
        signed = deploy_tx.sign(CHAIN_ID, FixedSigner(r=1, s=2))
        body = (
            b"\x80\x80\x83\x2d\xc6\xc0\x80\x80\x80"
            b"\x82\x0f\xe7"          # v 4071
            b"\x01"                  # r
            b"\x02"                  # s
            + b"\xa0" + bytes(KEY_A)
            + b"\xe1\xa0" + bytes(KEY_B)
            + b"\x8arestricted"
        )
        assert signed.encode() == b"\xf8\x5c" + body
        assert signed.to_hex() == "0x" + (b"\xf8\x5c" + body).hex()
        assert signed.hash() == keccak256(signed.encode())

    def test_twelve_top_level_fields(self, eth_signer):
        """Test decoding the encoding yields exactly 12 elements."""
        tx = new_transaction(3, RECIPIENT, 10 ** 20, 50000, 7, b"\xde\xad", KEY_A, [KEY_B, KEY_A])
        signed = tx.sign(CHAIN_ID, eth_signer)
        assert len(RLPReader.from_bytes(signed.encode())) == 12

    def test_decode_roundtrip(self, eth_signer):
        """Test decoding reproduces every field and the signature."""
        tx = new_transaction(3, RECIPIENT, 10 ** 20, 50000, 7, b"\xde\xad", KEY_A, [KEY_B])
        signed = tx.sign(CHAIN_ID, eth_signer)

        decoded = decode_private_transaction(signed.to_hex())
        assert decoded == signed
        assert decoded.sender(CHAIN_ID) == eth_signer.address()

    def test_decode_contract_creation(self, deploy_tx):
        """Test an empty recipient decodes as None."""
        signed = deploy_tx.sign(CHAIN_ID, FixedSigner())
        assert decode_private_transaction(signed.encode()).recipient is None

    def test_decode_wrong_field_count(self):
        """Test lists other than 12 elements raise FormatError."""
        from besu_privacy.codec import encode
        with pytest.raises(FormatError):
            decode_private_transaction(encode([0] * 11))

    def test_decode_malformed(self):
        """Test malformed RLP raises UnmarshalError."""
        with pytest.raises(UnmarshalError):
            decode_private_transaction(b"\xf8\x5c\x80")
