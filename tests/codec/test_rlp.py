"""
RLP encoding and decoding tests.

Vectors are the published Ethereum RLP examples.
"""

import pytest

from besu_privacy.codec import RLPReader, RLPWriter, decode, encode, keccak256, rlp_hash
from besu_privacy.runtime.errors import EncodingError, UnmarshalError


LOREM = b"Lorem ipsum dolor sit amet, consectetur adipisicing elit"


class TestEncodeVectors:
    """Known encodings."""

    @pytest.mark.parametrize("value, expected", [
        (b"dog", "83646f67"),
        ([b"cat", b"dog"], "c88363617483646f67"),
        (b"", "80"),
        ([], "c0"),
        (0, "80"),
        (15, "0f"),
        (1024, "820400"),
        ([[], [[]], [[], [[]]]], "c7c0c1c0c3c0c1c0"),
        (b"\x00", "00"),
        (b"\x7f", "7f"),
        (b"\x80", "8180"),
        (None, "80"),
        ("restricted", "8a72657374726963746564"),
    ])
    def test_vector(self, value, expected):
        """Test encode() against a known vector."""
        assert encode(value).hex() == expected

    def test_long_string(self):
        """Test 56-byte strings switch to the long header form."""
        assert len(LOREM) == 56
        assert encode(LOREM) == b"\xb8\x38" + LOREM

    def test_long_list(self):
        """Test list payloads over 55 bytes use the long header form."""
        items = [b"\x01" * 32, b"\x02" * 32]
        encoded = encode(items)
        assert encoded[:2] == b"\xf8\x42"
        assert len(encoded) == 2 + 66

    def test_big_integer(self):
        """Test integers wider than 64 bits."""
        value = 1 << 80
        assert encode(value) == b"\x8b\x01" + b"\x00" * 10

    @pytest.mark.parametrize("value", [-1, 1.5, {"a": 1}, object()])
    def test_unsupported_shape(self, value):
        """Test unsupported values raise EncodingError."""
        with pytest.raises(EncodingError):
            encode(value)


class TestRLPWriter:
    """Typed sequence writer."""

    def test_absent_optional_keeps_position(self):
        """Test an absent recipient still occupies its slot."""
        w = RLPWriter()
        w.uint(1)
        w.optional_fixed_bytes(None, 20)
        w.uint(2)
        assert len(w) == 3
        assert w.to_bytes() == bytes.fromhex("c3018002")

    def test_nested_bytes_list(self):
        """Test a nested list of byte strings."""
        w = RLPWriter()
        w.bytes_list([b"cat", b"dog"])
        assert w.to_bytes() == bytes.fromhex("c9c88363617483646f67")

    def test_empty_bytes_list(self):
        """Test None and empty lists encode identically."""
        a = RLPWriter()
        a.bytes_list(None)
        b = RLPWriter()
        b.bytes_list([])
        assert a.to_bytes() == b.to_bytes() == bytes.fromhex("c1c0")

    def test_uint_range(self):
        """Test uint rejects negatives and overflow."""
        w = RLPWriter()
        w.uint((1 << 64) - 1)
        with pytest.raises(EncodingError):
            w.uint(1 << 64)
        with pytest.raises(EncodingError):
            w.uint(-1)
        with pytest.raises(EncodingError):
            w.uint(True)

    def test_fixed_bytes_length(self):
        """Test fixed-length arrays enforce their length."""
        w = RLPWriter()
        with pytest.raises(EncodingError):
            w.fixed_bytes(b"\x01" * 19, 20)

    def test_big_int_none_is_zero(self):
        """Test a missing big integer encodes as zero."""
        w = RLPWriter()
        w.big_int(None)
        assert w.to_bytes() == bytes.fromhex("c180")

    def test_deterministic(self):
        """Test identical input yields identical bytes."""
        def build():
            w = RLPWriter()
            w.uint(7)
            w.big_int(10 ** 30)
            w.bytes(b"payload")
            w.string("restricted")
            return w.to_bytes()

        assert build() == build()


class TestDecode:
    """Strict decoding."""

    def test_roundtrip_mixed_sequence(self):
        """Test decoding reproduces typed values, absent and empty ones included."""
        w = RLPWriter()
        w.uint(0)
        w.big_int(1 << 70)
        w.optional_fixed_bytes(None, 20)
        w.optional_fixed_bytes(b"\xaa" * 20, 20)
        w.bytes(b"")
        w.bytes_list([b"\x01" * 32, b""])
        w.string("restricted")

        r = RLPReader.from_bytes(w.to_bytes())
        assert r.uint() == 0
        assert r.big_int() == 1 << 70
        assert r.optional_fixed_bytes(20) is None
        assert r.optional_fixed_bytes(20) == b"\xaa" * 20
        assert r.bytes() == b""
        assert r.bytes_list() == [b"\x01" * 32, b""]
        assert r.string() == "restricted"
        r.finish()

    def test_decode_nested(self):
        """Test generic decode of nested lists."""
        assert decode(bytes.fromhex("c7c0c1c0c3c0c1c0")) == [[], [[]], [[], [[]]]]

    @pytest.mark.parametrize("hex_input, reason", [
        ("8100", "single byte wrapped in string header"),
        ("b800", "long form for short string"),
        ("83646f", "truncated string"),
        ("c883636174", "truncated list"),
        ("8080", "trailing bytes"),
        ("b90000", "leading zero in size"),
        ("", "empty input"),
    ])
    def test_rejects_non_canonical(self, hex_input, reason):
        """Test malformed input raises UnmarshalError."""
        with pytest.raises(UnmarshalError):
            decode(bytes.fromhex(hex_input))

    def test_integer_leading_zero(self):
        """Test integers with leading zero bytes are rejected."""
        r = RLPReader.from_bytes(bytes.fromhex("c3820001"))
        with pytest.raises(UnmarshalError):
            r.uint()

    def test_uint64_overflow(self):
        """Test uint rejects values wider than 64 bits."""
        r = RLPReader.from_bytes(encode([1 << 64]))
        with pytest.raises(UnmarshalError):
            r.uint()

    def test_too_few_and_too_many(self):
        """Test element count checks."""
        r = RLPReader.from_bytes(encode([1, 2]))
        r.uint()
        with pytest.raises(UnmarshalError):
            r.finish()
        r.uint()
        with pytest.raises(UnmarshalError):
            r.uint()

    def test_top_level_string_rejected(self):
        """Test RLPReader requires a list."""
        with pytest.raises(UnmarshalError):
            RLPReader.from_bytes(b"\x83dog")


class TestHashes:
    """Keccak-256 digests."""

    def test_keccak_empty(self):
        """Test Keccak-256 of the empty string (not SHA3-256)."""
        assert keccak256(b"").hex() == "c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470"

    def test_rlp_hash_empty_list(self):
        """Test the empty-list digest used as the empty uncle hash."""
        assert rlp_hash([]).hex() == "1dcc4de8dec75d7aab85b567b6ccd41ad312451b948a7413f0a142fd40d49347"

    def test_rlp_hash_empty_string(self):
        """Test the empty-string digest used as the empty trie root."""
        assert rlp_hash(b"").hex() == "56e81f171bcc55a6ff8345e692c0f86e5b48e01b996cadc001622fb5e363b421"
