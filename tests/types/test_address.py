"""
Address helper tests.
"""

import pytest

from besu_privacy.runtime.errors import DecodeError, FormatError
from besu_privacy.types.address import hex_to_address, hex_to_hash, to_checksum_address


class TestChecksumAddress:
    """EIP-55 checksums."""

    @pytest.mark.parametrize("address", [
        "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed",
        "0xfB6916095ca1df60bB79Ce92cE3Ea74c37c5d359",
        "0xdbF03B407c01E7cD3CBea99509d93f8DDDC8C6FB",
        "0xD1220A0cf47c7B9Be7A2E6BA89F429762e7b9aDb",
    ])
    def test_eip55_vectors(self, address):
        """Test the published EIP-55 examples."""
        assert to_checksum_address(address.lower()) == address
        assert to_checksum_address(bytes.fromhex(address[2:])) == address

    def test_wrong_length(self):
        """Test non-20-byte input is rejected."""
        with pytest.raises(FormatError):
            to_checksum_address(b"\x01" * 19)


class TestHexParsing:
    """Left-padding and cropping."""

    def test_short_address_padded(self):
        """Test short input is left-padded."""
        assert hex_to_address("0x01") == b"\x00" * 19 + b"\x01"

    def test_long_hash_cropped(self):
        """Test long input keeps the rightmost bytes."""
        assert hex_to_hash("0x" + "ff" + "11" * 32) == b"\x11" * 32

    def test_odd_length(self):
        """Test odd-length input gains a leading zero digit."""
        assert hex_to_address("0x123") == b"\x00" * 18 + b"\x01\x23"

    def test_invalid(self):
        """Test non-hex input raises DecodeError."""
        with pytest.raises(DecodeError):
            hex_to_hash("0xnothex")
