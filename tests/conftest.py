"""
Shared fixtures for the privacy client test suite.
"""

import pytest

from besu_privacy.signers.eth import ETHSigner
from besu_privacy.types.public_key import PublicKey

from helpers import ScriptedTransport


# Orion/Tessera node keys used across Besu privacy examples
NODE1_KEY = "A1aVtMxLCUHmBVHXoZzzBgPbW/wj5axDpW9X8l91SGo="
NODE2_KEY = "Ko2bVqD+nNlNYL5EE7y3IdOnviftjiizpjRt+HTuFBs="
NODE3_KEY = "k2zXEin4Ip/qBGlRkJejnGWdP9cjkK+DAvKNW31L2C8="

CHAIN_ID = 2018


@pytest.fixture
def node_keys():
    """The three standard node keys as PublicKey values."""
    return [PublicKey.from_base64(k) for k in (NODE1_KEY, NODE2_KEY, NODE3_KEY)]


@pytest.fixture
def eth_signer():
    """Deterministic signer for private key 0x...01."""
    return ETHSigner((1).to_bytes(32, "big"))


@pytest.fixture
def transport():
    """Empty scripted transport; tests fill in `responses`."""
    return ScriptedTransport()
