"""
Canonical Codec Module

Recursive-length-prefix (RLP) encoding and Keccak-256 hashing with
byte-for-byte parity with the node's encoder.

Key components:
- writer.py: RLPWriter sequence encoder and generic encode()
- reader.py: strict RLPReader and generic decode()
- hashes.py: keccak256 and rlp_hash
- hexutil.py: JSON-RPC hex quantity and data helpers
"""

from .hashes import keccak256, rlp_hash
from .reader import RLPReader, decode
from .writer import EMPTY_LIST, EMPTY_STRING, RLPWriter, encode

__all__ = [
    "EMPTY_LIST",
    "EMPTY_STRING",
    "RLPReader",
    "RLPWriter",
    "decode",
    "encode",
    "keccak256",
    "rlp_hash",
]
