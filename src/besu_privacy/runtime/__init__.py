"""Runtime helpers for the Besu privacy client"""

from .errors import (
    BesuError,
    DecodeError,
    EncodingError,
    ErrorCode,
    FormatError,
    SignatureError,
    TransportError,
    UnmarshalError,
    error_from_response,
)

__all__ = [
    "BesuError",
    "DecodeError",
    "EncodingError",
    "ErrorCode",
    "FormatError",
    "SignatureError",
    "TransportError",
    "UnmarshalError",
    "error_from_response",
]
