"""
Besu Privacy Error Model

This module provides the error handling framework for the privacy client.
Every failure surfaced by the package is a BesuError subclass carrying an
ErrorCode, a details dictionary and the underlying cause, if any.
"""

from __future__ import annotations
from typing import Optional, Dict, Any
from enum import IntEnum


class ErrorCode(IntEnum):
    """Error codes used across the privacy client."""

    # Success
    OK = 0

    # General errors (1-99)
    UNKNOWN = 1
    INTERNAL = 2

    # Encoding errors (100-199)
    ENCODING_ERROR = 100
    INVALID_JSON = 101
    INVALID_BINARY = 102
    UNMARSHAL_ERROR = 104

    # Network errors (200-299)
    NETWORK_ERROR = 200
    CONNECTION_FAILED = 201
    TIMEOUT = 202
    RPC_ERROR = 205

    # Response decoding errors (300-399)
    DECODE_ERROR = 300
    MISSING_FIELD = 301
    INVALID_FIELD = 302

    # Shape errors (400-499)
    FORMAT_ERROR = 400
    INVALID_SIGNATURE_LENGTH = 401

    # Signing errors (500-599)
    SIGNATURE_ERROR = 500
    INVALID_KEY = 501
    RECOVERY_FAILED = 502


class BesuError(Exception):
    """
    Base class for all privacy client errors.

    Provides structured error information: a code, free-form details and
    the exception that caused it.
    """

    def __init__(self, message: str, code: ErrorCode = ErrorCode.UNKNOWN,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        """
        Initialize a privacy client error.

        Args:
            message: Error message
            code: Error code
            details: Additional error details
            cause: Underlying exception that caused this error
        """
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}
        self.cause = cause

    def __str__(self) -> str:
        """String representation of the error."""
        parts = [f"[{self.code.name}] {self.message}"]
        if self.details:
            parts.append(f"Details: {self.details}")
        if self.cause:
            parts.append(f"Caused by: {self.cause}")
        return " | ".join(parts)

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary representation."""
        result = {
            "code": self.code.value,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        if self.cause:
            result["cause"] = str(self.cause)
        return result


class TransportError(BesuError):
    """Network or JSON-RPC failure. Surfaced unchanged, never retried."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.NETWORK_ERROR,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, code, details, cause)

    @property
    def rpc_code(self) -> Optional[int]:
        """JSON-RPC error code reported by the node, if any."""
        return self.details.get("rpc_code")


class DecodeError(BesuError):
    """Malformed or missing field in an RPC response."""

    def __init__(self, message: str, field: Optional[str] = None,
                 code: ErrorCode = ErrorCode.DECODE_ERROR,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        details = dict(details or {})
        if field is not None:
            details["field"] = field
        super().__init__(message, code, details, cause)
        self.field = field

    @classmethod
    def missing(cls, field: str) -> DecodeError:
        """Error for a required response field that is absent."""
        return cls(f"{field} not found", field=field, code=ErrorCode.MISSING_FIELD)


class EncodingError(BesuError):
    """Value cannot be canonically encoded."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.ENCODING_ERROR,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, code, details, cause)


class UnmarshalError(EncodingError):
    """Canonical input is malformed or non-canonical."""

    def __init__(self, message: str = "Unmarshal error",
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, ErrorCode.UNMARSHAL_ERROR, details, cause)


class FormatError(BesuError):
    """
    Signature length or field-shape violation.

    Fatal: indicates a programming error or a protocol-version mismatch
    with the node, so callers must not retry.
    """

    def __init__(self, message: str, code: ErrorCode = ErrorCode.FORMAT_ERROR,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, code, details, cause)


class SignatureError(BesuError):
    """Signing key or signature primitive failure."""

    def __init__(self, message: str, code: ErrorCode = ErrorCode.SIGNATURE_ERROR,
                 details: Optional[Dict[str, Any]] = None, cause: Optional[Exception] = None):
        super().__init__(message, code, details, cause)


def error_from_response(response: Dict[str, Any]) -> Optional[TransportError]:
    """
    Create a TransportError from a JSON-RPC response.

    Args:
        response: Decoded JSON-RPC response object

    Returns:
        TransportError or None if the response carries no error
    """
    if "error" not in response or response["error"] is None:
        return None

    error_data = response["error"]
    if isinstance(error_data, str):
        return TransportError(error_data, ErrorCode.RPC_ERROR)

    if not isinstance(error_data, dict):
        return TransportError(str(error_data), ErrorCode.RPC_ERROR)

    details: Dict[str, Any] = {}
    if "code" in error_data:
        details["rpc_code"] = error_data["code"]
    if error_data.get("data") is not None:
        details["data"] = error_data["data"]
    return TransportError(error_data.get("message", "Unknown error"), ErrorCode.RPC_ERROR, details)


__all__ = [
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
