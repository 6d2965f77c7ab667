"""Shared test helpers."""

from .transport import ScriptedTransport
from .factories import FixedSigner, FailingSigner, mk_public_key

__all__ = ["ScriptedTransport", "FixedSigner", "FailingSigner", "mk_public_key"]
