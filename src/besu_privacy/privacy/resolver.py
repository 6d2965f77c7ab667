"""
Privacy group resolution.

Derives root privacy group ids locally and issues the priv_* lookups
needed to route a private transaction: group discovery, group creation
and the per-group transaction count.
"""

from __future__ import annotations
import base64
import logging
from typing import Any, Dict, Iterable, List, Optional, Union

from ..codec.hashes import rlp_hash
from ..codec import hexutil
from ..runtime.errors import DecodeError, ErrorCode
from ..transport.base import Transport
from ..types.address import to_checksum_address
from ..types.privacy_group import PrivacyGroup
from ..types.public_key import PublicKey, to_public_key

logger = logging.getLogger(__name__)

KeyLike = Union[PublicKey, bytes, str]


def sort_participants(participants: Iterable[KeyLike]) -> List[PublicKey]:
    """
    Order participants by ascending hash_code().

    Keys are bucketed by their 32-bit hash code, the last key seen wins on
    a collision, and the buckets are emitted in ascending code order. A
    colliding participant is therefore dropped. Other implementations
    derive group ids with the same algorithm, so the collision behaviour
    is kept as is.
    """
    by_code: Dict[int, PublicKey] = {}
    for participant in participants:
        key = to_public_key(participant)
        by_code[key.hash_code()] = key
    return [by_code[code] for code in sorted(by_code)]


def root_privacy_group_id(participants: Iterable[KeyLike]) -> str:
    """Base64 Keccak-256 of the RLP list of sorted participant keys."""
    ordered = sort_participants(participants)
    digest = rlp_hash([bytes(key) for key in ordered])
    return base64.b64encode(digest).decode("ascii")


class Privacy:
    """
    Privacy group resolver bound to a transport.

    Example:
        ```python
        privacy = Privacy(HttpTransport("http://127.0.0.1:8545"))
        group = privacy.find_root_privacy_group([private_from, *private_for])
        nonce = privacy.private_nonce(signer.address(), group)
        ```
    """

    def __init__(self, transport: Transport):
        """
        Initialize the resolver.

        Args:
            transport: JSON-RPC transport to the node
        """
        self.transport = transport

    @staticmethod
    def deterministic_order(participants: Iterable[KeyLike]) -> List[PublicKey]:
        """Canonical participant order used for root group ids."""
        return sort_participants(participants)

    @staticmethod
    def find_root_privacy_group(participants: Iterable[KeyLike]) -> PrivacyGroup:
        """
        Derive the root privacy group of a participant set.

        Purely local: no request is made and nothing is persisted.

        Args:
            participants: Sender and recipient keys, in any order

        Returns:
            PrivacyGroup carrying only the derived id
        """
        return PrivacyGroup(id=root_privacy_group_id(participants))

    def private_nonce_by_participants(self, account: Union[bytes, str],
                                      participants: Iterable[KeyLike]) -> int:
        """Transaction count of `account` in the root group of `participants`."""
        return self.private_nonce(account, self.find_root_privacy_group(participants))

    def private_nonce(self, account: Union[bytes, str], privacy_group: PrivacyGroup) -> int:
        """
        Next transaction sequence number for (account, group).

        Args:
            account: 20-byte address or hex string
            privacy_group: Group whose id scopes the count

        Returns:
            Unsigned 64-bit nonce

        Raises:
            TransportError: on RPC failure
            DecodeError: if the result is not a 64-bit hex quantity
        """
        result = self.transport.call(
            "priv_getTransactionCount", [to_checksum_address(account), privacy_group.id]
        )
        try:
            return hexutil.decode_uint64(result)
        except DecodeError as e:
            raise DecodeError(f"invalid transaction count: {e.message}", field="result",
                              code=ErrorCode.INVALID_FIELD, cause=e)

    def find_privacy_group(self, participants: Iterable[KeyLike]) -> Optional[PrivacyGroup]:
        """
        Look up a privacy group containing exactly these participants.

        Args:
            participants: Member keys

        Returns:
            The first group reported by the node, or None if there is none

        Raises:
            TransportError: on RPC failure
            DecodeError: if the first record lacks privacyGroupId or members
        """
        keys = [to_public_key(p).to_base64() for p in participants]
        result = self.transport.call("priv_findPrivacyGroup", [keys])
        if not result:
            return None
        if not isinstance(result, list):
            raise DecodeError(f"priv_findPrivacyGroup result must be a list, got {type(result).__name__}",
                              field="result", code=ErrorCode.INVALID_FIELD)
        return self._group_from_rpc(result[0])

    def create_privacy_group(self, members: Iterable[KeyLike], name: str,
                             description: Optional[str] = None) -> PrivacyGroup:
        """
        Create a named privacy group on the node.

        Args:
            members: Member keys
            name: Group name
            description: Optional description, sent only when given

        Returns:
            PrivacyGroup with the server-issued id and the given members

        Raises:
            TransportError: on RPC failure (propagated unchanged)
        """
        member_keys = [to_public_key(m) for m in members]
        args: Dict[str, Any] = {
            "addresses": [m.to_base64() for m in member_keys],
            "name": name,
        }
        if description is not None:
            args["description"] = description

        group_id = self.transport.call("priv_createPrivacyGroup", [args])
        if not isinstance(group_id, str):
            raise DecodeError(f"privacy group id must be a string, got {type(group_id).__name__}",
                              field="result", code=ErrorCode.INVALID_FIELD)
        logger.debug("Created privacy group %s (%s) with %d members", group_id, name, len(member_keys))
        return PrivacyGroup(id=group_id, name=name, description=description or "", members=member_keys)

    @staticmethod
    def _group_from_rpc(record: Any) -> PrivacyGroup:
        if not isinstance(record, dict):
            raise DecodeError(f"privacy group must be an object, got {type(record).__name__}",
                              code=ErrorCode.INVALID_FIELD)
        if "privacyGroupId" not in record:
            raise DecodeError.missing("privacyGroupId")
        if "members" not in record:
            raise DecodeError.missing("members")

        members: List[PublicKey] = []
        raw_members = record["members"] or []
        if not isinstance(raw_members, list):
            raise DecodeError(f"members must be a list, got {type(raw_members).__name__}",
                              field="members", code=ErrorCode.INVALID_FIELD)
        for entry in raw_members:
            try:
                members.append(PublicKey.from_base64(entry))
            except DecodeError as e:
                logger.debug("Skipping malformed privacy group member %r: %s", entry, e)

        return PrivacyGroup(
            id=record["privacyGroupId"],
            name=record.get("name") or "",
            description=record.get("description") or "",
            type=record.get("type") or "",
            members=members,
        )
