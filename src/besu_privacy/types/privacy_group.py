"""
Privacy group model.
"""

from __future__ import annotations
from typing import List

from pydantic import BaseModel, ConfigDict, Field

from .public_key import PublicKey


class PrivacyGroup(BaseModel):
    """
    A set of participants allowed to see a private transaction.

    Root groups are derived locally and carry only an id; named groups are
    created on or discovered through the node. Member order has no meaning
    for membership.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True, populate_by_name=True)

    id: str = Field(alias="privacyGroupId")
    name: str = ""
    description: str = ""
    type: str = ""
    members: List[PublicKey] = Field(default_factory=list)

    def has_member(self, key: bytes) -> bool:
        """Check membership by key bytes."""
        return any(bytes(member) == bytes(key) for member in self.members)
