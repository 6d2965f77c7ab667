"""
Privacy group resolution.
"""

from .resolver import Privacy, root_privacy_group_id, sort_participants, to_public_key

__all__ = [
    "Privacy",
    "root_privacy_group_id",
    "sort_participants",
    "to_public_key",
]
