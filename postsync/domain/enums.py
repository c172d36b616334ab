"""Domain enumerations for postsync.

Enums represent fixed sets of domain values (e.g. mutation kind).
"""

from enum import Enum


class MutationKind(str, Enum):
    """Kind of write issued against the posts resource.

    Together with a target it identifies one logical mutation; at most one
    mutation per (kind, target) pair may be in flight.
    """

    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
