"""Post domain entity.

A post is owned by a user (owner_id) and identified by an id the remote
service assigns on creation. Instances are immutable so a cached copy can
never be modified in place; a new value always replaces the old one.
"""

from dataclasses import dataclass, replace
from typing import Any

from postsync.domain.exceptions import InvalidArgumentException

Identifier = int


def is_valid_identifier(value: Any) -> bool:
    """Return True if value is a positive integer (bool excluded)."""
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def require_identifier(value: Any, name: str) -> int:
    """Return value if it is a valid identifier, else raise InvalidArgumentException.

    Args:
        value: Candidate identifier.
        name: Argument name for the error message.

    Returns:
        The identifier, unchanged.
    """
    if not is_valid_identifier(value):
        raise InvalidArgumentException(
            f"{name} must be a positive integer, got: {value!r}", argument=name
        )
    return value


@dataclass(frozen=True)
class PostDraft:
    """Post content before the remote service assigns an id."""

    owner_id: Identifier
    title: str
    body: str

    def to_payload(self) -> dict[str, Any]:
        """Wire payload (camelCase userId, as the remote expects)."""
        return {"userId": self.owner_id, "title": self.title, "body": self.body}


@dataclass(frozen=True)
class Post:
    """Domain entity for a post.

    id is immutable once assigned; owner_id may change via update.
    """

    id: Identifier
    owner_id: Identifier
    title: str
    body: str

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> "Post":
        """Build a Post from the remote wire shape ({id, userId, title, body}).

        Raises:
            KeyError: If a required field is missing.
        """
        return cls(
            id=int(data["id"]),
            owner_id=int(data["userId"]),
            title=str(data["title"]),
            body=str(data["body"]),
        )

    def to_payload(self) -> dict[str, Any]:
        """Wire payload ({id, userId, title, body})."""
        return {
            "id": self.id,
            "userId": self.owner_id,
            "title": self.title,
            "body": self.body,
        }

    def draft(self) -> PostDraft:
        """Return the content of this post without its id."""
        return PostDraft(owner_id=self.owner_id, title=self.title, body=self.body)

    def with_changes(self, **changes: Any) -> "Post":
        """Return a copy with the given fields replaced. id cannot change."""
        if "id" in changes and changes["id"] != self.id:
            raise InvalidArgumentException("Post id is immutable", argument="id")
        return replace(self, **changes)

    def belongs_to(self, owner_id: Identifier) -> bool:
        """Return whether this post is owned by owner_id."""
        return self.owner_id == owner_id
