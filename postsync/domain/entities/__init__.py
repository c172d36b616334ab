"""Domain entities (business concepts, no persistence or transport)."""

from postsync.domain.entities.post import Identifier, Post, PostDraft
from postsync.domain.entities.user import Address, Company, User

__all__ = ["Address", "Company", "Identifier", "Post", "PostDraft", "User"]
