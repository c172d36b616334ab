"""Post API schemas (JSONPlaceholder wire shape: id, userId, title, body)."""

from pydantic import BaseModel, ConfigDict, Field

from postsync.domain.entities.post import Post, PostDraft


class PostCreateRequest(BaseModel):
    """Request body for POST /posts."""

    model_config = ConfigDict(populate_by_name=True)

    owner_id: int = Field(..., alias="userId", gt=0)
    title: str
    body: str

    def to_draft(self) -> PostDraft:
        return PostDraft(owner_id=self.owner_id, title=self.title, body=self.body)


class PostUpdateRequest(BaseModel):
    """Request body for PUT /posts/{id}. Fields left out keep their stored value."""

    model_config = ConfigDict(populate_by_name=True)

    owner_id: int | None = Field(default=None, alias="userId", gt=0)
    title: str | None = None
    body: str | None = None

    def changes(self) -> dict[str, object]:
        """Return the fields that were provided, keyed by Post attribute name."""
        return self.model_dump(exclude_none=True, exclude_unset=True)


class PostResponse(BaseModel):
    """Post as returned by the service."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    owner_id: int = Field(..., alias="userId")
    title: str
    body: str

    @classmethod
    def from_post(cls, post: Post) -> "PostResponse":
        return cls(id=post.id, owner_id=post.owner_id, title=post.title, body=post.body)
