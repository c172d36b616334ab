"""Post draft validator (title, body, owner).

Used by PostsService before a create or update is issued. The executors do
not validate content; they only validate identifiers used in cache keys.
"""

from postsync.core.constants import (
    BODY_MAX_LENGTH,
    BODY_MIN_LENGTH,
    TITLE_MAX_LENGTH,
    TITLE_MIN_LENGTH,
)
from postsync.domain.entities.post import PostDraft, is_valid_identifier
from postsync.domain.exceptions import ValidationException


def _length_errors(value: str, label: str, minimum: int, maximum: int) -> list[str]:
    text = (value or "").strip()
    if not text:
        return [f"{label} is required"]
    if len(text) < minimum:
        return [f"{label} must be at least {minimum} characters long"]
    if len(text) > maximum:
        return [f"{label} must be less than {maximum} characters"]
    return []


def validate_post_draft(draft: PostDraft) -> list[str]:
    """Return every validation error for draft (empty list when valid).

    Rules: title 3-100 characters, body 10-1000 characters (both measured
    after trimming), owner_id a positive integer.
    """
    errors = _length_errors(draft.title, "Title", TITLE_MIN_LENGTH, TITLE_MAX_LENGTH)
    errors += _length_errors(draft.body, "Content", BODY_MIN_LENGTH, BODY_MAX_LENGTH)
    if not is_valid_identifier(draft.owner_id):
        errors.append("Valid user ID is required")
    return errors


def validate_post_draft_or_raise(draft: PostDraft) -> None:
    """Raise ValidationException listing every error if draft is invalid."""
    errors = validate_post_draft(draft)
    if not errors:
        return
    field = "title"
    if errors[0].startswith("Content"):
        field = "body"
    elif errors[0].startswith("Valid user"):
        field = "owner_id"
    raise ValidationException(errors[0], field=field, errors=errors)
