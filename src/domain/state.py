from datetime import datetime
from typing import Literal

from src.domain.entities import Post

ReviewState = Literal["draft", "unreviewed", "reviewed"]


def review_state(post: Post | None) -> ReviewState:
    if post is None:
        return "draft"
    return "reviewed" if post.is_reviewed else "unreviewed"


def can_transition(current: ReviewState, new: ReviewState) -> bool:
    """
    Allowed moves: draft -> unreviewed (creation) and
    unreviewed -> reviewed (approval). Reviewed is terminal.
    """
    if current == new:
        return True

    if current == "draft":
        return new == "unreviewed"

    if current == "unreviewed":
        return new == "reviewed"

    return False


def approve(post: Post, now: datetime) -> Post:
    """
    Return a NEW Post marked as reviewed.
    Approving an already reviewed post returns an unchanged copy.
    """
    if post.is_reviewed:
        return post.model_copy()

    if not can_transition(review_state(post), "reviewed"):
        raise ValueError(f"Invalid transition from {review_state(post)} to reviewed")

    # updated_at never moves backwards, even with a skewed clock
    updated_at = max(now, post.updated_at)
    return post.model_copy(update={"is_reviewed": True, "updated_at": updated_at})
