from fastapi import APIRouter, Depends, status

from src.api.deps import get_current_user, get_moderation, get_optional_user
from src.api.schemas import PostCreatedResponse, PostCreateRequest, PostResponse
from src.components.moderation import ModerationService
from src.domain.entities import Post, User

router = APIRouter()


def _with_authors(posts: list[Post], moderation: ModerationService) -> list[PostResponse]:
    authors = moderation.resolve_authors(posts)
    return [
        PostResponse(
            **post.model_dump(),
            author_label=authors.get(post.author_id, moderation.unknown_author_label),
        )
        for post in posts
    ]


@router.get("", response_model=list[PostResponse])
def list_published(
    moderation: ModerationService = Depends(get_moderation),
) -> list[PostResponse]:
    """Reviewed posts, newest first. Public."""
    return _with_authors(moderation.list_published(), moderation)


@router.post("", response_model=PostCreatedResponse, status_code=status.HTTP_201_CREATED)
def create_post(
    req: PostCreateRequest,
    current_user: User = Depends(get_current_user),
    moderation: ModerationService = Depends(get_moderation),
) -> PostCreatedResponse:
    """Submit a post for review (writer or admin)."""
    post_id = moderation.create_post(current_user.id, req.title, req.content)
    return PostCreatedResponse(id=post_id)


@router.get("/review", response_model=list[PostResponse])
def list_review_queue(
    current_user: User = Depends(get_current_user),
    moderation: ModerationService = Depends(get_moderation),
) -> list[PostResponse]:
    """Posts waiting for review (admin only)."""
    return _with_authors(moderation.list_unreviewed(current_user.id), moderation)


@router.post("/{post_id}/approve", status_code=status.HTTP_204_NO_CONTENT)
def approve_post(
    post_id: str,
    current_user: User = Depends(get_current_user),
    moderation: ModerationService = Depends(get_moderation),
) -> None:
    moderation.approve_post(current_user.id, post_id)


@router.get("/{post_id}", response_model=PostResponse)
def get_post(
    post_id: str,
    current_user: User | None = Depends(get_optional_user),
    moderation: ModerationService = Depends(get_moderation),
) -> PostResponse:
    post = moderation.get_post(current_user.id if current_user else None, post_id)
    return _with_authors([post], moderation)[0]
