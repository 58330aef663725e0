import logging
from collections.abc import Iterable

from src.components.moderation.ports import (
    AuthorLookupPort,
    ClockPort,
    PolicyPort,
    PostStorePort,
    RoleLookupPort,
)
from src.domain.entities import Post
from src.domain.errors import CollaboratorUnavailable, InvalidInput, NotFound, Unauthorized
from src.domain.state import approve
from src.rules.models import Rules

logger = logging.getLogger(__name__)


def _newest_first(posts: Iterable[Post]) -> list[Post]:
    # sorted() is stable, so equal created_at keeps the store's insertion order
    return sorted(posts, key=lambda p: p.created_at, reverse=True)


class ModerationService:
    def __init__(
        self,
        posts: PostStorePort,
        profiles: AuthorLookupPort,
        roles: RoleLookupPort,
        policy: PolicyPort,
        clock: ClockPort,
        rules: Rules,
    ):
        self.posts = posts
        self.profiles = profiles
        self.roles = roles
        self.policy = policy
        self.clock = clock
        self.rules = rules

    @property
    def unknown_author_label(self) -> str:
        return self.rules.authors.unknown_label

    def create_post(self, author_id: str, title: str, content: str) -> str:
        if not self.policy.can(self.roles.get_roles(author_id), "create_post"):
            raise Unauthorized("User not allowed to create posts")

        title = title or ""
        limits = self.rules.content.title
        if not title.strip():
            raise InvalidInput("Title is required", field="title")
        if len(title) < limits.min or len(title) > limits.max:
            raise InvalidInput(
                f"Title must be between {limits.min} and {limits.max} characters",
                field="title",
            )

        now = self.clock.now_utc()
        post = Post(
            title=title,
            content=content or "",
            author_id=author_id,
            is_reviewed=False,
            created_at=now,
            updated_at=now,
        )
        post_id = self.posts.insert_post(post)
        logger.info(f"Post {post_id} created by {author_id}, awaiting review")
        return post_id

    def list_unreviewed(self, caller_id: str) -> list[Post]:
        if not self.policy.can(self.roles.get_roles(caller_id), "list_unreviewed_posts"):
            raise Unauthorized("User not allowed to view the review queue")
        return _newest_first(p for p in self.posts.query_posts(False) if not p.is_reviewed)

    def approve_post(self, caller_id: str, post_id: str) -> None:
        """Mark a post as reviewed. Approving twice is a successful no-op."""
        if not self.policy.can(self.roles.get_roles(caller_id), "approve_post"):
            raise Unauthorized("User not allowed to approve posts")

        post = self.posts.get_post(post_id)
        if not post:
            raise NotFound(f"Post {post_id} not found")

        if post.is_reviewed:
            logger.debug(f"Post {post_id} already reviewed; nothing to do")
            return

        approved = approve(post, self.clock.now_utc())
        self.posts.update_post_review_flag(post_id, True, approved.updated_at)
        logger.info(f"Post {post_id} approved by {caller_id}")

    def list_published(self) -> list[Post]:
        return _newest_first(p for p in self.posts.query_posts(True) if p.is_reviewed)

    def get_post(self, caller_id: str | None, post_id: str) -> Post:
        """
        Fetch a single post honouring visibility: reviewed posts are public,
        unreviewed ones exist only for admins.
        """
        post = self.posts.get_post(post_id)
        if post and post.is_reviewed:
            return post
        if post and self.policy.can(self.roles.get_roles(caller_id), "view_unreviewed_post"):
            return post
        raise NotFound(f"Post {post_id} not found")

    def resolve_authors(self, posts: Iterable[Post]) -> dict[str, str]:
        """
        Map each author id to a display label (the author's email).

        Best effort: missing profiles and failed lookups map to the unknown
        author label, and never fail the listing the labels belong to.
        """
        author_ids = list(dict.fromkeys(p.author_id for p in posts))
        if not author_ids:
            return {}

        labels = dict.fromkeys(author_ids, self.unknown_author_label)

        try:
            for profile in self.profiles.list_profiles(author_ids):
                if profile.id in labels and profile.email:
                    labels[profile.id] = profile.email
            return labels
        except CollaboratorUnavailable as e:
            logger.warning(f"Batch author lookup failed, falling back per author: {e}")

        failed = 0
        for author_id in author_ids:
            try:
                profile = self.profiles.get_profile(author_id)
            except CollaboratorUnavailable as e:
                failed += 1
                logger.warning(f"Author lookup failed for {author_id}: {e}")
                continue
            if profile and profile.email:
                labels[author_id] = profile.email

        if failed:
            logger.warning(f"{failed} of {len(author_ids)} author labels degraded")
        return labels
