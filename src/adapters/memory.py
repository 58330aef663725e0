"""In-memory collaborator adapters.

Implements the post, profile and credential store ports for tests, local
development and single-process deployments. Records are copied on the way in
and out so callers can never patch stored state directly.
"""

from collections.abc import Iterable
from datetime import datetime

from src.domain.entities import Credential, Post, Profile, RoleType
from src.domain.errors import InvalidInput, NotFound


class InMemoryPostStore:
    def __init__(self) -> None:
        # dict keeps insertion order, which breaks created_at ties
        self._posts: dict[str, Post] = {}

    def query_posts(self, is_reviewed: bool) -> list[Post]:
        matching = [p.model_copy() for p in self._posts.values() if p.is_reviewed == is_reviewed]
        return sorted(matching, key=lambda p: p.created_at, reverse=True)

    def get_post(self, post_id: str) -> Post | None:
        post = self._posts.get(post_id)
        return post.model_copy() if post else None

    def insert_post(self, post: Post) -> str:
        if post.id in self._posts:
            raise InvalidInput(f"Post {post.id} already exists", field="id")
        self._posts[post.id] = post.model_copy()
        return post.id

    def update_post_review_flag(
        self, post_id: str, is_reviewed: bool, updated_at: datetime
    ) -> None:
        post = self._posts.get(post_id)
        if post is None:
            raise NotFound(f"Post {post_id} not found")
        self._posts[post_id] = post.model_copy(
            update={"is_reviewed": is_reviewed, "updated_at": updated_at}
        )


class InMemoryProfileStore:
    def __init__(self) -> None:
        self._profiles: dict[str, Profile] = {}

    def get_profile(self, user_id: str) -> Profile | None:
        profile = self._profiles.get(user_id)
        return profile.model_copy(deep=True) if profile else None

    def list_profiles(self, ids: Iterable[str]) -> list[Profile]:
        return [
            self._profiles[i].model_copy(deep=True)
            for i in dict.fromkeys(ids)
            if i in self._profiles
        ]

    def list_all_profiles(self) -> list[Profile]:
        profiles = [p.model_copy(deep=True) for p in self._profiles.values()]
        return sorted(profiles, key=lambda p: p.created_at, reverse=True)

    def save_profile(self, profile: Profile) -> Profile:
        self._profiles[profile.id] = profile.model_copy(deep=True)
        return profile

    def update_profile_roles(
        self, user_id: str, roles: list[RoleType], updated_at: datetime
    ) -> Profile:
        profile = self._profiles.get(user_id)
        if profile is None:
            raise NotFound(f"Profile {user_id} not found")
        updated = profile.model_copy(update={"roles": list(roles), "updated_at": updated_at})
        self._profiles[user_id] = updated
        return updated.model_copy(deep=True)


class InMemoryCredentialStore:
    def __init__(self) -> None:
        self._by_email: dict[str, Credential] = {}

    def get_by_email(self, email: str) -> Credential | None:
        return self._by_email.get(email.lower())

    def save(self, credential: Credential) -> None:
        self._by_email[credential.email.lower()] = credential
