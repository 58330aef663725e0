from collections.abc import Iterable
from datetime import datetime
from typing import Protocol

from src.domain.entities import Credential, Post, Profile, RoleType


class PostStorePort(Protocol):
    def query_posts(self, is_reviewed: bool) -> list[Post]:
        """Posts with the given review flag, newest ``created_at`` first."""
        ...

    def get_post(self, post_id: str) -> Post | None:
        ...

    def insert_post(self, post: Post) -> str:
        ...

    def update_post_review_flag(
        self, post_id: str, is_reviewed: bool, updated_at: datetime
    ) -> None:
        ...


class ProfileStorePort(Protocol):
    def get_profile(self, user_id: str) -> Profile | None:
        ...

    def list_profiles(self, ids: Iterable[str]) -> list[Profile]:
        """Profiles for ``ids``. Unknown ids are simply absent."""
        ...

    def list_all_profiles(self) -> list[Profile]:
        """All profiles, newest ``created_at`` first."""
        ...

    def save_profile(self, profile: Profile) -> Profile:
        ...

    def update_profile_roles(
        self, user_id: str, roles: list[RoleType], updated_at: datetime
    ) -> Profile:
        ...


class CredentialStorePort(Protocol):
    def get_by_email(self, email: str) -> Credential | None:
        ...

    def save(self, credential: Credential) -> None:
        ...
