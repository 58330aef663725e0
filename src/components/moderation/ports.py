"""Moderation component port definitions - protocols for dependencies."""

from collections.abc import Iterable
from typing import Protocol

from src.domain.entities import Profile, RoleSet
from src.ports.clock import ClockPort
from src.ports.repo import PostStorePort


class AuthorLookupPort(Protocol):
    """Profile lookups used to label post authors."""

    def get_profile(self, user_id: str) -> Profile | None:
        ...

    def list_profiles(self, ids: Iterable[str]) -> list[Profile]:
        ...


class RoleLookupPort(Protocol):
    def get_roles(self, user_id: str | None) -> RoleSet:
        ...


class PolicyPort(Protocol):
    def can(
        self,
        roles: Iterable[str] | None,
        action: str,
        subject: str | None = None,
        *,
        actor_id: str | None = None,
    ) -> bool:
        ...


__all__ = ["AuthorLookupPort", "ClockPort", "PolicyPort", "PostStorePort", "RoleLookupPort"]
