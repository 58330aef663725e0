"""Roles component port definitions - protocols for dependencies."""

from collections.abc import Iterable
from datetime import datetime
from typing import Protocol

from src.domain.entities import Profile, RoleType
from src.ports.clock import ClockPort


class RoleRecordStorePort(Protocol):
    """The subset of the profile store that holds role records."""

    def get_profile(self, user_id: str) -> Profile | None:
        ...

    def list_all_profiles(self) -> list[Profile]:
        ...

    def update_profile_roles(
        self, user_id: str, roles: list[RoleType], updated_at: datetime
    ) -> Profile:
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

    def can_manage_roles(self, actor_id: str, roles: Iterable[str], target_user_id: str) -> bool:
        ...


__all__ = ["ClockPort", "PolicyPort", "RoleRecordStorePort"]
