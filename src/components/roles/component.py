import logging
from collections.abc import Iterable

from src.components.roles.ports import ClockPort, PolicyPort, RoleRecordStorePort
from src.domain.entities import (
    BASE_ROLE,
    DEFAULT_ROLES,
    ROLE_ORDER,
    Profile,
    RoleSet,
    canonical_roles,
)
from src.domain.errors import (
    CollaboratorUnavailable,
    InvalidInput,
    NotFound,
    RoleUpdateUnconfirmed,
    Unauthorized,
)

logger = logging.getLogger(__name__)


class RoleService:
    """Role store: the source of truth for every authorization check."""

    def __init__(self, profiles: RoleRecordStorePort, policy: PolicyPort, clock: ClockPort):
        self.profiles = profiles
        self.policy = policy
        self.clock = clock

    def get_roles(self, user_id: str | None) -> RoleSet:
        """Roles for ``user_id``; no profile (or no user) means just ``user``."""
        if not user_id:
            return DEFAULT_ROLES
        profile = self.profiles.get_profile(user_id)
        if not profile:
            return DEFAULT_ROLES
        return profile.role_set

    def set_roles(self, caller_id: str, target_user_id: str, new_roles: Iterable[str]) -> Profile:
        caller_roles = self.get_roles(caller_id)
        if not self.policy.can_manage_roles(caller_id, caller_roles, target_user_id):
            raise Unauthorized("User not allowed to change roles for this account")

        requested = list(new_roles)
        unknown = sorted(set(requested) - set(ROLE_ORDER))
        if unknown:
            raise InvalidInput(f"Unknown roles: {', '.join(unknown)}", field="roles")
        if BASE_ROLE not in requested:
            raise InvalidInput(f"Roles must include '{BASE_ROLE}'", field="roles")

        if not self.profiles.get_profile(target_user_id):
            raise NotFound(f"Profile {target_user_id} not found")

        roles = canonical_roles(requested)
        self.profiles.update_profile_roles(target_user_id, roles, self.clock.now_utc())
        logger.info(f"Roles for {target_user_id} set to {roles} by {caller_id}")

        # The store is ground truth: re-read instead of returning the write result.
        try:
            confirmed = self.profiles.get_profile(target_user_id)
        except CollaboratorUnavailable as e:
            logger.warning(f"Role update for {target_user_id} not confirmed: {e}")
            raise RoleUpdateUnconfirmed(target_user_id) from e
        if confirmed is None:
            logger.warning(f"Profile {target_user_id} vanished after role update")
            raise RoleUpdateUnconfirmed(target_user_id)
        return confirmed

    def list_profiles(self, caller_id: str) -> list[Profile]:
        if not self.policy.can(self.get_roles(caller_id), "list_profiles"):
            raise Unauthorized("User not allowed to list profiles")
        return self.profiles.list_all_profiles()
