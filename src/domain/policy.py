from collections.abc import Iterable, Mapping
from typing import Literal

from src.domain.entities import RoleType

Action = Literal[
    "create_post",
    "list_unreviewed_posts",
    "approve_post",
    "list_reviewed_posts",
    "manage_roles",
    "list_profiles",
    "view_unreviewed_post",
]

# Each action names the roles that grant it. There is no inheritance between
# roles: admin appears explicitly wherever it is allowed. None means public.
PERMISSIONS: Mapping[str, frozenset[RoleType] | None] = {
    "create_post": frozenset({"writer", "admin"}),
    "list_unreviewed_posts": frozenset({"admin"}),
    "approve_post": frozenset({"admin"}),
    "list_reviewed_posts": None,
    "manage_roles": frozenset({"admin"}),
    "list_profiles": frozenset({"admin"}),
    "view_unreviewed_post": frozenset({"admin"}),
}


class PolicyEngine:
    def __init__(self, permissions: Mapping[str, frozenset[RoleType] | None] = PERMISSIONS):
        self.permissions = permissions

    def can(
        self,
        roles: Iterable[str] | None,
        action: Action | str,
        subject: str | None = None,
        *,
        actor_id: str | None = None,
    ) -> bool:
        """
        Decide whether a holder of ``roles`` may perform ``action``.

        ``subject`` is the target user id for ``manage_roles``; ``actor_id``
        is the caller. Role management of oneself is always denied.
        Unknown actions are denied.
        """
        if action not in self.permissions:
            return False

        allowed = self.permissions[action]
        if allowed is None:
            return True

        if not allowed.intersection(roles or ()):
            return False

        if action == "manage_roles":
            if subject is None or actor_id is None:
                return False
            if str(subject) == str(actor_id):
                return False

        return True

    def can_manage_roles(self, actor_id: str, roles: Iterable[str], target_user_id: str) -> bool:
        return self.can(roles, "manage_roles", target_user_id, actor_id=actor_id)
