import logging
import os

from src.domain.entities import Profile, canonical_roles
from src.domain.errors import InvalidInput
from src.rules.models import Rules

from .ports import IdentityPort

logger = logging.getLogger(__name__)

BOOTSTRAP_EMAIL_ENV = "JOURNAL_BOOTSTRAP_EMAIL"
BOOTSTRAP_PASSWORD_ENV = "JOURNAL_BOOTSTRAP_PASSWORD"


def bootstrap_admin(
    identity: IdentityPort,
    rules: Rules,
    email: str | None = None,
    password: str | None = None,
) -> Profile | None:
    """
    Create the first admin when no admin exists yet (Day 0).

    Admins cannot grant roles to themselves, so the first one has to be
    created outside the role workflow. Does nothing once an admin exists.
    """
    if not rules.ops.bootstrap_admin.enabled_if_no_admins:
        return None

    profiles = identity.profiles
    if any("admin" in p.roles for p in profiles.list_all_profiles()):
        return None

    email = email or os.environ.get(BOOTSTRAP_EMAIL_ENV)
    password = password or os.environ.get(BOOTSTRAP_PASSWORD_ENV)
    if not email or not password:
        logger.info(
            f"No admin exists but {BOOTSTRAP_EMAIL_ENV}/{BOOTSTRAP_PASSWORD_ENV} not set. "
            "Skipping admin bootstrap."
        )
        return None

    existing = identity.credentials.get_by_email(email)
    if existing:
        profile = profiles.get_profile(existing.user_id)
        if profile is None:
            raise InvalidInput(f"Credentials for {email} have no profile", field="email")
    else:
        profile = identity.sign_up(email, password, full_name="Admin")

    roles = canonical_roles([*profile.roles, "admin", "writer", "user"])
    promoted = profiles.update_profile_roles(profile.id, roles, identity.clock.now_utc())
    logger.info(f"Bootstrapped admin account {promoted.id} for {email}")
    return promoted
