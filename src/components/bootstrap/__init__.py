"""Bootstrap component for Day 0 admin creation.

Creates the first admin account when none exists, since no admin can grant
roles to themselves.
"""

from .component import BOOTSTRAP_EMAIL_ENV, BOOTSTRAP_PASSWORD_ENV, bootstrap_admin
from .ports import IdentityPort

__all__ = [
    # Entry point
    "bootstrap_admin",
    "BOOTSTRAP_EMAIL_ENV",
    "BOOTSTRAP_PASSWORD_ENV",
    # Ports
    "IdentityPort",
]
