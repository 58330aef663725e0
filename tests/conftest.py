from datetime import UTC, datetime, timedelta

import pytest

from src.adapters.memory import InMemoryCredentialStore, InMemoryPostStore, InMemoryProfileStore
from src.components.moderation import ModerationService
from src.components.roles import RoleService
from src.domain.entities import Profile
from src.domain.policy import PolicyEngine
from src.rules.loader import DEFAULT_RULES_PATH, load_rules


class FixedClock:
    """Deterministic clock; call ``advance`` to move time forward."""

    def __init__(self, fixed_time: datetime | None = None) -> None:
        self._time = fixed_time or datetime(2026, 1, 12, 12, 0, 0, tzinfo=UTC)

    def now_utc(self) -> datetime:
        return self._time

    def advance(self, delta: timedelta) -> None:
        self._time = self._time + delta


class PlainHasher:
    """Reversible stand-in for Argon2 so unit tests stay fast."""

    def hash_password(self, password: str) -> str:
        return f"plain${password}"

    def verify_password(self, plain: str, hashed: str) -> bool:
        return hashed == f"plain${plain}"


@pytest.fixture
def rules():
    return load_rules(DEFAULT_RULES_PATH)


@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture
def policy():
    return PolicyEngine()


@pytest.fixture
def post_store():
    return InMemoryPostStore()


@pytest.fixture
def profile_store():
    return InMemoryProfileStore()


@pytest.fixture
def credential_store():
    return InMemoryCredentialStore()


@pytest.fixture
def hasher():
    return PlainHasher()


@pytest.fixture
def role_service(profile_store, policy, clock):
    return RoleService(profile_store, policy, clock)


@pytest.fixture
def moderation(post_store, profile_store, role_service, policy, clock, rules):
    return ModerationService(
        posts=post_store,
        profiles=profile_store,
        roles=role_service,
        policy=policy,
        clock=clock,
        rules=rules,
    )


@pytest.fixture
def accounts(profile_store, clock):
    """Seed an admin, a writer and a plain reader. Returns their ids by name."""
    seeded = {
        "admin": Profile(id="u-admin", email="admin@example.com", roles=["admin", "user"]),
        "writer": Profile(id="u-writer", email="writer@example.com", roles=["writer", "user"]),
        "reader": Profile(id="u-reader", email="reader@example.com", roles=["user"]),
        "admin2": Profile(id="u-admin2", email="second@example.com", roles=["admin", "user"]),
    }
    for i, profile in enumerate(seeded.values()):
        stamp = clock.now_utc() - timedelta(days=10 - i)
        profile_store.save_profile(
            profile.model_copy(update={"created_at": stamp, "updated_at": stamp})
        )
    return {name: p.id for name, p in seeded.items()}
