from __future__ import annotations

from dataclasses import dataclass

from src.adapters.auth.crypto import Argon2PasswordHasher
from src.adapters.clock import SystemClock
from src.adapters.identity import IdentitySession, PasswordIdentityProvider
from src.adapters.memory import InMemoryCredentialStore, InMemoryPostStore, InMemoryProfileStore
from src.adapters.sqlite.repos import SQLiteCredentialStore, SQLitePostStore, SQLiteProfileStore
from src.components.moderation import ModerationService
from src.components.roles import RoleService
from src.domain.policy import PolicyEngine
from src.ports.clock import ClockPort
from src.ports.repo import CredentialStorePort, PostStorePort, ProfileStorePort
from src.rules.models import Rules


@dataclass
class ServiceContext:
    moderation: ModerationService
    roles: RoleService
    identity: PasswordIdentityProvider
    post_store: PostStorePort
    profile_store: ProfileStorePort
    credential_store: CredentialStorePort
    policy: PolicyEngine
    rules: Rules
    clock: ClockPort

    @classmethod
    def build(
        cls,
        rules: Rules,
        post_store: PostStorePort,
        profile_store: ProfileStorePort,
        credential_store: CredentialStorePort,
        clock: ClockPort | None = None,
    ) -> ServiceContext:
        clock = clock or SystemClock()
        policy = PolicyEngine()
        roles = RoleService(profile_store, policy, clock)
        moderation = ModerationService(
            posts=post_store,
            profiles=profile_store,
            roles=roles,
            policy=policy,
            clock=clock,
            rules=rules,
        )
        identity = PasswordIdentityProvider(
            credentials=credential_store,
            profiles=profile_store,
            hasher=Argon2PasswordHasher(),
            clock=clock,
            password_min_length=rules.auth.password_min_length,
        )
        return cls(
            moderation=moderation,
            roles=roles,
            identity=identity,
            post_store=post_store,
            profile_store=profile_store,
            credential_store=credential_store,
            policy=policy,
            rules=rules,
            clock=clock,
        )

    @classmethod
    def create(cls, db_path: str, rules: Rules, clock: ClockPort | None = None) -> ServiceContext:
        """SQLite-backed context. The database must already be migrated."""
        return cls.build(
            rules,
            SQLitePostStore(db_path),
            SQLiteProfileStore(db_path),
            SQLiteCredentialStore(db_path),
            clock,
        )

    @classmethod
    def in_memory(cls, rules: Rules, clock: ClockPort | None = None) -> ServiceContext:
        return cls.build(
            rules,
            InMemoryPostStore(),
            InMemoryProfileStore(),
            InMemoryCredentialStore(),
            clock,
        )

    def new_session(self) -> IdentitySession:
        return IdentitySession(self.identity)
