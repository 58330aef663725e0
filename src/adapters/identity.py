"""Local password identity provider.

``PasswordIdentityProvider`` issues identities backed by a credential store
and creates the matching ``{user}`` profile on sign-up.

``IdentitySession`` is the per-client session: it holds who is signed in for
one presentation client and publishes login/logout/refresh transitions to
subscribers. Nothing here is process-global, so each client (or test) owns
its own session.
"""

import logging
from collections.abc import Callable
from uuid import uuid4

from src.domain.entities import Credential, Profile, User
from src.domain.errors import InvalidInput
from src.ports.auth import PasswordHasherPort, SessionCallback
from src.ports.clock import ClockPort
from src.ports.repo import CredentialStorePort, ProfileStorePort

logger = logging.getLogger(__name__)


class PasswordIdentityProvider:
    def __init__(
        self,
        credentials: CredentialStorePort,
        profiles: ProfileStorePort,
        hasher: PasswordHasherPort,
        clock: ClockPort,
        password_min_length: int = 8,
    ):
        self.credentials = credentials
        self.profiles = profiles
        self.hasher = hasher
        self.clock = clock
        self.password_min_length = password_min_length

    def sign_up(self, email: str, password: str, full_name: str | None = None) -> Profile:
        email = email.strip().lower()
        if "@" not in email:
            raise InvalidInput("A valid email is required", field="email")
        if len(password) < self.password_min_length:
            raise InvalidInput(
                f"Password must be at least {self.password_min_length} characters",
                field="password",
            )
        if self.credentials.get_by_email(email):
            raise InvalidInput("Email already in use", field="email")

        now = self.clock.now_utc()
        user_id = str(uuid4())
        self.credentials.save(
            Credential(
                user_id=user_id,
                email=email,
                password_hash=self.hasher.hash_password(password),
                created_at=now,
            )
        )
        profile = Profile(
            id=user_id,
            email=email,
            full_name=full_name,
            roles=["user"],
            created_at=now,
            updated_at=now,
        )
        self.profiles.save_profile(profile)
        logger.info(f"Signed up user {user_id}")
        return profile

    def authenticate(self, email: str, password: str) -> User | None:
        credential = self.credentials.get_by_email(email.strip().lower())
        if not credential:
            return None
        if not self.hasher.verify_password(password, credential.password_hash):
            return None
        return self.get_user(credential.user_id) or User(
            id=credential.user_id, email=credential.email
        )

    def get_user(self, user_id: str) -> User | None:
        profile = self.profiles.get_profile(user_id)
        if not profile:
            return None
        return User(id=profile.id, email=profile.email, full_name=profile.full_name)


class IdentitySession:
    def __init__(self, provider: PasswordIdentityProvider):
        self.provider = provider
        self._user: User | None = None
        self._subscribers: list[SessionCallback] = []

    def current_user(self) -> User | None:
        return self._user

    def on_session_change(self, callback: SessionCallback) -> Callable[[], None]:
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def sign_in(self, email: str, password: str) -> User | None:
        user = self.provider.authenticate(email, password)
        if user is None:
            return None
        self._set_user(user)
        return user

    def sign_out(self) -> None:
        self._set_user(None)

    def refresh(self) -> User | None:
        """Reload the signed-in identity; a vanished profile signs the session out."""
        if self._user is None:
            return None
        self._set_user(self.provider.get_user(self._user.id))
        return self._user

    def _set_user(self, user: User | None) -> None:
        previous_id = self._user.id if self._user else None
        new_id = user.id if user else None
        self._user = user
        if previous_id == new_id:
            return
        for callback in list(self._subscribers):
            try:
                callback(new_id)
            except Exception as e:
                logger.error(f"Session change subscriber failed: {e}")
