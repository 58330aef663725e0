from collections.abc import Callable
from typing import Protocol

from src.domain.entities import User

SessionCallback = Callable[[str | None], None]


class PasswordHasherPort(Protocol):
    def hash_password(self, password: str) -> str: ...

    def verify_password(self, plain: str, hashed: str) -> bool: ...


class IdentityProviderPort(Protocol):
    def current_user(self) -> User | None:
        ...

    def on_session_change(self, callback: SessionCallback) -> Callable[[], None]:
        """
        Register ``callback`` for login/logout/refresh transitions.
        It receives the new user id, or None after sign-out.
        Returns a function that removes the subscription.
        """
        ...
