"""Bootstrap component port definitions - protocols for dependencies."""

from typing import Protocol

from src.domain.entities import Profile
from src.ports.clock import ClockPort
from src.ports.repo import CredentialStorePort, ProfileStorePort


class IdentityPort(Protocol):
    """Account creation plus the stores the identity provider owns."""

    profiles: ProfileStorePort
    credentials: CredentialStorePort
    clock: ClockPort

    def sign_up(self, email: str, password: str, full_name: str | None = None) -> Profile:
        ...
