from collections.abc import Iterable
from datetime import UTC, datetime
from typing import Literal, get_args
from uuid import uuid4

from pydantic import BaseModel, Field

# --- Enums / Literals ---
RoleType = Literal["admin", "writer", "user"]
RoleSet = frozenset[RoleType]

ROLE_ORDER: tuple[RoleType, ...] = get_args(RoleType)
BASE_ROLE: RoleType = "user"
DEFAULT_ROLES: RoleSet = frozenset({BASE_ROLE})


def _utcnow() -> datetime:
    return datetime.now(UTC)


def canonical_roles(roles: Iterable[str]) -> list[RoleType]:
    """Order roles as admin, writer, user and drop duplicates."""
    wanted = set(roles)
    return [r for r in ROLE_ORDER if r in wanted]


def derive_display_name(full_name: str | None, email: str | None) -> str:
    if full_name:
        return full_name
    if email and email.split("@")[0]:
        return email.split("@")[0]
    return "User"


# --- Identity ---

class User(BaseModel):
    """Identity issued by the identity provider. Read-only to this service."""

    id: str
    email: str
    full_name: str | None = None

    @property
    def display_name(self) -> str:
        return derive_display_name(self.full_name, self.email)


class Profile(BaseModel):
    id: str
    email: str
    roles: list[RoleType] = Field(default_factory=lambda: [BASE_ROLE])
    full_name: str | None = None
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    @property
    def display_name(self) -> str:
        return derive_display_name(self.full_name, self.email)

    @property
    def role_set(self) -> RoleSet:
        # Stored records missing the base role still carry it.
        return frozenset(self.roles) | DEFAULT_ROLES


class Credential(BaseModel):
    user_id: str
    email: str
    password_hash: str
    created_at: datetime = Field(default_factory=_utcnow)


# --- Content ---

class Post(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid4()))
    title: str
    # Serialized rich text from the editor; stored and returned verbatim.
    content: str = ""
    author_id: str
    is_reviewed: bool = False
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)
