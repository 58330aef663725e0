from datetime import datetime

from pydantic import BaseModel, Field

from src.domain.entities import RoleType


# --- Auth ---
class Token(BaseModel):
    access_token: str
    token_type: str


class SignUpRequest(BaseModel):
    email: str
    password: str
    full_name: str | None = None


class MeResponse(BaseModel):
    id: str
    email: str
    display_name: str
    roles: list[RoleType]


# --- Posts ---
class PostCreateRequest(BaseModel):
    title: str
    # Serialized rich text, passed through untouched
    content: str = ""


class PostCreatedResponse(BaseModel):
    id: str


class PostResponse(BaseModel):
    id: str
    title: str
    content: str
    author_id: str
    author_label: str
    is_reviewed: bool
    created_at: datetime
    updated_at: datetime


# --- Users ---
class ProfileResponse(BaseModel):
    id: str
    email: str
    display_name: str
    roles: list[RoleType]
    created_at: datetime
    updated_at: datetime


class RolesUpdateRequest(BaseModel):
    roles: list[str] = Field(default_factory=list)
