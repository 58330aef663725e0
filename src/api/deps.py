from functools import lru_cache
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer

from src.api.auth_utils import decode_access_token
from src.app_shell.config import Settings
from src.app_shell.context import ServiceContext
from src.components.moderation import ModerationService
from src.components.roles import RoleService
from src.domain.entities import User


# --- Settings ---
@lru_cache
def get_settings() -> Settings:
    return Settings()


# --- Context ---
def get_context(request: Request) -> ServiceContext:
    """The context built at startup (see ``src.api.main.lifespan``)."""
    ctx: ServiceContext | None = getattr(request.app.state, "ctx", None)
    if ctx is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service not initialised",
        )
    return ctx


def get_moderation(ctx: ServiceContext = Depends(get_context)) -> ModerationService:
    return ctx.moderation


def get_role_service(ctx: ServiceContext = Depends(get_context)) -> RoleService:
    return ctx.roles


# --- Auth ---
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


def _resolve_user(request: Request, token: str | None, ctx: ServiceContext) -> User | None:
    # Cookie (HttpOnly) wins over the Authorization header
    cookie_token = request.cookies.get("access_token")
    if cookie_token and cookie_token.startswith("Bearer "):
        token = cookie_token.split(" ", 1)[1]

    if not token:
        return None

    payload = decode_access_token(token)
    if not payload:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user_id = payload.get("sub")
    if user_id is None or not isinstance(user_id, str):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload",
        )

    user = ctx.identity.get_user(user_id)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def get_current_user(
    request: Request,
    token: Annotated[str | None, Depends(oauth2_scheme)],
    ctx: ServiceContext = Depends(get_context),
) -> User:
    user = _resolve_user(request, token, ctx)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def get_optional_user(
    request: Request,
    token: Annotated[str | None, Depends(oauth2_scheme)],
    ctx: ServiceContext = Depends(get_context),
) -> User | None:
    """Public routes treat a stale or unreadable token as an anonymous caller."""
    try:
        return _resolve_user(request, token, ctx)
    except HTTPException:
        return None
