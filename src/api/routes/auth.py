from datetime import timedelta
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Response, status
from fastapi.security import OAuth2PasswordRequestForm

from src.api.auth_utils import create_access_token
from src.api.deps import get_context, get_current_user
from src.api.schemas import MeResponse, ProfileResponse, SignUpRequest, Token
from src.app_shell.context import ServiceContext
from src.domain.entities import User, canonical_roles

router = APIRouter()


@router.post("/signup", response_model=ProfileResponse, status_code=status.HTTP_201_CREATED)
def sign_up(req: SignUpRequest, ctx: ServiceContext = Depends(get_context)) -> ProfileResponse:
    """Register a new account. New accounts only hold the 'user' role."""
    profile = ctx.identity.sign_up(req.email, req.password, req.full_name)
    return ProfileResponse(
        id=profile.id,
        email=profile.email,
        display_name=profile.display_name,
        roles=profile.roles,
        created_at=profile.created_at,
        updated_at=profile.updated_at,
    )


@router.post("/login", response_model=Token)
def login_for_access_token(
    response: Response,
    form_data: Annotated[OAuth2PasswordRequestForm, Depends()],
    ctx: ServiceContext = Depends(get_context),
) -> Token:
    """Authenticate user and return access token."""
    user = ctx.identity.authenticate(form_data.username, form_data.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    ttl_minutes = ctx.rules.auth.token_ttl_minutes
    access_token = create_access_token(
        data={"sub": user.id}, expires_delta=timedelta(minutes=ttl_minutes)
    )

    response.set_cookie(
        key="access_token",
        value=f"Bearer {access_token}",
        httponly=True,
        max_age=ttl_minutes * 60,
        samesite="lax",
        secure=False,  # Set to True for HTTPS prod
    )
    return Token(access_token=access_token, token_type="bearer")


@router.post("/logout")
def logout(response: Response) -> dict[str, str]:
    """Log out user by clearing cookie."""
    response.delete_cookie(key="access_token")
    return {"status": "success"}


@router.get("/me", response_model=MeResponse)
def read_users_me(
    current_user: User = Depends(get_current_user),
    ctx: ServiceContext = Depends(get_context),
) -> MeResponse:
    return MeResponse(
        id=current_user.id,
        email=current_user.email,
        display_name=current_user.display_name,
        roles=canonical_roles(ctx.roles.get_roles(current_user.id)),
    )
