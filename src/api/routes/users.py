
from fastapi import APIRouter, Depends

from src.api.deps import get_current_user, get_role_service
from src.api.schemas import ProfileResponse, RolesUpdateRequest
from src.components.roles import RoleService
from src.domain.entities import Profile, User

router = APIRouter()


def _to_response(profile: Profile) -> ProfileResponse:
    return ProfileResponse(
        id=profile.id,
        email=profile.email,
        display_name=profile.display_name,
        roles=profile.roles,
        created_at=profile.created_at,
        updated_at=profile.updated_at,
    )


@router.get("", response_model=list[ProfileResponse])
def list_users(
    current_user: User = Depends(get_current_user),
    roles: RoleService = Depends(get_role_service),
) -> list[ProfileResponse]:
    """List all users (admin only)."""
    return [_to_response(p) for p in roles.list_profiles(current_user.id)]


@router.put("/{user_id}/roles", response_model=ProfileResponse)
def update_roles(
    user_id: str,
    req: RolesUpdateRequest,
    current_user: User = Depends(get_current_user),
    roles: RoleService = Depends(get_role_service),
) -> ProfileResponse:
    """Replace a user's roles (admin only, never your own)."""
    return _to_response(roles.set_roles(current_user.id, user_id, req.roles))
