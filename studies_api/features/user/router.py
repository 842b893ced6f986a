"""User management router (API endpoints)."""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from studies_api.database.dependencies import get_db_session
from studies_api.features.auth.dependencies import get_current_principal, get_optional_principal, require_role
from studies_api.features.auth.exceptions import InsufficientRoleError
from studies_api.shared.exceptions import EntityNotFound

from .models import UserRole, UserState
from .schemas import UserCreateRequest, UserResponse, UserUpdateRequest
from .service import UserService
from .verifier import Principal

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/users", tags=["User Management"])


def _require_owner(principal: Principal | None) -> None:
    if principal is None or principal.role is not UserRole.OWNER:
        raise InsufficientRoleError([UserRole.OWNER.value])


@router.post("", status_code=status.HTTP_201_CREATED)
async def register_user(
    data: UserCreateRequest,
    principal: Principal | None = Depends(get_optional_principal),
    session: AsyncSession = Depends(get_db_session),
) -> int:
    """Register a new user.

    Anyone may register a `resident` account in state `new`; any other role or
    state requires an owner's access token. The response body is the new
    user's id.
    """
    if data.role is not UserRole.RESIDENT or data.state is not UserState.NEW:
        _require_owner(principal)

    user = await UserService.create_user(session, data)
    await session.commit()
    return user.id


@router.get("", response_model=list[UserResponse], dependencies=[Depends(get_current_principal)])
async def list_users(session: AsyncSession = Depends(get_db_session)):
    """List all users."""
    users = await UserService.get_users(session)
    return [UserResponse.model_validate(u) for u in users]


@router.get("/{user_id}", response_model=UserResponse, dependencies=[Depends(get_current_principal)])
async def get_user(user_id: int, session: AsyncSession = Depends(get_db_session)):
    """Get user by ID."""
    user = await UserService.get_user(session, user_id)

    if not user:
        raise EntityNotFound("User")

    return UserResponse.model_validate(user)


@router.put("/{user_id}", response_model=UserResponse)
async def update_user(
    user_id: int,
    data: UserUpdateRequest,
    principal: Principal = Depends(get_current_principal),
    session: AsyncSession = Depends(get_db_session),
):
    """Update user. Omitted fields are left unchanged.

    Users may edit their own login, email and password. Editing another
    user, or any role or state, is for owners only.
    """
    if principal.id != user_id or data.role is not None or data.state is not None:
        _require_owner(principal)

    user = await UserService.get_user(session, user_id)

    if not user:
        raise EntityNotFound("User")

    user = await UserService.update_user(user, data)
    await session.commit()

    logger.info(f"User {user_id} updated by user {principal.id}")
    return UserResponse.model_validate(user)


@router.delete("/{user_id}")
async def delete_user(
    user_id: int,
    principal: Principal = Depends(require_role(UserRole.OWNER)),
    session: AsyncSession = Depends(get_db_session),
):
    """Delete user (owner only)."""
    success = await UserService.delete_user(session, user_id)
    await session.commit()

    if not success:
        raise EntityNotFound("User")

    logger.info(f"User {user_id} deleted by owner {principal.id}")
    return "Done"
