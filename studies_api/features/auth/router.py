"""Authentication router (token management endpoints)."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from studies_api.database.dependencies import get_db_session
from studies_api.features.user.verifier import Principal

from .dependencies import get_auth_service, get_current_principal
from .schemas import LoginRequest, RefreshTokenRequest, TokenPairResponse
from .service import AuthService

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/login", response_model=TokenPairResponse)
async def login(
    data: LoginRequest,
    service: AuthService = Depends(get_auth_service),
    session: AsyncSession = Depends(get_db_session),
):
    """Login and get a token pair.

    - **Email**: Account email
    - **Password**: Account password

    Logging in closes any previous session of the same user.
    """
    tokens = await service.login(data.email, data.password)
    await session.commit()
    return tokens


@router.post("/refresh-token", response_model=TokenPairResponse)
async def refresh_token(
    data: RefreshTokenRequest,
    service: AuthService = Depends(get_auth_service),
    session: AsyncSession = Depends(get_db_session),
):
    """Exchange a refresh token for a new token pair.

    - **RefreshToken**: Current refresh token

    The presented refresh token stops working once the new pair is issued.
    """
    tokens = await service.refresh(data.refresh_token)
    await session.commit()
    return tokens


@router.post("/logout")
async def logout(
    principal: Principal = Depends(get_current_principal),
    service: AuthService = Depends(get_auth_service),
    session: AsyncSession = Depends(get_db_session),
):
    """Close the caller's session."""
    await service.logout(principal.id)
    await session.commit()
    return "Done"
