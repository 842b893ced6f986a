"""Authentication dependencies for FastAPI."""

import logging
from functools import lru_cache

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from studies_api.config.settings import settings
from studies_api.database.dependencies import get_db_session
from studies_api.features.user.models import UserRole
from studies_api.features.user.verifier import Principal, UserCredentialVerifier

from .exceptions import AuthError, InsufficientRoleError, TokenError
from .service import AuthService
from .store import SessionStore
from .token_codec import TokenCodec, TokenConfig, TokenKind, utc_now

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


@lru_cache
def get_token_codec() -> TokenCodec:
    """Process-wide token codec, built from settings on first use."""
    return TokenCodec(TokenConfig.from_settings(settings))


async def get_session_store(session: AsyncSession = Depends(get_db_session)) -> SessionStore:
    """Session store bound to the request's transaction and deadline."""
    return SessionStore.for_request(session, settings.db_request_timeout_seconds)


async def get_auth_service(
    codec: TokenCodec = Depends(get_token_codec),
    store: SessionStore = Depends(get_session_store),
    session: AsyncSession = Depends(get_db_session),
) -> AuthService:
    return AuthService(codec=codec, store=store, verifier=UserCredentialVerifier(session))


async def get_current_principal(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    codec: TokenCodec = Depends(get_token_codec),
) -> Principal:
    """Admit the request if it carries a valid access token.

    Authorization is stateless: the principal comes from the token claims
    alone and is never re-read from the database, so a blocked account keeps
    access until its current access token expires.

    Args:
        request: Incoming request; the principal is stored on ``request.state``
        credentials: Bearer credentials, None if the header is absent
        codec: Token codec

    Returns:
        The authenticated principal

    Raises:
        AuthError: If the token is missing, malformed, forged or expired

    """
    if credentials is None:
        logger.info(f"Rejected request without bearer token: {request.method} {request.url.path}")
        raise AuthError(detail="Missing bearer token")

    return _authenticate(request, credentials.credentials, codec)


async def get_optional_principal(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    codec: TokenCodec = Depends(get_token_codec),
) -> Principal | None:
    """Like ``get_current_principal``, but anonymous requests yield None.

    A bearer token that is present must still be valid.
    """
    if credentials is None:
        return None

    return _authenticate(request, credentials.credentials, codec)


def _authenticate(request: Request, token: str, codec: TokenCodec) -> Principal:
    try:
        claims = codec.validate(token, utc_now(), kind=TokenKind.ACCESS)
    except TokenError as err:
        logger.info(f"Rejected access token ({type(err).__name__}): {request.method} {request.url.path}")
        raise

    principal = Principal(id=claims.subject, role=claims.role)
    request.state.principal = principal
    return principal


def require_role(*required_roles: UserRole):
    """Dependency factory to require specific roles.

    Usage:
        # For single role
        Depends(require_role(UserRole.OWNER))

        # For multiple roles (OR logic - principal needs ANY of these)
        Depends(require_role(UserRole.OWNER, UserRole.RESIDENT))
    """

    async def role_checker(principal: Principal = Depends(get_current_principal)) -> Principal:
        if principal.role not in required_roles:
            raise InsufficientRoleError([r.value for r in required_roles])
        return principal

    return role_checker
