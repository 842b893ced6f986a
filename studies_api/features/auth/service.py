"""Authentication service layer."""

import logging
from collections.abc import Callable
from datetime import datetime
from typing import Protocol

from studies_api.features.user.models import UserRole
from studies_api.features.user.verifier import Principal

from .exceptions import (
    CredentialInvalidError,
    RefreshTokenExpiredError,
    SessionConflictError,
    SessionNotFoundError,
    StoreInternalError,
)
from .schemas import TokenPairResponse
from .store import SessionStore
from .token_codec import TokenCodec, TokenKind, utc_now

logger = logging.getLogger(__name__)


class CredentialVerifier(Protocol):
    async def verify(self, email: str, password: str) -> Principal | None: ...

    async def resolve(self, principal_id: int) -> Principal | None: ...


class AuthService:
    """Login, refresh and logout flows.

    Collaborators are injected so the flows can be driven with a fixed clock
    and any credential backend.
    """

    def __init__(
        self,
        codec: TokenCodec,
        store: SessionStore,
        verifier: CredentialVerifier,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.codec = codec
        self.store = store
        self.verifier = verifier
        self.clock = clock

    async def login(self, email: str, password: str) -> TokenPairResponse:
        """Verify credentials and open a new session, replacing any previous one.

        Raises:
            CredentialInvalidError: If the email or password is wrong
            StoreError: If the session could not be persisted

        """
        principal = await self.verifier.verify(email, password)
        if principal is None:
            logger.info("Login rejected: credential verification failed")
            raise CredentialInvalidError()

        tokens = self._issue_pair(principal.id, principal.role, self.clock())

        try:
            await self.store.replace(principal.id, tokens.refresh_token, tokens.refresh_token_expired_at)
        except SessionConflictError as err:
            # The upsert is keyed on the principal, so this is a token collision
            raise StoreInternalError("replace", "refresh token collision") from err

        logger.info(f"User logged in: user_id={principal.id}")
        return tokens

    async def refresh(self, refresh_token: str) -> TokenPairResponse:
        """Rotate a refresh token into a new token pair.

        The presented token must be a well-formed refresh token, still be the
        owner's current session and not be expired, and the owner's account must
        still exist and be active. The new pair carries the account's current
        role. The old token stops working in the same statement that activates
        the new one.

        Raises:
            TokenMalformedError: If the token cannot be decoded or is not a refresh token
            TokenSignatureInvalidError: If the token was not signed by us
            SessionNotFoundError: If no current session holds the token, or the account is gone or not active
            RefreshTokenExpiredError: If the session has expired
            StoreError: If the store failed

        """
        now = self.clock()
        claims = self.codec.validate(refresh_token, now, kind=TokenKind.REFRESH, verify_expiry=False)

        record = await self.store.get_by_token(refresh_token)
        if record.user_id != claims.subject:
            logger.warning(f"Refresh token subject mismatch: user_id={record.user_id} subject={claims.subject}")
            raise SessionNotFoundError(detail="Session owner mismatch")

        if record.is_expired(now):
            logger.info(f"Refresh rejected, session expired: user_id={record.user_id}")
            raise RefreshTokenExpiredError()

        principal = await self.verifier.resolve(record.user_id)
        if principal is None:
            logger.warning(f"Refresh rejected, account missing or not active: user_id={record.user_id}")
            raise SessionNotFoundError(detail="Account missing or not active")

        tokens = self._issue_pair(principal.id, principal.role, now)
        await self.store.replace(
            record.user_id,
            tokens.refresh_token,
            tokens.refresh_token_expired_at,
            expected_token=refresh_token,
        )

        logger.info(f"Session rotated: user_id={record.user_id}")
        return tokens

    async def logout(self, principal_id: int) -> None:
        """Close the principal's session.

        Raises:
            SessionNotFoundError: If there is no session to close

        """
        await self.store.delete(principal_id)
        logger.info(f"User logged out: user_id={principal_id}")

    def _issue_pair(self, principal_id: int, role: UserRole, now: datetime) -> TokenPairResponse:
        access = self.codec.issue(principal_id, role, TokenKind.ACCESS, now)
        refresh = self.codec.issue(principal_id, role, TokenKind.REFRESH, now)
        return TokenPairResponse(
            access_token=access.token,
            refresh_token=refresh.token,
            access_token_expired_at=access.expires_at,
            refresh_token_expired_at=refresh.expires_at,
        )
