"""JWT encoding and validation for access and refresh tokens."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from enum import StrEnum
from typing import Any
from uuid import uuid4

import jwt
from jwt.exceptions import InvalidSignatureError, InvalidTokenError

from studies_api.config.settings import Settings
from studies_api.features.user.models import UserRole

from .exceptions import TokenExpiredError, TokenMalformedError, TokenSignatureInvalidError

logger = logging.getLogger(__name__)

REQUIRED_CLAIMS = ["sub", "role", "type", "jti", "iat", "exp"]


def utc_now() -> datetime:
    return datetime.now(UTC)


class TokenKind(StrEnum):
    """Token kinds, stored in the ``type`` claim."""

    ACCESS = "access"
    REFRESH = "refresh"


@dataclass(frozen=True, slots=True)
class TokenConfig:
    """Signing material and lifetimes, fixed for the life of the process."""

    secret_key: str
    algorithm: str
    access_ttl: timedelta
    refresh_ttl: timedelta

    def __post_init__(self):
        if not self.secret_key:
            raise ValueError("secret_key must not be empty")
        if self.access_ttl >= self.refresh_ttl:
            raise ValueError("access_ttl must be shorter than refresh_ttl")

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenConfig":
        return cls(
            secret_key=settings.secret_key,
            algorithm=settings.jwt_algorithm,
            access_ttl=settings.access_token_ttl,
            refresh_ttl=settings.refresh_token_ttl,
        )

    def ttl(self, kind: TokenKind) -> timedelta:
        return self.access_ttl if kind is TokenKind.ACCESS else self.refresh_ttl


@dataclass(frozen=True, slots=True)
class IssuedToken:
    token: str
    expires_at: datetime


@dataclass(frozen=True, slots=True)
class TokenClaims:
    """Decoded and type-checked token payload."""

    subject: int
    role: UserRole
    kind: TokenKind
    token_id: str
    issued_at: datetime
    expires_at: datetime


class TokenCodec:
    """Issue and validate signed bearer tokens.

    Both operations take the current time as an argument, so validation is a
    pure function of the token and ``now``. Every token carries a random
    ``jti`` and is therefore unique even when two are issued within the same
    second for the same principal.

    For principal ``1`` with role ``owner`` and 10-digit timestamps, HS256
    access tokens are 237 characters long and refresh tokens 239.
    """

    def __init__(self, config: TokenConfig):
        self.config = config

    def issue(self, principal_id: int, role: UserRole, kind: TokenKind, now: datetime) -> IssuedToken:
        """Encode and sign a token expiring at ``now + TTL(kind)``."""
        issued_at = int(now.timestamp())
        expires_at = issued_at + int(self.config.ttl(kind).total_seconds())

        payload: dict[str, Any] = {
            "sub": str(principal_id),
            "role": UserRole(role).value,
            "type": kind.value,
            "jti": uuid4().hex,
            "iat": issued_at,
            "exp": expires_at,
        }
        token = jwt.encode(payload, self.config.secret_key, algorithm=self.config.algorithm)
        return IssuedToken(token=token, expires_at=datetime.fromtimestamp(expires_at, UTC))

    def validate(
        self,
        token: str,
        now: datetime,
        kind: TokenKind | None = None,
        verify_expiry: bool = True,
    ) -> TokenClaims:
        """Verify signature, claims and expiry.

        Args:
            token: Encoded token string
            now: Current time (timezone-aware)
            kind: Expected token kind, if the caller accepts only one
            verify_expiry: Skip the expiry check when False

        Returns:
            Decoded claims

        Raises:
            TokenSignatureInvalidError: If the signature does not match
            TokenMalformedError: If the token or its claims cannot be used
            TokenExpiredError: If ``expires_at <= now``

        """
        try:
            payload = jwt.decode(
                token,
                self.config.secret_key,
                algorithms=[self.config.algorithm],
                options={"verify_exp": False, "verify_iat": False, "require": REQUIRED_CLAIMS},
            )
        except InvalidSignatureError as err:
            raise TokenSignatureInvalidError() from err
        except InvalidTokenError as err:
            raise TokenMalformedError(detail=f"Undecodable token: {err}") from err

        claims = self._parse_claims(payload)

        if kind is not None and claims.kind is not kind:
            raise TokenMalformedError(detail=f"Invalid token type, expected {kind.value}")

        if verify_expiry and claims.expires_at <= now:
            raise TokenExpiredError()

        return claims

    @staticmethod
    def _parse_claims(payload: dict[str, Any]) -> TokenClaims:
        try:
            return TokenClaims(
                subject=int(payload["sub"]),
                role=UserRole(payload["role"]),
                kind=TokenKind(payload["type"]),
                token_id=str(payload["jti"]),
                issued_at=datetime.fromtimestamp(int(payload["iat"]), UTC),
                expires_at=datetime.fromtimestamp(int(payload["exp"]), UTC),
            )
        except (KeyError, TypeError, ValueError) as err:
            raise TokenMalformedError(detail="Invalid token payload") from err
