"""Authentication exceptions.

Every failure keeps its own type for logs and tests. What reaches the client is
decided in one place, ``render_auth_error``, which collapses the subtypes into
a handful of fixed messages.
"""

from fastapi import Request, status
from fastapi.responses import JSONResponse

WRONG_PASSWORD_OR_EMAIL = "wrong password or email"
TOKEN_IS_EXPIRED = "token is expired"
UNAUTHORIZED = "unauthorized"
FORBIDDEN = "forbidden"
INTERNAL_SERVER_ERROR = "internal server error"


class AuthError(Exception):
    """Base class for client-side authentication failures."""

    status_code: int = status.HTTP_401_UNAUTHORIZED
    public_detail: str = UNAUTHORIZED

    def __init__(self, detail: str = "Authentication failed"):
        super().__init__(detail)
        self.detail = detail


class CredentialInvalidError(AuthError):
    """Raised when the email is unknown or the password is wrong."""

    status_code = status.HTTP_400_BAD_REQUEST
    public_detail = WRONG_PASSWORD_OR_EMAIL

    def __init__(self):
        super().__init__(detail="Credential verification failed")


class TokenError(AuthError):
    """Base class for token validation failures."""


class TokenMalformedError(TokenError):
    """Raised when a token cannot be decoded or carries unusable claims."""

    def __init__(self, detail: str = "Malformed token"):
        super().__init__(detail=detail)


class TokenSignatureInvalidError(TokenError):
    """Raised when the token signature does not match."""

    def __init__(self):
        super().__init__(detail="Token signature verification failed")


class TokenExpiredError(TokenError):
    """Raised when a token or its session record has expired."""

    def __init__(self, detail: str = "Token has expired"):
        super().__init__(detail=detail)


class RefreshTokenExpiredError(TokenExpiredError):
    """Raised when the presented refresh token's session record has expired."""

    status_code = status.HTTP_400_BAD_REQUEST
    public_detail = TOKEN_IS_EXPIRED

    def __init__(self):
        super().__init__(detail="Refresh token expired")


class SessionNotFoundError(AuthError):
    """Raised when no session record matches the lookup."""

    def __init__(self, detail: str = "Session not found"):
        super().__init__(detail=detail)


class SessionConflictError(AuthError):
    """Raised when a session record already exists for the principal or token."""

    def __init__(self, detail: str = "Session already exists"):
        super().__init__(detail=detail)


class InsufficientRoleError(AuthError):
    """Raised when the principal lacks every required role."""

    status_code = status.HTTP_403_FORBIDDEN
    public_detail = FORBIDDEN

    def __init__(self, required_roles: list[str]):
        roles_str = ", ".join(required_roles)
        super().__init__(detail=f"Principal does not have required role(s): {roles_str}")


class StoreError(Exception):
    """Base class for session store failures. Always a server error."""

    def __init__(self, operation: str, detail: str):
        super().__init__(f"{operation}: {detail}")
        self.operation = operation
        self.detail = detail


class StoreCancelledError(StoreError):
    """Raised when the request was cancelled during a store operation."""

    def __init__(self, operation: str):
        super().__init__(operation, "operation cancelled")


class StoreDeadlineExceededError(StoreError):
    """Raised when a store operation outlives the request deadline."""

    def __init__(self, operation: str):
        super().__init__(operation, "deadline exceeded")


class StoreInternalError(StoreError):
    """Raised for any other database failure."""


async def render_auth_error(request: Request, exc: Exception) -> JSONResponse:
    """Render auth and store failures as fixed, minimal-disclosure bodies.

    Only the class-level ``public_detail`` is sent; the instance detail stays
    in the logs. Store failures are all the same opaque server error.
    """
    if isinstance(exc, StoreError):
        return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=INTERNAL_SERVER_ERROR)

    status_code = getattr(exc, "status_code", status.HTTP_401_UNAUTHORIZED)
    public_detail = getattr(exc, "public_detail", UNAUTHORIZED)
    headers = {"WWW-Authenticate": "Bearer"} if status_code == status.HTTP_401_UNAUTHORIZED else None
    return JSONResponse(status_code=status_code, content=public_detail, headers=headers)
