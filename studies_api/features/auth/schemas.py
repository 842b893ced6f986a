"""Authentication schemas (DTOs).

Wire names are PascalCase (``Email``, ``RefreshToken``, ...); snake_case
field names are accepted as well.
"""

from datetime import datetime

from pydantic import Field

from studies_api.shared.schemas import PascalModel


# Request schemas
class LoginRequest(PascalModel):
    """Login request.

    The email is not format-checked here: a malformed email is just another
    wrong credential.
    """

    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class RefreshTokenRequest(PascalModel):
    """Refresh token request."""

    refresh_token: str = Field(..., min_length=1)


# Response schemas
class TokenPairResponse(PascalModel):
    """Access/refresh token pair with their expiry instants."""

    access_token: str
    refresh_token: str
    access_token_expired_at: datetime
    refresh_token_expired_at: datetime
