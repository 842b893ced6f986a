"""User schemas (DTOs)."""

from pydantic import EmailStr, Field

from studies_api.shared.schemas import PascalModel

from .models import UserRole, UserState


# Request schemas
class UserCreateRequest(PascalModel):
    """User registration request."""

    login: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=1)
    role: UserRole = UserRole.RESIDENT
    state: UserState = UserState.NEW


class UserUpdateRequest(PascalModel):
    """User update request. Omitted fields are left unchanged."""

    login: str | None = Field(None, min_length=1, max_length=100)
    email: EmailStr | None = None
    password: str | None = Field(None, min_length=1)
    role: UserRole | None = None
    state: UserState | None = None


# Response schemas
class UserResponse(PascalModel):
    """User response (never includes the password hash)."""

    id: int
    login: str
    email: str
    role: UserRole
    state: UserState
