"""User domain models."""

from enum import StrEnum

from pwdlib import PasswordHash
from sqlalchemy import Enum, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from studies_api.database.base import Base, TimestampMixin


class UserRole(StrEnum):
    """User roles.

    OWNER: Owner of the notebook, full access.
    RESIDENT: Regular member.
    """

    OWNER = "owner"
    RESIDENT = "resident"


class UserState(StrEnum):
    """User account state."""

    NEW = "new"
    BLOCKED = "blocked"
    DELETED = "deleted"


pwd_hasher = PasswordHash.recommended()


class User(Base, TimestampMixin):
    """User account, the principal behind every issued token."""

    __tablename__ = "users"

    # Primary key
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    # Identity (globally unique)
    login: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)

    # Authentication
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)

    # Authorization
    role: Mapped[str] = mapped_column(
        Enum(UserRole, native_enum=False, length=50, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=UserRole.RESIDENT.value,
    )

    # State
    state: Mapped[str] = mapped_column(
        Enum(UserState, native_enum=False, length=50, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=UserState.NEW.value,
        index=True,
    )

    @property
    def is_active(self) -> bool:
        """Computed property: only NEW accounts may authenticate."""
        return self.state == UserState.NEW

    def verify_password(self, plain_password: str) -> bool:
        """Verify a password against the hash using Argon2.

        Salt is automatically extracted from the hash by pwdlib.
        """
        return pwd_hasher.verify(plain_password, self.hashed_password)

    @staticmethod
    def hash_password(password: str) -> str:
        """Hash a password using Argon2.

        Salt is automatically generated and embedded in the returned hash.
        """
        return pwd_hasher.hash(password)
