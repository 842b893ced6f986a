"""Credential verification backed by the users table."""

import logging
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import User, UserRole

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Principal:
    """Authenticated identity as seen by the auth layer."""

    id: int
    role: UserRole


class UserCredentialVerifier:
    """Resolve an (email, password) pair, or a known principal id, to a principal.

    Unknown email, wrong password and a non-active account all yield ``None``;
    callers cannot tell them apart.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def verify(self, email: str, password: str) -> Principal | None:
        stmt = select(User).where(User.email == email)
        result = await self.session.execute(stmt)
        user = result.scalar_one_or_none()

        if user is None:
            return None

        if not user.verify_password(password):
            return None

        if not user.is_active:
            logger.warning(f"Login attempt for non-active account: user_id={user.id} state={user.state}")
            return None

        return Principal(id=user.id, role=UserRole(user.role))

    async def resolve(self, principal_id: int) -> Principal | None:
        """Current principal for ``principal_id``.

        Returns None if the account no longer exists or is not active.
        """
        stmt = select(User).where(User.id == principal_id).execution_options(populate_existing=True)
        result = await self.session.execute(stmt)
        user = result.scalar_one_or_none()

        if not user or not user.is_active:
            return None

        return Principal(id=user.id, role=UserRole(user.role))
