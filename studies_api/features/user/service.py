"""User service layer."""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import User
from .schemas import UserCreateRequest, UserUpdateRequest

logger = logging.getLogger(__name__)


class UserService:
    """Service for user operations."""

    @staticmethod
    async def create_user(session: AsyncSession, data: UserCreateRequest) -> User:
        """Create a user, hashing the password with Argon2.

        Args:
            session: Database session
            data: User registration data

        Returns:
            Created User object (flushed, so ``id`` is set)

        """
        user = User(
            login=data.login,
            email=str(data.email),
            hashed_password=User.hash_password(data.password),
            role=data.role.value,
            state=data.state.value,
        )

        session.add(user)
        await session.flush()
        logger.info(f"New user registered: user_id={user.id} login={user.login}")

        return user

    @staticmethod
    async def get_user(session: AsyncSession, user_id: int) -> User | None:
        """Get user by ID."""
        stmt = select(User).where(User.id == user_id)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    async def get_users(session: AsyncSession) -> list[User]:
        stmt = select(User).order_by(User.id)
        result = await session.execute(stmt)
        return list(result.scalars().all())

    @staticmethod
    async def update_user(user: User, data: UserUpdateRequest) -> User:
        """Apply the provided fields; a new password is re-hashed."""
        if data.login is not None:
            user.login = data.login
        if data.email is not None:
            user.email = str(data.email)
        if data.password is not None:
            user.hashed_password = User.hash_password(data.password)
        if data.role is not None:
            user.role = data.role.value
        if data.state is not None:
            user.state = data.state.value

        logger.info(f"User updated: user_id={user.id}")
        return user

    @staticmethod
    async def delete_user(session: AsyncSession, user_id: int) -> bool:
        """Delete user by ID."""
        user = await UserService.get_user(session, user_id)

        if user:
            await session.delete(user)
            logger.info(f"User deleted: user_id={user_id}")
            return True
        return False
