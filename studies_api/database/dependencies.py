"""Database dependencies."""

from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession

from studies_api.database.client import get_session


async def get_db_session() -> AsyncGenerator[AsyncSession]:
    """Get a database session scoped to the current request.

    The request's work is one transaction: committed when the handler returns,
    rolled back when it raises.
    """
    async with get_session() as session:
        yield session
