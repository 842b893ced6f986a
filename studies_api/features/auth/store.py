"""Refresh token session store."""

import asyncio
import logging
import time
from collections.abc import AsyncGenerator, Callable
from contextlib import asynccontextmanager
from datetime import datetime

from sqlalchemy import delete, select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from .exceptions import (
    SessionConflictError,
    SessionNotFoundError,
    StoreCancelledError,
    StoreDeadlineExceededError,
    StoreInternalError,
)
from .models import RefreshToken

logger = logging.getLogger(__name__)

_UPSERT_INSERTS: dict[str, Callable] = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class SessionStore:
    """Persisted refresh token sessions, at most one per principal.

    The store never commits: it works inside the caller's transaction. Every
    operation is bounded by ``deadline`` (event loop time, as used by
    ``asyncio.timeout_at``), and failures are translated into the store error
    kinds so that a timeout is never mistaken for a missing record.
    """

    def __init__(self, session: AsyncSession, deadline: float | None = None):
        self.session = session
        self.deadline = deadline

    @classmethod
    def for_request(cls, session: AsyncSession, timeout: float) -> "SessionStore":
        """Create a store whose deadline is ``timeout`` seconds from now."""
        return cls(session, deadline=asyncio.get_running_loop().time() + timeout)

    @asynccontextmanager
    async def _operation(self, name: str, principal_id: int | None = None) -> AsyncGenerator[None]:
        started = time.perf_counter()
        try:
            async with asyncio.timeout_at(self.deadline):
                yield
        except TimeoutError as err:
            elapsed = time.perf_counter() - started
            logger.error(f"Session store {name} exceeded deadline: principal_id={principal_id} elapsed={elapsed:.3f}s")
            raise StoreDeadlineExceededError(name) from err
        except asyncio.CancelledError as err:
            elapsed = time.perf_counter() - started
            logger.warning(f"Session store {name} cancelled: principal_id={principal_id} elapsed={elapsed:.3f}s")
            raise StoreCancelledError(name) from err
        except IntegrityError as err:
            logger.info(f"Session store {name} conflict: principal_id={principal_id}")
            raise SessionConflictError() from err
        except SQLAlchemyError as err:
            elapsed = time.perf_counter() - started
            logger.error(
                f"Session store {name} failed: principal_id={principal_id} elapsed={elapsed:.3f}s error={err!r}"
            )
            raise StoreInternalError(name, str(err)) from err

    async def create(self, principal_id: int, token: str, expires_at: datetime) -> None:
        """Insert a new session.

        Raises:
            SessionConflictError: If the principal already has a session or the token is taken

        """
        async with self._operation("create", principal_id):
            stmt = self._insert()(RefreshToken).values(user_id=principal_id, token=token, expires_at=expires_at)
            await self.session.execute(stmt)

    async def replace(
        self,
        principal_id: int,
        new_token: str,
        new_expires_at: datetime,
        expected_token: str | None = None,
    ) -> None:
        """Atomically swap the principal's session for a new one.

        Without ``expected_token`` this is an upsert keyed on the principal: any
        previous session is overwritten. With it, the row is only rewritten if
        it still holds ``expected_token``; of two concurrent rotations of the
        same token exactly one matches.

        Raises:
            SessionNotFoundError: If ``expected_token`` is no longer the principal's token
            SessionConflictError: If ``new_token`` belongs to another session

        """
        async with self._operation("replace", principal_id):
            if expected_token is None:
                insert = self._insert()
                stmt = insert(RefreshToken).values(user_id=principal_id, token=new_token, expires_at=new_expires_at)
                stmt = stmt.on_conflict_do_update(
                    index_elements=[RefreshToken.user_id],
                    set_={
                        "token": stmt.excluded.token,
                        "expires_at": stmt.excluded.expires_at,
                        "created_at": stmt.excluded.created_at,
                    },
                )
                await self.session.execute(stmt)
                return

            stmt = (
                update(RefreshToken)
                .where(RefreshToken.user_id == principal_id, RefreshToken.token == expected_token)
                .values(token=new_token, expires_at=new_expires_at)
            )
            result = await self.session.execute(stmt)
            if result.rowcount == 0:
                raise SessionNotFoundError(detail="Session was rotated or revoked")

    async def get_by_token(self, token: str) -> RefreshToken:
        """Raises SessionNotFoundError if no session holds ``token``."""
        async with self._operation("get_by_token"):
            stmt = select(RefreshToken).where(RefreshToken.token == token).execution_options(populate_existing=True)
            result = await self.session.execute(stmt)
            record = result.scalar_one_or_none()

        if record is None:
            raise SessionNotFoundError()
        return record

    async def get_by_principal(self, principal_id: int) -> RefreshToken:
        """Raises SessionNotFoundError if the principal has no session."""
        async with self._operation("get_by_principal", principal_id):
            stmt = (
                select(RefreshToken)
                .where(RefreshToken.user_id == principal_id)
                .execution_options(populate_existing=True)
            )
            result = await self.session.execute(stmt)
            record = result.scalar_one_or_none()

        if record is None:
            raise SessionNotFoundError()
        return record

    async def delete(self, principal_id: int) -> None:
        """Raises SessionNotFoundError if the principal has no session."""
        async with self._operation("delete", principal_id):
            stmt = delete(RefreshToken).where(RefreshToken.user_id == principal_id)
            result = await self.session.execute(stmt)

        if result.rowcount == 0:
            raise SessionNotFoundError()

    async def delete_expired(self, now: datetime) -> int:
        """Remove sessions that expired at or before ``now``. Returns the count."""
        async with self._operation("delete_expired"):
            stmt = delete(RefreshToken).where(RefreshToken.expires_at <= now)
            result = await self.session.execute(stmt)

        logger.info(f"Removed {result.rowcount} expired sessions")
        return result.rowcount

    def _insert(self) -> Callable:
        dialect = self.session.get_bind().dialect.name
        try:
            return _UPSERT_INSERTS[dialect]
        except KeyError:
            raise StoreInternalError("insert", f"unsupported dialect {dialect}") from None
