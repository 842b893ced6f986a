"""Tests for the expired session sweep."""

import asyncio
from contextlib import asynccontextmanager
from datetime import timedelta

from studies_api.features.auth import cleanup
from studies_api.features.auth.exceptions import StoreCancelledError
from studies_api.features.auth.store import SessionStore
from studies_api.features.auth.token_codec import utc_now


async def test_purge_expired_sessions(session_factory, make_user, monkeypatch):
    expired_owner = await make_user()
    valid_owner = await make_user()

    @asynccontextmanager
    async def _get_session():
        async with session_factory() as sweep_session:
            yield sweep_session
            await sweep_session.commit()

    monkeypatch.setattr(cleanup, "get_session", _get_session)

    async with session_factory() as setup_session:
        store = SessionStore(setup_session)
        await store.create(expired_owner.id, "expired", utc_now() - timedelta(minutes=1))
        await store.create(valid_owner.id, "valid", utc_now() + timedelta(days=1))
        await setup_session.commit()

    assert await cleanup.purge_expired_sessions() == 1

    async with session_factory() as check_session:
        record = await SessionStore(check_session).get_by_principal(valid_owner.id)
    assert record.token == "valid"


async def test_periodic_cleanup_survives_failures(monkeypatch):
    calls = 0

    async def _purge():
        nonlocal calls
        calls += 1
        if calls == 1:
            raise RuntimeError("database unavailable")
        if calls == 3:
            raise StoreCancelledError("delete_expired")
        return 0

    monkeypatch.setattr(cleanup, "purge_expired_sessions", _purge)

    await asyncio.wait_for(cleanup.periodic_cleanup(0), timeout=1)

    assert calls == 3
