from contextlib import asynccontextmanager

import pytest

from astrosocial.scripts.make_admin import make_admin


@pytest.fixture
def session_factory(db_session):
    @asynccontextmanager
    async def _factory():
        yield db_session

    return _factory


@pytest.mark.asyncio
async def test_make_admin(make_user, session_factory):
    user = await make_user("curie")

    assert await make_admin("Curie", session_factory=session_factory) is True
    assert user.is_admin is True

    assert await make_admin("curie", is_admin=False, session_factory=session_factory) is True
    assert user.is_admin is False


@pytest.mark.asyncio
async def test_make_admin_unknown_user(session_factory):
    assert await make_admin("nobody", session_factory=session_factory) is False
