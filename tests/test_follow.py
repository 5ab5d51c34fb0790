import pytest
from httpx import AsyncClient
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from astrosocial.models import UserFollow

BASE = "/api/v1/user"


async def _edges(db_session: AsyncSession):
    result = await db_session.exec(select(UserFollow))
    return {(edge.follower_id, edge.followed_id) for edge in result.all()}


@pytest.mark.asyncio
async def test_follow_user(client: AsyncClient, db_session: AsyncSession, make_user, auth_headers):
    alice = await make_user("alice")
    bob = await make_user("bob")

    response = await client.post(f"{BASE}/{alice.id}/follow/{bob.id}", headers=auth_headers(alice))

    assert response.status_code == 200
    assert response.json() == {"message": f"Successfully followed user {bob.id}"}
    assert await _edges(db_session) == {(alice.id, bob.id)}


@pytest.mark.asyncio
async def test_follow_twice_is_noop(client: AsyncClient, db_session: AsyncSession, make_user, auth_headers):
    alice = await make_user("alice")
    bob = await make_user("bob")
    url = f"{BASE}/{alice.id}/follow/{bob.id}"

    await client.post(url, headers=auth_headers(alice))
    response = await client.post(url, headers=auth_headers(alice))

    assert response.status_code == 200
    assert response.json() == {"message": "Already following this user"}
    assert await _edges(db_session) == {(alice.id, bob.id)}


@pytest.mark.asyncio
async def test_cannot_follow_self(client: AsyncClient, db_session: AsyncSession, make_user, auth_headers):
    user = await make_user("loner", id=5)

    response = await client.post(f"{BASE}/5/follow/5", headers=auth_headers(user))

    assert response.status_code == 400
    assert response.json()["error_code"] == "CANNOT_FOLLOW_SELF"
    assert await _edges(db_session) == set()


@pytest.mark.asyncio
async def test_follow_missing_target(client: AsyncClient, make_user, auth_headers):
    alice = await make_user("alice")

    response = await client.post(f"{BASE}/{alice.id}/follow/9999", headers=auth_headers(alice))

    assert response.status_code == 404
    assert response.json()["error_code"] == "USER_NOT_FOUND"


@pytest.mark.asyncio
async def test_cannot_follow_on_behalf_of_someone_else(
    client: AsyncClient, db_session: AsyncSession, make_user, auth_headers
):
    alice = await make_user("alice")
    bob = await make_user("bob")
    carol = await make_user("carol")

    response = await client.post(f"{BASE}/{alice.id}/follow/{bob.id}", headers=auth_headers(carol))

    assert response.status_code == 403
    assert await _edges(db_session) == set()


@pytest.mark.asyncio
async def test_follow_requires_numeric_ids(client: AsyncClient, make_user, auth_headers):
    alice = await make_user("alice")

    response = await client.post(f"{BASE}/{alice.id}/follow/bob", headers=auth_headers(alice))

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_unfollow_user(client: AsyncClient, db_session: AsyncSession, make_user, auth_headers):
    alice = await make_user("alice")
    bob = await make_user("bob")
    db_session.add(UserFollow(follower_id=alice.id, followed_id=bob.id))
    db_session.add(UserFollow(follower_id=bob.id, followed_id=alice.id))
    await db_session.commit()
    url = f"{BASE}/{alice.id}/unfollow/{bob.id}"

    first = await client.delete(url, headers=auth_headers(alice))
    second = await client.delete(url, headers=auth_headers(alice))

    assert first.status_code == 200
    assert first.json() == {"message": f"Successfully unfollowed user {bob.id}"}
    assert second.status_code == 200
    assert second.json() == {"message": "No existing follow relationship"}
    # Only the alice -> bob direction is removed
    assert await _edges(db_session) == {(bob.id, alice.id)}


@pytest.mark.asyncio
async def test_cannot_unfollow_self(client: AsyncClient, make_user, auth_headers):
    alice = await make_user("alice")

    response = await client.delete(f"{BASE}/{alice.id}/unfollow/{alice.id}", headers=auth_headers(alice))

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_admin_can_follow_for_user(client: AsyncClient, db_session: AsyncSession, make_user, auth_headers):
    alice = await make_user("alice")
    bob = await make_user("bob")
    admin = await make_user("admin", is_admin=True)

    response = await client.post(f"{BASE}/{alice.id}/follow/{bob.id}", headers=auth_headers(admin))

    assert response.status_code == 200
    assert await _edges(db_session) == {(alice.id, bob.id)}


@pytest.mark.asyncio
async def test_followers_and_following(client: AsyncClient, make_user, auth_headers):
    alice = await make_user("alice")
    bob = await make_user("bob")
    carol = await make_user("carol")

    await client.post(f"{BASE}/{bob.id}/follow/{alice.id}", headers=auth_headers(bob))
    await client.post(f"{BASE}/{carol.id}/follow/{alice.id}", headers=auth_headers(carol))
    await client.post(f"{BASE}/{alice.id}/follow/{carol.id}", headers=auth_headers(alice))

    followers = await client.get(f"{BASE}/{alice.id}/followers", headers=auth_headers(bob))
    following = await client.get(f"{BASE}/{alice.id}/following", headers=auth_headers(bob))
    missing = await client.get(f"{BASE}/9999/followers", headers=auth_headers(bob))

    assert [u["username"] for u in followers.json()] == ["bob", "carol"]
    assert [u["username"] for u in following.json()] == ["carol"]
    assert missing.status_code == 404
