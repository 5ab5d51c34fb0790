"""
Grant or revoke admin rights from the command line:

    python -m astrosocial.scripts.make_admin <username> [--revoke]
"""
import asyncio
import sys
from astrosocial.db.database import AsyncSessionLocal
from astrosocial.crud.user import get_user_by_username


async def make_admin(username: str, is_admin: bool = True, session_factory=AsyncSessionLocal) -> bool:
    async with session_factory() as session:
        user = await get_user_by_username(session, username)
        if not user:
            print(f"User {username} not found.")
            return False

        user.is_admin = is_admin
        session.add(user)
        await session.commit()
        print(f"{user.username} is {'now' if is_admin else 'no longer'} admin.")
        return True


if __name__ == "__main__":
    if len(sys.argv) < 2:
        sys.exit("usage: python -m astrosocial.scripts.make_admin <username> [--revoke]")
    found = asyncio.run(make_admin(sys.argv[1], is_admin="--revoke" not in sys.argv[2:]))
    sys.exit(0 if found else 1)
