"""Create an admin account, or promote an existing one.

Usage:
    python -m scripts.create_admin --email admin@dlh.example --password Admin1234!
"""

import argparse
import asyncio

from sqlalchemy import select, update

from smart_tutor.core.database import Base, async_session_factory, engine
from smart_tutor.core.security import hash_password
from smart_tutor.models.user import User


async def create_admin(email: str, password: str, full_name: str) -> None:
    """Create an admin user, or grant the admin role to an existing one."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    email = email.lower().strip()
    async with async_session_factory() as session:
        result = await session.execute(select(User).where(User.email == email))
        existing = result.scalar_one_or_none()
        if existing:
            if existing.role == "admin":
                print(f"'{email}' is already an admin (id={existing.id}).")
            else:
                await session.execute(
                    update(User).where(User.id == existing.id).values(role="admin")
                )
                await session.commit()
                print(f"Promoted '{email}' to admin (id={existing.id}).")
            return

        user = User(
            email=email,
            hashed_password=await hash_password(password),
            full_name=full_name,
            role="admin",
            is_verified=True,
        )
        session.add(user)
        await session.commit()
        print(f"Admin user created: {email} (id={user.id})")

    await engine.dispose()


def main() -> None:
    parser = argparse.ArgumentParser(description="Create an admin user")
    parser.add_argument("--email", required=True, help="Admin email")
    parser.add_argument("--password", required=True, help="Admin password")
    parser.add_argument("--full-name", default="DLH Admin", help="Display name")
    args = parser.parse_args()

    asyncio.run(create_admin(args.email, args.password, args.full_name))


if __name__ == "__main__":
    main()
