"""Password hashing utilities using bcrypt.

bcrypt is CPU-bound, so hashing runs in a small thread pool to keep the
event loop (and any open chat streams) responsive.
"""

import asyncio
from concurrent.futures import ThreadPoolExecutor

import bcrypt

from smart_tutor.core.config import settings

_executor = ThreadPoolExecutor(max_workers=4, thread_name_prefix="bcrypt")

# Compared against when the email is unknown so login timing does not leak it.
DUMMY_HASH = bcrypt.hashpw(b"dummy", bcrypt.gensalt(rounds=4)).decode()


def _hash(password: str) -> str:
    salt = bcrypt.gensalt(rounds=settings.auth.bcrypt_rounds)
    return bcrypt.hashpw(password.encode(), salt).decode()


async def hash_password(password: str) -> str:
    """Hash a password using bcrypt."""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(_executor, _hash, password)


async def verify_password(plain: str, hashed: str) -> bool:
    """Verify a password against a bcrypt hash."""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(
        _executor,
        lambda: bcrypt.checkpw(plain.encode(), hashed.encode()),
    )
