"""Password hashing and verification using Argon2id.

Hashing is deliberately slow (tens to hundreds of milliseconds with the
default cost), so it belongs on the login and registration paths only.
The async wrappers move the work off the event loop.
"""

import asyncio

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError

DEFAULT_TIME_COST = 3
DEFAULT_MEMORY_COST = 65536  # KiB
DEFAULT_PARALLELISM = 4


def build_hasher(
    time_cost: int = DEFAULT_TIME_COST,
    memory_cost: int = DEFAULT_MEMORY_COST,
    parallelism: int = DEFAULT_PARALLELISM,
) -> PasswordHasher:
    """Create an Argon2id PasswordHasher.

    Args:
        time_cost: Adaptive cost parameter (iterations)
        memory_cost: Memory in KiB
        parallelism: Lanes
    """
    return PasswordHasher(
        time_cost=time_cost,
        memory_cost=memory_cost,
        parallelism=parallelism,
    )


def hash_password(
    password: str,
    time_cost: int | None = None,
    hasher: PasswordHasher | None = None,
) -> str:
    """Hash a password using Argon2id."""
    if hasher is None:
        hasher = build_hasher(time_cost=time_cost or DEFAULT_TIME_COST)
    return hasher.hash(password)


def verify_password(
    password: str, password_hash: str, hasher: PasswordHasher | None = None
) -> bool:
    """Verify a password against its hash.

    Returns False on mismatch or on an unreadable hash, never raises.
    Cost parameters are read from the hash itself.
    """
    if hasher is None:
        hasher = PasswordHasher()
    try:
        return hasher.verify(password_hash, password)
    except (VerifyMismatchError, VerificationError, InvalidHashError):
        return False


async def hash_password_async(password: str, hasher: PasswordHasher) -> str:
    return await asyncio.to_thread(hash_password, password, None, hasher)


async def verify_password_async(
    password: str, password_hash: str, hasher: PasswordHasher
) -> bool:
    return await asyncio.to_thread(verify_password, password, password_hash, hasher)
