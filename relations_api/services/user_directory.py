"""Lookups of user identities, by username or by uid, and per-pair row locks."""
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from relations_api.models import User
from relations_api.utils.pairs import canonical_pair


async def resolve_by_name(db: AsyncSession, username: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.username == username))
    return result.scalar_one_or_none()


async def resolve_by_id(db: AsyncSession, user_id: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


def pair_lock_statement(user_a: str, user_b: str):
    # Sorted so two transactions locking the same pair never deadlock
    return (
        select(User)
        .where(User.id.in_(canonical_pair(user_a, user_b)))
        .order_by(User.id)
        .with_for_update()
    )


async def lock_pair(db: AsyncSession, user_a: str, user_b: str) -> List[User]:
    """
    Lock both user rows of a pair until the current transaction ends.

    Every write that moves a pair between NONE, REQUESTED and ESTABLISHED
    takes this lock before reading the pair's state, so a request can never
    be stored next to a friendship committed by a concurrent transaction.
    """
    result = await db.execute(pair_lock_statement(user_a, user_b))
    return list(result.scalars().all())
