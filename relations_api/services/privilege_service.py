import logging

from sqlalchemy.ext.asyncio import AsyncSession

from relations_api.repositories import DirectedRelationRepository, MutualRelationRepository
from relations_api.schemas.relations import DirectedRelationKind
from relations_api.schemas.users import Privileges
from relations_api.services.errors import UserNotFound
from relations_api.services.user_directory import resolve_by_name

logger = logging.getLogger(__name__)

UPVOTE_LEVEL = 1
ENDORSE_LEVEL = 2


def privileges_for_level(user_id: str, username: str, level: int) -> Privileges:
    return Privileges(
        user_id=user_id,
        username=username,
        level=level,
        can_upvote=level >= UPVOTE_LEVEL,
        can_endorse=level >= ENDORSE_LEVEL,
    )


async def get_privileges(db: AsyncSession, username: str) -> Privileges:
    """
    Derive a user's level and capabilities from their relation counts.

    The level is the number of friendships plus the number of users trusting
    them. Nothing is stored; the result always reflects committed relations.

    Raises:
        UserNotFound: If no user has that username
    """
    user = await resolve_by_name(db, username)
    if not user:
        raise UserNotFound()

    friendships = await MutualRelationRepository(db).list_involving(user.id)
    trusted_by = await DirectedRelationRepository(db, DirectedRelationKind.TRUST).list_received_by(user.id)
    level = len(friendships) + len(trusted_by)
    logger.debug(f"User {user.id} level {level} ({len(friendships)} friends, trusted by {len(trusted_by)})")
    return privileges_for_level(user.id, user.username, level)
