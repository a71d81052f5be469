from typing import List, Optional

from sqlalchemy import select, delete, or_

from relations_api.models import MutualRelation
from relations_api.utils.pairs import canonical_pair
from .base import BaseRepository


class MutualRelationRepository(BaseRepository):
    """Confirmed friendships, one canonical row per unordered pair."""

    async def create(self, user_a: str, user_b: str) -> MutualRelation:
        user_one_id, user_two_id = canonical_pair(user_a, user_b)
        friendship = MutualRelation(user_one_id=user_one_id, user_two_id=user_two_id)
        return await self._add(friendship)

    async def find_by_id(self, friendship_id: str) -> Optional[MutualRelation]:
        return await self._first(select(MutualRelation).where(MutualRelation.id == friendship_id))

    async def find_either_direction(self, user_a: str, user_b: str) -> Optional[MutualRelation]:
        user_one_id, user_two_id = canonical_pair(user_a, user_b)
        return await self._first(
            select(MutualRelation).where(
                MutualRelation.user_one_id == user_one_id,
                MutualRelation.user_two_id == user_two_id,
            )
        )

    async def list_involving(self, user_id: str) -> List[MutualRelation]:
        return await self._all(
            select(MutualRelation)
            .where(or_(MutualRelation.user_one_id == user_id, MutualRelation.user_two_id == user_id))
            .order_by(MutualRelation.created_at.desc())
        )

    async def delete_by_id(self, friendship_id: str) -> bool:
        deleted = await self._delete(delete(MutualRelation).where(MutualRelation.id == friendship_id))
        return deleted > 0

    async def delete_all_involving(self, user_id: str) -> int:
        deleted = await self._delete(
            delete(MutualRelation).where(
                or_(MutualRelation.user_one_id == user_id, MutualRelation.user_two_id == user_id)
            )
        )
        self._log.info("Deleted %d friendships involving %s", deleted, user_id)
        return deleted
