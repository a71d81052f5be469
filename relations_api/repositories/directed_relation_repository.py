from typing import List, Optional

from sqlalchemy import select, delete, or_
from sqlalchemy.ext.asyncio import AsyncSession

from relations_api.models import DirectedRelation
from relations_api.schemas.relations import DirectedRelationKind
from .base import BaseRepository


class DirectedRelationRepository(BaseRepository):
    """One-way relations of a single kind, keyed by (giver, receiver).

    ``create`` does not check for an existing record; callers check with
    :meth:`find` first and the unique index rejects whatever slips through.
    """

    def __init__(self, db: AsyncSession, kind: DirectedRelationKind) -> None:
        super().__init__(db)
        self.kind = kind

    async def create(self, giver_id: str, receiver_id: str) -> DirectedRelation:
        relation = DirectedRelation(kind=self.kind, giver_id=giver_id, receiver_id=receiver_id)
        return await self._add(relation)

    async def find(self, giver_id: str, receiver_id: str) -> Optional[DirectedRelation]:
        return await self._first(
            select(DirectedRelation).where(
                DirectedRelation.kind == self.kind,
                DirectedRelation.giver_id == giver_id,
                DirectedRelation.receiver_id == receiver_id,
            )
        )

    async def delete_one(self, giver_id: str, receiver_id: str) -> bool:
        deleted = await self._delete(
            delete(DirectedRelation).where(
                DirectedRelation.kind == self.kind,
                DirectedRelation.giver_id == giver_id,
                DirectedRelation.receiver_id == receiver_id,
            )
        )
        return deleted > 0

    async def delete_all_involving(self, user_id: str) -> int:
        """Delete every relation of this kind given or received by *user_id*."""
        deleted = await self._delete(
            delete(DirectedRelation).where(
                DirectedRelation.kind == self.kind,
                or_(DirectedRelation.giver_id == user_id, DirectedRelation.receiver_id == user_id),
            )
        )
        self._log.info("Deleted %d %s relations involving %s", deleted, self.kind.value, user_id)
        return deleted

    async def list_given_by(self, user_id: str) -> List[DirectedRelation]:
        return await self._all(
            select(DirectedRelation)
            .where(DirectedRelation.kind == self.kind, DirectedRelation.giver_id == user_id)
            .order_by(DirectedRelation.created_at.desc())
        )

    async def list_received_by(self, user_id: str) -> List[DirectedRelation]:
        return await self._all(
            select(DirectedRelation)
            .where(DirectedRelation.kind == self.kind, DirectedRelation.receiver_id == user_id)
            .order_by(DirectedRelation.created_at.desc())
        )
