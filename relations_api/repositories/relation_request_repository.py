from typing import List, Optional

from sqlalchemy import select, delete, or_

from relations_api.models import RelationRequest
from relations_api.utils.pairs import canonical_pair
from .base import BaseRepository


class RelationRequestRepository(BaseRepository):
    """Pending friend requests.

    Each request also stores its participants as a sorted pair; the unique
    index on that pair is what keeps (A, B) and (B, A) from coexisting.
    """

    async def create(self, sender_id: str, receiver_id: str) -> RelationRequest:
        pair_low, pair_high = canonical_pair(sender_id, receiver_id)
        request = RelationRequest(
            sender_id=sender_id,
            receiver_id=receiver_id,
            pair_low=pair_low,
            pair_high=pair_high,
        )
        return await self._add(request)

    async def find_exact(self, sender_id: str, receiver_id: str) -> Optional[RelationRequest]:
        return await self._first(
            select(RelationRequest).where(
                RelationRequest.sender_id == sender_id,
                RelationRequest.receiver_id == receiver_id,
            )
        )

    async def find_either_direction(self, user_a: str, user_b: str) -> Optional[RelationRequest]:
        pair_low, pair_high = canonical_pair(user_a, user_b)
        return await self._first(
            select(RelationRequest).where(
                RelationRequest.pair_low == pair_low,
                RelationRequest.pair_high == pair_high,
            )
        )

    async def find_by_id(self, request_id: str) -> Optional[RelationRequest]:
        return await self._first(select(RelationRequest).where(RelationRequest.id == request_id))

    async def delete_by_id(self, request_id: str) -> bool:
        deleted = await self._delete(delete(RelationRequest).where(RelationRequest.id == request_id))
        return deleted > 0

    async def delete_pair(self, user_a: str, user_b: str) -> bool:
        pair_low, pair_high = canonical_pair(user_a, user_b)
        deleted = await self._delete(
            delete(RelationRequest).where(
                RelationRequest.pair_low == pair_low,
                RelationRequest.pair_high == pair_high,
            )
        )
        return deleted > 0

    async def delete_all_involving(self, user_id: str) -> int:
        deleted = await self._delete(
            delete(RelationRequest).where(
                or_(RelationRequest.sender_id == user_id, RelationRequest.receiver_id == user_id)
            )
        )
        self._log.info("Deleted %d friend requests involving %s", deleted, user_id)
        return deleted

    async def list_sent_by(self, user_id: str) -> List[RelationRequest]:
        return await self._all(
            select(RelationRequest)
            .where(RelationRequest.sender_id == user_id)
            .order_by(RelationRequest.created_at.desc())
        )

    async def list_received_by(self, user_id: str) -> List[RelationRequest]:
        return await self._all(
            select(RelationRequest)
            .where(RelationRequest.receiver_id == user_id)
            .order_by(RelationRequest.created_at.desc())
        )
