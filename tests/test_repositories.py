from datetime import timedelta

import pytest
from sqlalchemy.exc import IntegrityError

from relations_api.models import DirectedRelation, MutualRelation, RelationRequest
from relations_api.repositories import (
    DirectedRelationRepository,
    MutualRelationRepository,
    RelationRequestRepository,
)
from relations_api.schemas.relations import DirectedRelationKind
from relations_api.utils.pairs import canonical_pair
from relations_api.utils.time_utils import utc_now
from tests.conftest import ALICE, BOB, CAROL, count_rows


def test_canonical_pair_ignores_argument_order():
    assert canonical_pair(BOB, ALICE) == canonical_pair(ALICE, BOB) == (ALICE, BOB)


class TestRelationRequestRepository:

    async def test_find_either_direction_matches_both_orientations(self, db, users):
        repo = RelationRequestRepository(db)
        created = await repo.create(ALICE, BOB)
        await db.commit()

        assert (await repo.find_either_direction(ALICE, BOB)).id == created.id
        assert (await repo.find_either_direction(BOB, ALICE)).id == created.id

    async def test_find_exact_only_matches_stored_direction(self, db, users):
        repo = RelationRequestRepository(db)
        await repo.create(ALICE, BOB)
        await db.commit()

        assert await repo.find_exact(ALICE, BOB) is not None
        assert await repo.find_exact(BOB, ALICE) is None

    async def test_unique_index_rejects_reverse_duplicate(self, db, users):
        repo = RelationRequestRepository(db)
        await repo.create(ALICE, BOB)
        await db.commit()

        with pytest.raises(IntegrityError):
            await repo.create(BOB, ALICE)
        await db.rollback()
        assert await count_rows(db, RelationRequest) == 1

    async def test_listings_are_most_recent_first(self, db, users):
        repo = RelationRequestRepository(db)
        older = await repo.create(ALICE, BOB)
        newer = await repo.create(ALICE, CAROL)
        older.created_at = utc_now() - timedelta(minutes=5)
        await db.commit()

        sent = await repo.list_sent_by(ALICE)
        assert [r.id for r in sent] == [newer.id, older.id]
        assert [r.id for r in await repo.list_received_by(BOB)] == [older.id]
        assert await repo.list_received_by(ALICE) == []

    async def test_delete_all_involving_covers_both_slots(self, db, users):
        repo = RelationRequestRepository(db)
        await repo.create(ALICE, BOB)
        await repo.create(CAROL, ALICE)
        await repo.create(BOB, CAROL)
        await db.commit()

        assert await repo.delete_all_involving(ALICE) == 2
        await db.commit()
        assert await count_rows(db, RelationRequest, (RelationRequest.sender_id == ALICE) | (RelationRequest.receiver_id == ALICE)) == 0
        assert await count_rows(db, RelationRequest) == 1

    async def test_delete_by_id_reports_missing(self, db, users):
        repo = RelationRequestRepository(db)
        created = await repo.create(ALICE, BOB)
        await db.commit()

        assert await repo.delete_by_id(created.id) is True
        assert await repo.delete_by_id(created.id) is False


class TestMutualRelationRepository:

    async def test_pair_is_stored_in_canonical_order(self, db, users):
        repo = MutualRelationRepository(db)
        friendship = await repo.create(BOB, ALICE)
        await db.commit()

        assert (friendship.user_one_id, friendship.user_two_id) == (ALICE, BOB)
        assert friendship.other_user_id(ALICE) == BOB
        assert (await repo.find_either_direction(BOB, ALICE)).id == friendship.id
        assert (await repo.find_either_direction(ALICE, BOB)).id == friendship.id

    async def test_unique_index_rejects_second_friendship(self, db, users):
        repo = MutualRelationRepository(db)
        await repo.create(ALICE, BOB)
        await db.commit()

        with pytest.raises(IntegrityError):
            await repo.create(BOB, ALICE)
        await db.rollback()
        assert await count_rows(db, MutualRelation) == 1

    async def test_delete_all_involving_covers_both_slots(self, db, users):
        repo = MutualRelationRepository(db)
        # bob sorts between alice and carol, so he lands in both slots
        await repo.create(BOB, ALICE)
        await repo.create(BOB, CAROL)
        await repo.create(CAROL, ALICE)
        await db.commit()

        assert len(await repo.list_involving(BOB)) == 2
        assert await repo.delete_all_involving(BOB) == 2
        await db.commit()
        assert await repo.list_involving(BOB) == []
        assert await count_rows(db, MutualRelation) == 1


class TestDirectedRelationRepository:

    async def test_kinds_are_independent(self, db, users):
        trust = DirectedRelationRepository(db, DirectedRelationKind.TRUST)
        friend = DirectedRelationRepository(db, DirectedRelationKind.FRIEND)
        await trust.create(ALICE, BOB)
        await db.commit()

        assert await trust.find(ALICE, BOB) is not None
        assert await friend.find(ALICE, BOB) is None
        assert await trust.find(BOB, ALICE) is None

    async def test_delete_one(self, db, users):
        trust = DirectedRelationRepository(db, DirectedRelationKind.TRUST)
        await trust.create(ALICE, BOB)
        await db.commit()

        assert await trust.delete_one(BOB, ALICE) is False
        assert await trust.delete_one(ALICE, BOB) is True
        await db.commit()
        assert await count_rows(db, DirectedRelation) == 0

    async def test_given_and_received_listings(self, db, users):
        trust = DirectedRelationRepository(db, DirectedRelationKind.TRUST)
        first = await trust.create(ALICE, BOB)
        second = await trust.create(ALICE, CAROL)
        await trust.create(CAROL, BOB)
        first.created_at = utc_now() - timedelta(hours=1)
        await db.commit()

        assert [r.id for r in await trust.list_given_by(ALICE)] == [second.id, first.id]
        received = await trust.list_received_by(BOB)
        assert {r.giver_id for r in received} == {ALICE, CAROL}
        assert received[0].giver.username == "carol"

    async def test_delete_all_involving_only_touches_its_kind(self, db, users):
        trust = DirectedRelationRepository(db, DirectedRelationKind.TRUST)
        friend = DirectedRelationRepository(db, DirectedRelationKind.FRIEND)
        await trust.create(ALICE, BOB)
        await trust.create(BOB, ALICE)
        await friend.create(ALICE, CAROL)
        await db.commit()

        assert await trust.delete_all_involving(ALICE) == 2
        await db.commit()
        assert await count_rows(db, DirectedRelation) == 1
