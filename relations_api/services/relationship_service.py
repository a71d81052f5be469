"""
Friend requests, friendships and directed relations between users.

Per unordered pair of users a friendship moves NONE -> REQUESTED -> ESTABLISHED
and back to NONE through cancellation or removal. Trust and one-shot friend
relations skip the request and go straight from NONE to ESTABLISHED, one
direction at a time.

Every operation runs its guards in a fixed order and writes nothing until all
of them pass. Friend-request and friendship writes first lock both user rows
of the pair, so their guards read state no concurrent transaction can change
before the commit. The unique indexes on the pair keys back the guards up:
when a concurrent writer still wins the race the commit fails with
IntegrityError and, once the conflicting row is confirmed to exist, the
caller gets the same error the guard would have raised.
"""
import logging
from typing import List

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from relations_api.models import DirectedRelation, MutualRelation, RelationRequest, User
from relations_api.repositories import (
    DirectedRelationRepository,
    MutualRelationRepository,
    RelationRequestRepository,
)
from relations_api.schemas.relations import (
    DirectedRelationKind,
    DirectedRelationView,
    RelationshipState,
    RelationshipStatusResponse,
    RequestDirection,
)
from relations_api.services.errors import (
    AlreadyEstablished,
    AlreadyExists,
    NotParticipant,
    ReceiverNotFound,
    RelationNotFound,
    RequestAlreadyExists,
    RequestNotFound,
    SelfRelationError,
    UserNotFound,
)
from relations_api.services.user_directory import lock_pair, resolve_by_name

logger = logging.getLogger(__name__)


async def _resolve(db: AsyncSession, username: str, error: type = ReceiverNotFound) -> User:
    user = await resolve_by_name(db, username)
    if not user:
        logger.info(f"Rejected: no user named {username!r}")
        raise error()
    return user


async def send_request(db: AsyncSession, sender_id: str, receiver_name: str) -> RelationRequest:
    """
    Send a friend request to another user.

    Args:
        db: AsyncSession for database operations
        sender_id: uid of the authenticated sender
        receiver_name: Username of the user to befriend

    Returns:
        RelationRequest: The created request

    Raises:
        ReceiverNotFound: If no user has that username
        SelfRelationError: If the sender targets themself
        RequestAlreadyExists: If a request is pending in either direction
        AlreadyEstablished: If the two users are already friends
    """
    receiver = await _resolve(db, receiver_name)
    receiver_id = receiver.id

    # Cheap self check first, before any store lookup
    if receiver_id == sender_id:
        raise SelfRelationError("Cannot friend yourself.")

    await lock_pair(db, sender_id, receiver_id)

    requests = RelationRequestRepository(db)
    friendships = MutualRelationRepository(db)

    if await requests.find_either_direction(sender_id, receiver_id):
        raise RequestAlreadyExists()
    if await friendships.find_either_direction(sender_id, receiver_id):
        raise AlreadyEstablished()

    try:
        friend_request = await requests.create(sender_id, receiver_id)
        await db.commit()
    except IntegrityError:
        await db.rollback()
        # A foreign key failure (user deleted mid-flight) is not a duplicate
        if await requests.find_either_direction(sender_id, receiver_id):
            logger.info(f"Duplicate friend request {sender_id} -> {receiver_id} rejected by unique index")
            raise RequestAlreadyExists()
        raise

    logger.info(f"Friend request {friend_request.id} created: {sender_id} -> {receiver_id}")
    return await requests.find_by_id(friend_request.id)


async def cancel_request(db: AsyncSession, actor_id: str, request_id: str) -> RelationRequest:
    """
    Withdraw (as sender) or decline (as receiver) a pending friend request.

    Both simply delete the request; the pair goes back to NONE.

    Raises:
        RequestNotFound: If the request does not exist
        NotParticipant: If the actor is neither sender nor receiver
    """
    requests = RelationRequestRepository(db)
    friend_request = await requests.find_by_id(request_id)
    if not friend_request:
        raise RequestNotFound()
    if actor_id not in (friend_request.sender_id, friend_request.receiver_id):
        raise NotParticipant()

    await requests.delete_by_id(request_id)
    await db.commit()
    logger.info(f"Friend request {request_id} removed by {actor_id}")
    return friend_request


async def confirm_request(db: AsyncSession, actor_id: str, request_id: str) -> MutualRelation:
    """
    Accept a pending friend request. The request is consumed in the same
    transaction that creates the friendship.

    Raises:
        RequestNotFound: If the request does not exist
        NotParticipant: If the actor is not the receiver of the request
        AlreadyEstablished: If the two users are already friends
    """
    requests = RelationRequestRepository(db)
    friendships = MutualRelationRepository(db)

    friend_request = await requests.find_by_id(request_id)
    if not friend_request:
        raise RequestNotFound()
    if friend_request.receiver_id != actor_id:
        raise NotParticipant("Only the receiver can confirm a friend request.")
    sender_id, receiver_id = friend_request.sender_id, friend_request.receiver_id

    await lock_pair(db, sender_id, receiver_id)
    # The sender may have withdrawn it while we waited for the lock
    if not await requests.find_by_id(request_id):
        raise RequestNotFound()
    if await friendships.find_either_direction(sender_id, receiver_id):
        raise AlreadyEstablished()

    try:
        friendship = await friendships.create(sender_id, receiver_id)
        await requests.delete_by_id(request_id)
        await db.commit()
    except IntegrityError:
        await db.rollback()
        if await friendships.find_either_direction(sender_id, receiver_id):
            raise AlreadyEstablished()
        raise

    logger.info(f"Friend request {request_id} confirmed as friendship {friendship.id}")
    return await friendships.find_by_id(friendship.id)


async def establish_friendship(db: AsyncSession, user_id: str, other_name: str) -> MutualRelation:
    """
    Make two users friends without the request phase. Any pending request
    between them is consumed.

    Raises:
        ReceiverNotFound: If no user has that username
        SelfRelationError: If the user targets themself
        AlreadyEstablished: If the two users are already friends
    """
    other = await _resolve(db, other_name)
    other_id = other.id
    if other_id == user_id:
        raise SelfRelationError("Cannot friend yourself.")

    await lock_pair(db, user_id, other_id)

    friendships = MutualRelationRepository(db)
    if await friendships.find_either_direction(user_id, other_id):
        raise AlreadyEstablished()

    try:
        friendship = await friendships.create(user_id, other_id)
        await RelationRequestRepository(db).delete_pair(user_id, other_id)
        await db.commit()
    except IntegrityError:
        await db.rollback()
        if await friendships.find_either_direction(user_id, other_id):
            raise AlreadyEstablished()
        raise

    logger.info(f"Friendship {friendship.id} established between {user_id} and {other_id}")
    return await friendships.find_by_id(friendship.id)


async def remove_friendship(db: AsyncSession, user_id: str, other_name: str) -> None:
    """
    Unfriend another user.

    Raises:
        UserNotFound: If no user has that username
        RelationNotFound: If the two users are not friends
    """
    other = await _resolve(db, other_name, UserNotFound)

    friendships = MutualRelationRepository(db)
    friendship = await friendships.find_either_direction(user_id, other.id)
    if not friendship:
        raise RelationNotFound("No friendship between you and this user.")

    await friendships.delete_by_id(friendship.id)
    await db.commit()
    logger.info(f"Friendship {friendship.id} removed by {user_id}")


async def get_relationship_status(db: AsyncSession, user_id: str, other_name: str) -> RelationshipStatusResponse:
    other = await _resolve(db, other_name, UserNotFound)
    if other.id == user_id:
        raise SelfRelationError("You have no relationship with yourself.")

    friendship = await MutualRelationRepository(db).find_either_direction(user_id, other.id)
    if friendship:
        return RelationshipStatusResponse(
            username=other.username,
            state=RelationshipState.ESTABLISHED,
            friendship_id=friendship.id,
        )

    friend_request = await RelationRequestRepository(db).find_either_direction(user_id, other.id)
    if friend_request:
        return RelationshipStatusResponse(
            username=other.username,
            state=RelationshipState.REQUESTED,
            request_id=friend_request.id,
            requested_by_me=friend_request.sender_id == user_id,
        )

    return RelationshipStatusResponse(username=other.username, state=RelationshipState.NONE)


async def list_requests(db: AsyncSession, user_id: str, direction: RequestDirection) -> List[RelationRequest]:
    requests = RelationRequestRepository(db)
    if direction == RequestDirection.SENT:
        return await requests.list_sent_by(user_id)
    return await requests.list_received_by(user_id)


async def list_friendships(db: AsyncSession, user_id: str) -> List[MutualRelation]:
    return await MutualRelationRepository(db).list_involving(user_id)


async def establish(db: AsyncSession, kind: DirectedRelationKind, giver_id: str, receiver_name: str) -> DirectedRelation:
    """
    Create a one-way relation (trust, one-shot friend) from giver to receiver.

    The reverse direction is independent: B trusting A does not stop A from
    trusting B.

    Raises:
        ReceiverNotFound: If no user has that username
        SelfRelationError: If the giver targets themself
        AlreadyExists: If the giver already has this relation to the receiver
    """
    receiver = await _resolve(db, receiver_name)
    receiver_id = receiver.id
    if receiver_id == giver_id:
        raise SelfRelationError(f"Cannot {kind.value} yourself.")

    relations = DirectedRelationRepository(db, kind)
    if await relations.find(giver_id, receiver_id):
        raise AlreadyExists(f"You have already given {kind.value} to this user.")

    try:
        relation = await relations.create(giver_id, receiver_id)
        await db.commit()
    except IntegrityError:
        await db.rollback()
        if await relations.find(giver_id, receiver_id):
            raise AlreadyExists(f"You have already given {kind.value} to this user.")
        raise

    logger.info(f"{kind.value} relation {relation.id} created: {giver_id} -> {receiver_id}")
    return await relations.find(giver_id, receiver_id)


async def revoke(db: AsyncSession, kind: DirectedRelationKind, giver_id: str, receiver_name: str) -> None:
    """
    Remove a one-way relation given by *giver_id*.

    Raises:
        UserNotFound: If no user has that username
        RelationNotFound: If the giver has no such relation to the receiver
    """
    receiver = await _resolve(db, receiver_name, UserNotFound)

    relations = DirectedRelationRepository(db, kind)
    if not await relations.find(giver_id, receiver.id):
        raise RelationNotFound(f"No {kind.value} between you and this user.")

    await relations.delete_one(giver_id, receiver.id)
    await db.commit()
    logger.info(f"{kind.value} relation {giver_id} -> {receiver.id} revoked")


async def list_directed(
    db: AsyncSession, kind: DirectedRelationKind, user_id: str, view: DirectedRelationView
) -> List[DirectedRelation]:
    relations = DirectedRelationRepository(db, kind)
    if view == DirectedRelationView.RECEIVED:
        return await relations.list_received_by(user_id)
    return await relations.list_given_by(user_id)


async def delete_all_relations_of(db: AsyncSession, user_id: str) -> int:
    """
    Delete every request, friendship and directed relation referencing
    *user_id* in either slot. Does not commit; account deletion commits it
    together with removing the user row.

    Returns:
        int: Number of records deleted
    """
    deleted = await RelationRequestRepository(db).delete_all_involving(user_id)
    deleted += await MutualRelationRepository(db).delete_all_involving(user_id)
    for kind in DirectedRelationKind:
        deleted += await DirectedRelationRepository(db, kind).delete_all_involving(user_id)
    return deleted

