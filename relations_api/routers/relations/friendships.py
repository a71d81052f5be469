import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from relations_api.init_db import get_db
from relations_api.common import get_current_account
from relations_api.models import User
from relations_api.schemas.relations import (
    FriendshipEnvelope,
    FriendshipListEnvelope,
    FriendshipResponse,
    RelationshipStatusEnvelope,
    RelationTarget,
)
from relations_api.schemas.users import MessageResponse
from relations_api.services.relationship_service import (
    establish_friendship,
    get_relationship_status,
    list_friendships,
    remove_friendship,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/friendships", tags=["friendships"])


@router.get("", response_model=FriendshipListEnvelope)
async def get_friendships_api(
    db: AsyncSession = Depends(get_db),
    account: User = Depends(get_current_account)
):
    friendships = await list_friendships(db, account.id)
    return FriendshipListEnvelope(
        message=f"You (username: {account.username}) are friends with:",
        friendships=[FriendshipResponse.from_model(f) for f in friendships]
    )

@router.post("", response_model=FriendshipEnvelope, status_code=status.HTTP_201_CREATED)
async def establish_friendship_api(
    target: RelationTarget,
    db: AsyncSession = Depends(get_db),
    account: User = Depends(get_current_account)
):
    """
    Become friends with another user directly, skipping the request phase.

    Args:
        target: RelationTarget naming the other user
        db: Database session
        account: Registered account of the caller

    Returns:
        FriendshipEnvelope: The new friendship
    """
    friendship = await establish_friendship(db, account.id, target.username)
    return FriendshipEnvelope(
        message=f"You are now friends with {target.username}!",
        friendship=FriendshipResponse.from_model(friendship)
    )

@router.get("/status/{username}", response_model=RelationshipStatusEnvelope)
async def get_friendship_status_api(
    username: str,
    db: AsyncSession = Depends(get_db),
    account: User = Depends(get_current_account)
):
    relationship_status = await get_relationship_status(db, account.id, username)
    return RelationshipStatusEnvelope(
        message=f"Relationship with {username}: {relationship_status.state.value}.",
        status=relationship_status
    )

@router.delete("/{username}", response_model=MessageResponse)
async def remove_friendship_api(
    username: str,
    db: AsyncSession = Depends(get_db),
    account: User = Depends(get_current_account)
):
    """
    Unfriend another user.

    Raises:
        404: The user does not exist
        409: The two users are not friends
    """
    await remove_friendship(db, account.id, username)
    return MessageResponse(message=f"You are no longer friends with {username}.")
