import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from relations_api.init_db import get_db
from relations_api.common import get_current_account
from relations_api.models import User
from relations_api.schemas.relations import (
    FriendshipEnvelope,
    FriendshipResponse,
    RelationRequestEnvelope,
    RelationRequestListEnvelope,
    RelationRequestResponse,
    RelationTarget,
    RequestDirection,
)
from relations_api.schemas.users import MessageResponse
from relations_api.services.relationship_service import cancel_request, confirm_request, list_requests, send_request

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/friend-requests", tags=["friend requests"])


@router.get("", response_model=RelationRequestListEnvelope)
async def get_friend_requests_api(
    direction: RequestDirection = RequestDirection.RECEIVED,
    db: AsyncSession = Depends(get_db),
    account: User = Depends(get_current_account)
):
    """
    Retrieve the friend requests sent or received by the current user,
    most recent first.
    """
    requests = await list_requests(db, account.id, direction)
    prefix = f"You (username: {account.username})"
    if direction == RequestDirection.SENT:
        message = f"{prefix} have sent friend requests to:"
    else:
        message = f"{prefix} have received friend requests from:"
    return RelationRequestListEnvelope(
        message=message,
        requests=[RelationRequestResponse.from_model(r) for r in requests]
    )

@router.post("", response_model=RelationRequestEnvelope, status_code=status.HTTP_201_CREATED)
async def send_friend_request_api(
    target: RelationTarget,
    db: AsyncSession = Depends(get_db),
    account: User = Depends(get_current_account)
):
    """
    Send a friend request to another user.

    Args:
        target: RelationTarget naming the user to befriend
        db: Database session
        account: Registered account of the caller

    Returns:
        RelationRequestEnvelope: The created friend request

    Raises:
        404: The receiver does not exist
        405: The caller targets themself
        409: A request is already pending or the users are already friends
    """
    friend_request = await send_request(db, account.id, target.username)
    return RelationRequestEnvelope(
        message=f"Hooray, you sent a friend request to {target.username}!",
        request=RelationRequestResponse.from_model(friend_request)
    )

@router.post("/{request_id}/confirm", response_model=FriendshipEnvelope, status_code=status.HTTP_201_CREATED)
async def confirm_friend_request_api(
    request_id: str,
    db: AsyncSession = Depends(get_db),
    account: User = Depends(get_current_account)
):
    friendship = await confirm_request(db, account.id, request_id)
    return FriendshipEnvelope(
        message="You are now friends!",
        friendship=FriendshipResponse.from_model(friendship)
    )

@router.delete("/{request_id}", response_model=MessageResponse)
async def cancel_friend_request_api(
    request_id: str,
    db: AsyncSession = Depends(get_db),
    account: User = Depends(get_current_account)
):
    """
    Withdraw a friend request you sent, or decline one you received.
    """
    friend_request = await cancel_request(db, account.id, request_id)
    if friend_request.sender_id == account.id:
        return MessageResponse(message="You withdrew your friend request.")
    return MessageResponse(message="You declined the friend request.")
