import logging
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from relations_api.init_db import get_db
from relations_api.common import get_current_account, get_current_user
from relations_api.models import User
from relations_api.schemas.users import MessageResponse, PrivilegesEnvelope, UserCreate, UserEnvelope, UserResponse
from relations_api.services.privilege_service import get_privileges
from relations_api.services.user_service import delete_user, get_user_by_name, register_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])


@router.post("", response_model=UserEnvelope, status_code=status.HTTP_201_CREATED)
async def register_user_api(
    payload: UserCreate,
    db: AsyncSession = Depends(get_db),
    current_user: dict = Depends(get_current_user)
):
    """
    Register the authenticated account under a username.

    Args:
        payload: UserCreate containing the requested username
        db: Database session
        current_user: Currently authenticated user

    Returns:
        UserEnvelope with the registered user
    """
    user = await register_user(db, current_user, payload)
    return UserEnvelope(
        message=f"Welcome, {user.username}!",
        user=UserResponse.model_validate(user)
    )

@router.get("/me", response_model=UserEnvelope)
async def get_me_api(account: User = Depends(get_current_account)):
    return UserEnvelope(message=f"You are signed in as {account.username}.", user=UserResponse.model_validate(account))

@router.delete("/me", response_model=MessageResponse)
async def delete_me_api(
    db: AsyncSession = Depends(get_db),
    account: User = Depends(get_current_account)
):
    """
    Delete the current account and every relation that references it.
    """
    await delete_user(db, account.id)
    return MessageResponse(message="Your account has been deleted.")

@router.get("/{username}", response_model=UserEnvelope)
async def get_user_api(
    username: str,
    db: AsyncSession = Depends(get_db),
    account: User = Depends(get_current_account)
):
    user = await get_user_by_name(db, username)
    return UserEnvelope(message=f"Found user {user.username}.", user=UserResponse.model_validate(user))

@router.get("/{username}/privileges", response_model=PrivilegesEnvelope)
async def get_privileges_api(
    username: str,
    db: AsyncSession = Depends(get_db),
    account: User = Depends(get_current_account)
):
    """
    Get the level and capability flags of a user.

    Args:
        username: User to inspect
        db: Database session
        account: Registered account of the caller

    Returns:
        PrivilegesEnvelope with the computed privileges
    """
    privileges = await get_privileges(db, username)
    return PrivilegesEnvelope(
        message=f"{privileges.username} is at level {privileges.level}.",
        privileges=privileges
    )
