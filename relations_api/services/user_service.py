import logging

from sqlalchemy import delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from relations_api.models import User
from relations_api.schemas.users import UserCreate
from relations_api.services.errors import ConflictError, UserNotFound, UserNotRegistered, UsernameTaken
from relations_api.services.relationship_service import delete_all_relations_of
from relations_api.services.user_directory import resolve_by_id, resolve_by_name

logger = logging.getLogger(__name__)


async def get_user_by_name(db: AsyncSession, username: str) -> User:
    user = await resolve_by_name(db, username)
    if not user:
        raise UserNotFound()
    return user


async def require_registered_user(db: AsyncSession, current_user: dict) -> User:
    """
    Look up the account behind the authenticated uid.

    Raises:
        UserNotRegistered: If the uid has not picked a username yet
    """
    user = await resolve_by_id(db, current_user["uid"])
    if not user:
        raise UserNotRegistered()
    return user


async def register_user(db: AsyncSession, current_user: dict, payload: UserCreate) -> User:
    """
    Bind the authenticated uid to a username.

    Args:
        db: AsyncSession for database operations
        current_user: Decoded token of the caller
        payload: Requested username

    Returns:
        User: The newly registered user

    Raises:
        ConflictError: If the uid is already registered
        UsernameTaken: If another account owns the username
    """
    uid = current_user["uid"]
    if await resolve_by_id(db, uid):
        raise ConflictError("You are already registered.")
    if await resolve_by_name(db, payload.username):
        raise UsernameTaken()

    user = User(id=uid, username=payload.username)
    db.add(user)
    try:
        await db.commit()
    except IntegrityError:
        await db.rollback()
        raise UsernameTaken()
    await db.refresh(user)
    logger.info(f"Registered user {uid} as {payload.username}")
    return user


async def delete_user(db: AsyncSession, user_id: str) -> None:
    """
    Delete an account together with every request, friendship and directed
    relation that references it, in either slot.
    """
    user = await resolve_by_id(db, user_id)
    if not user:
        raise UserNotFound()

    try:
        await delete_all_relations_of(db, user_id)
        await db.execute(delete(User).where(User.id == user_id))
        await db.commit()
    except Exception:
        await db.rollback()
        logger.exception(f"Failed to delete user {user_id}")
        raise
    logger.info(f"Deleted user {user_id}")
