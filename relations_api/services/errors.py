"""Business errors raised by the relationship services.

Each error carries the HTTP status it maps to at the API boundary; the
exception handler in :mod:`relations_api.main` renders them as
``{"error": message}``.
"""
from fastapi import status


class RelationshipError(Exception):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid relationship operation."

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFoundError(RelationshipError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found."


class ConflictError(RelationshipError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "Conflicts with the current relationship state."


class ForbiddenError(RelationshipError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Not allowed."


class ReceiverNotFound(NotFoundError):
    default_message = "User you are trying to relate to does not exist."


class UserNotFound(NotFoundError):
    default_message = "User does not exist."


class SelfRelationError(RelationshipError):
    status_code = status.HTTP_405_METHOD_NOT_ALLOWED
    default_message = "Cannot relate to yourself."


class RequestAlreadyExists(ConflictError):
    default_message = "Friend request already made."


class AlreadyEstablished(ConflictError):
    default_message = "You are already friends with this user."


class AlreadyExists(ConflictError):
    default_message = "You have already related to this user."


# Nothing to cancel or remove is reported as a state conflict, not a 404
class RequestNotFound(ConflictError):
    default_message = "Friend request not found."


class RelationNotFound(ConflictError):
    default_message = "No relation between you and this user."


class UsernameTaken(ConflictError):
    default_message = "Username is already taken."


class NotParticipant(ForbiddenError):
    default_message = "You are not allowed to act on this friend request."


class UserNotRegistered(ForbiddenError):
    default_message = "Register a username before using this service."
