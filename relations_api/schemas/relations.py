from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime
from enum import Enum as PyEnum

class DirectedRelationKind(str, PyEnum):
    TRUST = "trust"
    FRIEND = "friend"

class DirectedRelationView(str, PyEnum):
    GIVEN = "given"
    RECEIVED = "received"

class RequestDirection(str, PyEnum):
    SENT = "sent"
    RECEIVED = "received"

class RelationshipState(str, PyEnum):
    NONE = "none"
    REQUESTED = "requested"
    ESTABLISHED = "established"

class RelationTarget(BaseModel):
    username: str = Field(min_length=1)


class RelationRequestResponse(BaseModel):
    id: str
    sender_id: str
    receiver_id: str
    sender_name: str
    receiver_name: str
    created_at: datetime

    @classmethod
    def from_model(cls, request) -> "RelationRequestResponse":
        return cls(
            id=request.id,
            sender_id=request.sender_id,
            receiver_id=request.receiver_id,
            sender_name=request.sender.username,
            receiver_name=request.receiver.username,
            created_at=request.created_at,
        )

class FriendshipResponse(BaseModel):
    id: str
    user_one_id: str
    user_two_id: str
    user_one_name: str
    user_two_name: str
    created_at: datetime

    @classmethod
    def from_model(cls, friendship) -> "FriendshipResponse":
        return cls(
            id=friendship.id,
            user_one_id=friendship.user_one_id,
            user_two_id=friendship.user_two_id,
            user_one_name=friendship.user_one.username,
            user_two_name=friendship.user_two.username,
            created_at=friendship.created_at,
        )

class DirectedRelationResponse(BaseModel):
    id: str
    kind: DirectedRelationKind
    giver_id: str
    receiver_id: str
    giver_name: str
    receiver_name: str
    created_at: datetime

    @classmethod
    def from_model(cls, relation) -> "DirectedRelationResponse":
        return cls(
            id=relation.id,
            kind=relation.kind,
            giver_id=relation.giver_id,
            receiver_id=relation.receiver_id,
            giver_name=relation.giver.username,
            receiver_name=relation.receiver.username,
            created_at=relation.created_at,
        )

class RelationshipStatusResponse(BaseModel):
    username: str
    state: RelationshipState
    request_id: Optional[str] = None
    requested_by_me: Optional[bool] = None
    friendship_id: Optional[str] = None


class RelationRequestEnvelope(BaseModel):
    message: str
    request: RelationRequestResponse

class RelationRequestListEnvelope(BaseModel):
    message: str
    requests: List[RelationRequestResponse]

class FriendshipEnvelope(BaseModel):
    message: str
    friendship: FriendshipResponse

class FriendshipListEnvelope(BaseModel):
    message: str
    friendships: List[FriendshipResponse]

class DirectedRelationEnvelope(BaseModel):
    message: str
    relation: DirectedRelationResponse

class DirectedRelationListEnvelope(BaseModel):
    message: str
    relations: List[DirectedRelationResponse]

class RelationshipStatusEnvelope(BaseModel):
    message: str
    status: RelationshipStatusResponse
