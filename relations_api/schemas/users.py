from pydantic import BaseModel, Field
from datetime import datetime

class UserCreate(BaseModel):
    username: str = Field(min_length=1, max_length=64, pattern=r"^[A-Za-z0-9_.-]+$")

class UserResponse(BaseModel):
    id: str
    username: str
    created_at: datetime

    class Config:
        from_attributes = True

class UserEnvelope(BaseModel):
    message: str
    user: UserResponse

class Privileges(BaseModel):
    """Capabilities derived from how connected a user is."""
    user_id: str
    username: str
    level: int
    can_upvote: bool
    can_endorse: bool

class PrivilegesEnvelope(BaseModel):
    message: str
    privileges: Privileges

class MessageResponse(BaseModel):
    message: str
