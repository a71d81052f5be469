import uuid
from sqlalchemy import Column, String, DateTime, ForeignKey, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import relationship

from relations_api.database import Base
from relations_api.utils.time_utils import utc_now

class RelationRequest(Base):
    """A pending friend request from sender to receiver."""
    __tablename__ = "relation_requests"
    __table_args__ = (
        # At most one pending request per unordered pair, whichever direction
        UniqueConstraint("pair_low", "pair_high", name="uq_relation_requests_pair"),
        CheckConstraint("sender_id <> receiver_id", name="ck_relation_requests_not_self"),
    )

    id = Column(String, primary_key=True, index=True, default=lambda: str(uuid.uuid4()))
    sender_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    receiver_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    pair_low = Column(String, nullable=False)
    pair_high = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)

    # Relationships
    sender = relationship("User", foreign_keys=[sender_id], lazy="selectin")
    receiver = relationship("User", foreign_keys=[receiver_id], lazy="selectin")
