import uuid
from sqlalchemy import Column, String, DateTime, ForeignKey, Enum, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import relationship

from relations_api.database import Base
from relations_api.schemas.relations import DirectedRelationKind
from relations_api.utils.time_utils import utc_now

class DirectedRelation(Base):
    """One-way link from giver to receiver (trust, one-shot friend)."""
    __tablename__ = "directed_relations"
    __table_args__ = (
        UniqueConstraint("kind", "giver_id", "receiver_id", name="uq_directed_relations_kind_giver_receiver"),
        CheckConstraint("giver_id <> receiver_id", name="ck_directed_relations_not_self"),
    )

    id = Column(String, primary_key=True, index=True, default=lambda: str(uuid.uuid4()))
    kind = Column(Enum(DirectedRelationKind), nullable=False, index=True)
    giver_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    receiver_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)

    # Relationships
    giver = relationship("User", foreign_keys=[giver_id], lazy="selectin")
    receiver = relationship("User", foreign_keys=[receiver_id], lazy="selectin")
