import uuid
from sqlalchemy import Column, String, DateTime, ForeignKey, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import relationship

from relations_api.database import Base
from relations_api.utils.time_utils import utc_now

class MutualRelation(Base):
    """
    A confirmed friendship. The pair is stored in canonical order
    (user_one_id < user_two_id) so one row covers both directions.
    """
    __tablename__ = "mutual_relations"
    __table_args__ = (
        UniqueConstraint("user_one_id", "user_two_id", name="uq_mutual_relations_pair"),
        CheckConstraint("user_one_id < user_two_id", name="ck_mutual_relations_canonical"),
    )

    id = Column(String, primary_key=True, index=True, default=lambda: str(uuid.uuid4()))
    user_one_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    user_two_id = Column(String, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utc_now, nullable=False)

    # Relationships
    user_one = relationship("User", foreign_keys=[user_one_id], lazy="selectin")
    user_two = relationship("User", foreign_keys=[user_two_id], lazy="selectin")

    def other_user_id(self, user_id: str) -> str:
        return self.user_two_id if self.user_one_id == user_id else self.user_one_id
