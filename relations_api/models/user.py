from sqlalchemy import Column, String, DateTime

from relations_api.database import Base
from relations_api.utils.time_utils import utc_now

class User(Base):
    __tablename__ = "users"

    # Firebase uid of the account
    id = Column(String, primary_key=True, index=True)
    username = Column(String, unique=True, index=True, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utc_now)
