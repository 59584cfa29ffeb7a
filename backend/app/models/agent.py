from sqlalchemy import Column, String, DateTime
from sqlalchemy.sql import func
from app.core.database import Base


class Agent(Base):
    """Agent profile, keyed by the auth provider's user id."""
    __tablename__ = "agents"

    id = Column(String, primary_key=True, index=True)  # auth provider uid
    name = Column(String, nullable=False)
    email = Column(String, nullable=True, index=True)
    phone = Column(String, nullable=False)
    address = Column(String, nullable=True)
    agent_code = Column(String, nullable=False, index=True)
    photo_url = Column(String, nullable=True, default="")

    joined_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
