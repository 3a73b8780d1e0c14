from sqlalchemy import Column, DateTime, String
from sqlalchemy.orm import relationship

from app.db.session import Base


class Conversation(Base):
    __tablename__ = "conversations"

    # UUID4 string; also the public sessionId
    id = Column(String(36), primary_key=True)
    created_at = Column(DateTime, nullable=False)
    # Advanced to the newest message timestamp on every append
    updated_at = Column(DateTime, nullable=False)

    messages = relationship(
        "Message",
        back_populates="conversation",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Message.timestamp",
    )
