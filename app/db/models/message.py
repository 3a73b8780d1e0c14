from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import relationship

from app.db.session import Base


class Message(Base):
    __tablename__ = "messages"
    __table_args__ = (CheckConstraint("sender IN ('user', 'ai')", name="ck_messages_sender"),)

    id = Column(String(36), primary_key=True)
    # Parent conversation row
    conversation_id = Column(
        String(36),
        ForeignKey("conversations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    # user | ai
    sender = Column(String(8), nullable=False)
    text = Column(Text, nullable=False)
    timestamp = Column(DateTime, nullable=False, index=True)

    conversation = relationship("Conversation", back_populates="messages")
