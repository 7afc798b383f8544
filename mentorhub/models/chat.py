from sqlalchemy import TIMESTAMP, Boolean, Column, Index, Integer, String, Text
from mentorhub.database import Base
from mentorhub.utils.timeutils import utcnow

CHAT_REQUEST_STATUSES = ("pending", "approved", "declined")
MESSAGE_TYPES = ("text", "file", "image")


class Message(Base):
    __tablename__ = "messages"

    id = Column(Integer, primary_key=True, index=True)
    conversation_id = Column(String(520), nullable=False, index=True)
    # Participants are addressed by email, the same key the presence map uses
    sender = Column(String(255), nullable=False)
    receiver = Column(String(255), nullable=False, index=True)
    content = Column(Text, nullable=False)
    type = Column(String(10), nullable=False, default="text")
    read = Column(Boolean, nullable=False, default=False)
    timestamp = Column(TIMESTAMP, nullable=False, default=utcnow)

    __table_args__ = (
        Index("ix_messages_sender_receiver", "sender", "receiver"),
    )


class ChatRequest(Base):
    __tablename__ = "chat_requests"

    id = Column(Integer, primary_key=True, index=True)
    sender = Column(String(255), nullable=False, index=True)
    receiver = Column(String(255), nullable=False, index=True)
    message = Column(Text, default="")
    status = Column(String(20), nullable=False, default="pending")
    created_at = Column(TIMESTAMP, nullable=False, default=utcnow)
    responded_at = Column(TIMESTAMP)

    __table_args__ = (
        Index("ix_chat_requests_receiver_status", "receiver", "status"),
        Index("ix_chat_requests_sender_receiver", "sender", "receiver"),
    )
