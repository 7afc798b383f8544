# mentorhub/services/chat_service.py
"""
Chat Service Layer
Direct messages between users, gated by approved chat requests.
Participants are addressed by email throughout.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import and_, or_
from sqlalchemy.orm import Session

from mentorhub.errors import BadRequestError, ForbiddenError, NotFoundError
from mentorhub.models.chat import MESSAGE_TYPES, ChatRequest, Message
from mentorhub.utils.timeutils import utcnow

logger = logging.getLogger(__name__)

HISTORY_LIMIT = 100
UNREAD_LIMIT = 50


def conversation_id(a: str, b: str) -> str:
    """Stable id for a pair of users, independent of who is sending."""
    return "_".join(sorted([a, b]))


def _between(model, a: str, b: str):
    return or_(
        and_(model.sender == a, model.receiver == b),
        and_(model.sender == b, model.receiver == a),
    )


# ======================
# CHAT REQUESTS
# ======================

def get_approved_request(db: Session, a: str, b: str) -> Optional[ChatRequest]:
    """An approved request in either direction lets both users talk."""
    return (
        db.query(ChatRequest)
        .filter(_between(ChatRequest, a, b), ChatRequest.status == "approved")
        .order_by(ChatRequest.id.desc())
        .first()
    )


def can_chat(db: Session, a: str, b: str) -> bool:
    return get_approved_request(db, a, b) is not None


def create_chat_request(
    db: Session,
    sender: Optional[str],
    receiver: Optional[str],
    message: Optional[str] = None,
) -> Tuple[ChatRequest, bool, bool]:
    """
    Open a chat request, reusing an existing one where possible.

    Returns:
        (request, can_chat, created)

    Raises:
        BadRequestError: If sender or receiver is missing
    """
    if not sender or not receiver:
        raise BadRequestError("Sender and receiver are required")

    pending = (
        db.query(ChatRequest)
        .filter(
            ChatRequest.sender == sender,
            ChatRequest.receiver == receiver,
            ChatRequest.status == "pending",
        )
        .first()
    )
    if pending:
        return pending, False, False

    approved = get_approved_request(db, sender, receiver)
    if approved:
        return approved, True, False

    request = ChatRequest(sender=sender, receiver=receiver, message=message or "", status="pending")
    db.add(request)
    db.commit()
    db.refresh(request)
    logger.info("Chat request %s: %s -> %s", request.id, sender, receiver)
    return request, False, True


def list_pending_requests(db: Session, receiver: str) -> List[ChatRequest]:
    return (
        db.query(ChatRequest)
        .filter(ChatRequest.receiver == receiver, ChatRequest.status == "pending")
        .order_by(ChatRequest.created_at.desc(), ChatRequest.id.desc())
        .all()
    )


def list_user_requests(db: Session, user_email: str) -> List[ChatRequest]:
    return (
        db.query(ChatRequest)
        .filter(or_(ChatRequest.sender == user_email, ChatRequest.receiver == user_email))
        .order_by(ChatRequest.created_at.desc(), ChatRequest.id.desc())
        .all()
    )


def respond_to_request(db: Session, request_id: int, status: str) -> ChatRequest:
    """Approve or decline a request. Raises NotFoundError if it does not exist."""
    if status not in ("approved", "declined"):
        raise BadRequestError("Status must be approved or declined")
    request = db.query(ChatRequest).filter(ChatRequest.id == request_id).first()
    if not request:
        raise NotFoundError("Chat request not found")
    request.status = status
    request.responded_at = utcnow()
    db.commit()
    db.refresh(request)
    logger.info("Chat request %s %s", request.id, status)
    return request


# ======================
# MESSAGES
# ======================

def send_message(
    db: Session,
    sender: Optional[str],
    receiver: Optional[str],
    content: Optional[str],
    message_type: str = "text",
) -> Message:
    """
    Persist a message between two users.

    Raises:
        BadRequestError: Missing sender, receiver or content, or unknown type
        ForbiddenError: If the pair has no approved chat request
    """
    if not sender or not receiver or not content:
        raise BadRequestError("Sender, receiver and content are required")
    if message_type not in MESSAGE_TYPES:
        raise BadRequestError("Invalid message type. Must be one of: " + ", ".join(MESSAGE_TYPES))
    if not can_chat(db, sender, receiver):
        raise ForbiddenError("Chat request must be approved before messaging")

    message = Message(
        conversation_id=conversation_id(sender, receiver),
        sender=sender,
        receiver=receiver,
        content=content,
        type=message_type,
        read=False,
    )
    db.add(message)
    db.commit()
    db.refresh(message)
    return message


def get_conversation(db: Session, a: str, b: str, limit: int = HISTORY_LIMIT) -> List[Message]:
    """Latest ``limit`` messages of a conversation, oldest first."""
    newest = (
        db.query(Message)
        .filter(Message.conversation_id == conversation_id(a, b))
        .order_by(Message.timestamp.desc(), Message.id.desc())
        .limit(limit)
        .all()
    )
    return list(reversed(newest))


def list_conversations(db: Session, user_email: str) -> List[Dict[str, Any]]:
    """One summary per conversation partner, most recent conversation first."""
    messages = (
        db.query(Message)
        .filter(or_(Message.sender == user_email, Message.receiver == user_email))
        .order_by(Message.timestamp.desc(), Message.id.desc())
        .all()
    )

    summaries: Dict[str, Dict[str, Any]] = {}
    for message in messages:
        summary = summaries.get(message.conversation_id)
        if summary is None:
            partner = message.receiver if message.sender == user_email else message.sender
            summary = {
                "conversation_id": message.conversation_id,
                "partner": partner,
                "last_message": message,
                "unread_count": 0,
            }
            summaries[message.conversation_id] = summary
        if message.receiver == user_email and not message.read:
            summary["unread_count"] += 1
    # dicts keep insertion order, which is newest-first here
    return list(summaries.values())


def list_unread(db: Session, user_email: str, limit: int = UNREAD_LIMIT) -> List[Message]:
    return (
        db.query(Message)
        .filter(Message.receiver == user_email, Message.read.is_(False))
        .order_by(Message.timestamp.desc(), Message.id.desc())
        .limit(limit)
        .all()
    )


def mark_conversation_read(db: Session, reader: str, partner: str) -> int:
    """Mark everything ``partner`` sent to ``reader`` as read. Returns the count."""
    updated = (
        db.query(Message)
        .filter(
            Message.conversation_id == conversation_id(reader, partner),
            Message.receiver == reader,
            Message.read.is_(False),
        )
        .update({Message.read: True}, synchronize_session=False)
    )
    db.commit()
    return updated
