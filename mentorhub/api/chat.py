# mentorhub/api/chat.py
"""
Chat API Router

Message endpoints (bearer token required):
- GET /chat/conversation/{user_id}/{other_user_id}
- GET /chat/conversations/{user_id}
- GET /chat/unread/{user_id}
- POST /chat/mark-read
- POST /chat/message

Chat request endpoints (open):
- POST /chat/request
- GET /chat/requests/pending/{user_id}
- GET /chat/requests/{user_id}
- PUT /chat/request/{request_id}/approve
- PUT /chat/request/{request_id}/decline
- GET /chat/permission/{sender}/{receiver}

User ids on these routes are email addresses, the same key used for presence.
"""

from typing import List

from fastapi import APIRouter, BackgroundTasks, Depends, status
from sqlalchemy.orm import Session

from mentorhub.crud import user as user_crud
from mentorhub.database import get_db
from mentorhub.errors import BadRequestError
from mentorhub.models.user import User
from mentorhub.schemas.chat import (
    ChatPermission,
    ChatRequestCreate,
    ChatRequestList,
    ChatRequestResult,
    ConversationSummary,
    MarkReadRequest,
    MarkReadResponse,
    MessageCreate,
    MessageResponse,
)
from mentorhub.services import chat_service, notification_service
from mentorhub.services.presence import PresenceRegistry, get_presence
from mentorhub.utils.security import get_current_user

router = APIRouter(prefix="/chat", tags=["chat"])


def _display_name(db: Session, email: str) -> str:
    user = user_crud.get_user_by_email(db, email)
    return user.name if user else email


def schedule_message_events(
    background_tasks: BackgroundTasks,
    presence: PresenceRegistry,
    message,
    sender_name: str,
) -> None:
    payload = MessageResponse.model_validate(message).model_dump()
    notification_service.schedule(
        background_tasks, presence, message.receiver, notification_service.RECEIVE_MESSAGE, payload
    )
    notification_service.schedule(
        background_tasks,
        presence,
        message.receiver,
        notification_service.NEW_CHAT_NOTIFICATION,
        {"sender": message.sender, "senderName": sender_name, "content": message.content},
    )
    notification_service.schedule(
        background_tasks, presence, message.sender, notification_service.MESSAGE_SENT, payload
    )


# ======================
# MESSAGES
# ======================
@router.get("/conversation/{user_id}/{other_user_id}", response_model=List[MessageResponse])
def get_conversation(
    user_id: str,
    other_user_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return chat_service.get_conversation(db, user_id, other_user_id)


@router.get("/conversations/{user_id}", response_model=List[ConversationSummary])
def list_conversations(
    user_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return chat_service.list_conversations(db, user_id)


@router.get("/unread/{user_id}", response_model=List[MessageResponse])
def list_unread(
    user_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return chat_service.list_unread(db, user_id)


@router.post("/mark-read", response_model=MarkReadResponse)
def mark_read(
    payload: MarkReadRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    reader = payload.user_id or current_user.email
    if not payload.other_user_id:
        raise BadRequestError("otherUserId is required")
    updated = chat_service.mark_conversation_read(db, reader, payload.other_user_id)
    return {"message": "Messages marked as read", "updated": updated}


@router.post("/message", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
def send_message(
    payload: MessageCreate,
    background_tasks: BackgroundTasks,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    presence: PresenceRegistry = Depends(get_presence),
):
    message = chat_service.send_message(db, payload.sender, payload.receiver, payload.content, payload.type)
    schedule_message_events(background_tasks, presence, message, _display_name(db, message.sender))
    return message


# ======================
# CHAT REQUESTS
# ======================
@router.post("/request", response_model=ChatRequestResult)
def create_chat_request(
    payload: ChatRequestCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    presence: PresenceRegistry = Depends(get_presence),
):
    request, can_chat, created = chat_service.create_chat_request(
        db, payload.sender, payload.receiver, payload.message
    )
    if not created:
        message = "Chat already approved" if can_chat else "Chat request already sent"
        return {"message": message, "request": request, "can_chat": can_chat}

    notification_service.schedule(
        background_tasks,
        presence,
        request.receiver,
        notification_service.NEW_CHAT_REQUEST,
        notification_service.chat_request_payload(request, _display_name(db, request.sender)),
    )
    return {"message": "Chat request sent", "request": request, "can_chat": False}


@router.get("/requests/pending/{user_id}", response_model=ChatRequestList)
def list_pending_requests(user_id: str, db: Session = Depends(get_db)):
    return {"requests": chat_service.list_pending_requests(db, user_id)}


@router.get("/requests/{user_id}", response_model=ChatRequestList)
def list_user_requests(user_id: str, db: Session = Depends(get_db)):
    return {"requests": chat_service.list_user_requests(db, user_id)}


def _respond(request_id, decision, background_tasks, db, presence):
    request = chat_service.respond_to_request(db, request_id, decision)
    notification_service.schedule(
        background_tasks,
        presence,
        request.sender,
        notification_service.CHAT_REQUEST_RESPONSE,
        notification_service.chat_response_payload(request, _display_name(db, request.receiver)),
    )
    return request


@router.put("/request/{request_id}/approve", response_model=ChatRequestResult)
def approve_request(
    request_id: int,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    presence: PresenceRegistry = Depends(get_presence),
):
    request = _respond(request_id, "approved", background_tasks, db, presence)
    return {"message": "Chat request approved", "request": request, "can_chat": True}


@router.put("/request/{request_id}/decline", response_model=ChatRequestResult)
def decline_request(
    request_id: int,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    presence: PresenceRegistry = Depends(get_presence),
):
    request = _respond(request_id, "declined", background_tasks, db, presence)
    return {"message": "Chat request declined", "request": request, "can_chat": False}


@router.get("/permission/{sender}/{receiver}", response_model=ChatPermission)
def check_permission(sender: str, receiver: str, db: Session = Depends(get_db)):
    request = chat_service.get_approved_request(db, sender, receiver)
    return {"can_chat": request is not None, "request": request}
