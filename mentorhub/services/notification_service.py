from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import BackgroundTasks
from fastapi.encoders import jsonable_encoder

from mentorhub.models.booking import Booking
from mentorhub.models.chat import ChatRequest
from mentorhub.models.user import User
from mentorhub.services.presence import PresenceRegistry

logger = logging.getLogger(__name__)


# Event names understood by the frontend
BOOKING_STATUS_UPDATED = "booking-status-updated"
NEW_SESSION_REQUEST = "new-session-request"
NEW_CHAT_REQUEST = "new-chat-request"
CHAT_REQUEST_RESPONSE = "chat-request-response"
RECEIVE_MESSAGE = "receive-message"
NEW_CHAT_NOTIFICATION = "new-chat-notification"
MESSAGE_SENT = "message-sent"
MESSAGE_ERROR = "message-error"
USER_STATUS = "user-status"
ONLINE_USERS_LIST = "online-users-list"
USER_TYPING = "user-typing"
USER_STOP_TYPING = "user-stop-typing"


async def publish(
    presence: PresenceRegistry,
    user_key: Optional[str],
    event: str,
    payload: Dict[str, Any],
) -> bool:
    """
    Fire-and-forget delivery to one connected user.
    Offline users are skipped silently; there is no queue or retry.
    """
    if not user_key:
        return False
    delivered = await presence.send_to(user_key, event, jsonable_encoder(payload))
    if not delivered:
        logger.debug("Event %s not delivered, %s is offline", event, user_key)
    return delivered


def schedule(
    background_tasks: BackgroundTasks,
    presence: PresenceRegistry,
    user_key: Optional[str],
    event: str,
    payload: Dict[str, Any],
) -> None:
    """Queue a publish to run after the HTTP response has been sent."""
    background_tasks.add_task(publish, presence, user_key, event, payload)


# ======================
# PAYLOAD BUILDERS
# ======================

def booking_status_payload(booking: Booking) -> Dict[str, Any]:
    return {
        "bookingId": booking.id,
        "status": booking.status,
        "mentorName": booking.mentor_name,
        "sessionType": booking.session_type,
        "date": booking.date,
        "time": booking.time,
    }


def new_session_request_payload(booking: Booking, mentee: Optional[User]) -> Dict[str, Any]:
    return {
        "bookingId": booking.id,
        "studentId": booking.user_id,
        "studentName": mentee.name if mentee else None,
        "studentEmail": mentee.email if mentee else None,
        "sessionType": booking.session_type,
        "duration": booking.duration,
        "date": booking.date,
        "time": booking.time,
        "notes": booking.notes or "",
        "topics": booking.topics or [],
    }


def chat_request_payload(request: ChatRequest, sender_name: Optional[str]) -> Dict[str, Any]:
    return {
        "requestId": request.id,
        "sender": request.sender,
        "senderName": sender_name or request.sender,
        "message": request.message or "",
        "timestamp": request.created_at,
    }


def chat_response_payload(request: ChatRequest, mentor_name: Optional[str]) -> Dict[str, Any]:
    return {
        "requestId": request.id,
        "status": request.status,
        "mentorName": mentor_name or request.receiver,
        "receiver": request.receiver,
        "timestamp": request.responded_at,
    }
