# mentorhub/api/realtime.py
"""
Real-time channel.

A single WebSocket endpoint at /ws. Frames in both directions are JSON
objects of the form {"event": str, "data": any}.

Inbound events: join, send-message, typing, stop-typing.
"""

import logging
from typing import Tuple

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect
from fastapi.concurrency import run_in_threadpool
from fastapi.encoders import jsonable_encoder
from sqlalchemy.exc import SQLAlchemyError

from mentorhub.crud import user as user_crud
from mentorhub.database import get_session_factory
from mentorhub.errors import MentorHubError
from mentorhub.schemas.chat import MessageResponse
from mentorhub.services import chat_service, notification_service
from mentorhub.services.presence import PresenceRegistry

logger = logging.getLogger(__name__)

router = APIRouter(tags=["realtime"])


async def _reply(websocket: WebSocket, event: str, data) -> None:
    await websocket.send_json({"event": event, "data": jsonable_encoder(data)})


async def handle_join(websocket: WebSocket, presence: PresenceRegistry, user_key) -> str:
    presence.add(user_key, websocket)
    logger.info("%s joined the real-time channel", user_key)
    await _reply(websocket, notification_service.ONLINE_USERS_LIST, presence.online_users())
    await presence.broadcast(
        notification_service.USER_STATUS, {"user_id": user_key, "status": "online"}
    )
    return user_key


def save_message(session_factory, data: dict) -> Tuple[dict, str]:
    """Persist one chat message in its own session; returns (payload, sender display name)."""
    with session_factory() as db:
        message = chat_service.send_message(
            db,
            data.get("sender"),
            data.get("receiver"),
            data.get("content"),
            data.get("type") or "text",
        )
        payload = MessageResponse.model_validate(message).model_dump()
        sender = user_crud.get_user_by_email(db, message.sender)
        sender_name = sender.name if sender else message.sender
    return payload, sender_name


async def handle_send_message(websocket: WebSocket, presence: PresenceRegistry, session_factory, data) -> None:
    data = data if isinstance(data, dict) else {}
    try:
        payload, sender_name = await run_in_threadpool(save_message, session_factory, data)
    except MentorHubError as exc:
        await _reply(websocket, notification_service.MESSAGE_ERROR, {"error": exc.message})
        return
    except SQLAlchemyError:
        logger.exception("Failed to save real-time message")
        await _reply(websocket, notification_service.MESSAGE_ERROR, {"error": "Failed to send message"})
        return

    await notification_service.publish(
        presence, payload["receiver"], notification_service.RECEIVE_MESSAGE, payload
    )
    await notification_service.publish(
        presence,
        payload["receiver"],
        notification_service.NEW_CHAT_NOTIFICATION,
        {
            "sender": payload["sender"],
            "senderName": sender_name,
            "content": payload["content"],
        },
    )
    await _reply(websocket, notification_service.MESSAGE_SENT, payload)


async def handle_typing(presence: PresenceRegistry, event: str, data) -> None:
    data = data if isinstance(data, dict) else {}
    outbound = (
        notification_service.USER_TYPING if event == "typing" else notification_service.USER_STOP_TYPING
    )
    await notification_service.publish(
        presence, data.get("receiver"), outbound, {"sender": data.get("sender")}
    )


@router.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket, session_factory=Depends(get_session_factory)):
    presence: PresenceRegistry = websocket.app.state.presence
    await websocket.accept()
    user_key = None

    try:
        while True:
            try:
                frame = await websocket.receive_json()
            except ValueError:
                await _reply(websocket, notification_service.MESSAGE_ERROR, {"error": "Invalid frame"})
                continue

            event = frame.get("event") if isinstance(frame, dict) else None
            data = frame.get("data") if isinstance(frame, dict) else None

            if event == "join":
                if not isinstance(data, str) or not data:
                    continue
                user_key = await handle_join(websocket, presence, data)
            elif event == "send-message":
                await handle_send_message(websocket, presence, session_factory, data)
            elif event in ("typing", "stop-typing"):
                await handle_typing(presence, event, data)
            else:
                logger.debug("Ignoring unknown real-time event %r", event)
    except WebSocketDisconnect:
        logger.debug("Real-time connection closed for %s", user_key)
    finally:
        if user_key and presence.remove(user_key, websocket):
            logger.info("%s left the real-time channel", user_key)
            await presence.broadcast(
                notification_service.USER_STATUS, {"user_id": user_key, "status": "offline"}
            )
