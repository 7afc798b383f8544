# tests/test_realtime.py
"""
WebSocket channel: join/presence events and message delivery.
"""

from mentorhub.services import chat_service


def _join(ws, email):
    ws.send_json({"event": "join", "data": email})
    online = ws.receive_json()
    status = ws.receive_json()
    return online, status


def test_join_lists_online_users(client, mentee):
    with client.websocket_connect("/ws") as ws:
        online, status = _join(ws, mentee.email)

    assert online["event"] == "online-users-list"
    assert mentee.email in online["data"]
    assert status["event"] == "user-status"
    assert status["data"] == {"user_id": mentee.email, "status": "online"}


def test_send_message_requires_approval(client, mentee, mentor):
    with client.websocket_connect("/ws") as ws:
        _join(ws, mentee.email)
        ws.send_json(
            {"event": "send-message", "data": {"sender": mentee.email, "receiver": mentor.email, "content": "Hi"}}
        )
        reply = ws.receive_json()

    assert reply["event"] == "message-error"
    assert "approved" in reply["data"]["error"]


def test_send_message_reaches_online_receiver(client, db_session, mentee, mentor):
    request, _, _ = chat_service.create_chat_request(db_session, mentee.email, mentor.email, "hello")
    chat_service.respond_to_request(db_session, request.id, "approved")

    with client.websocket_connect("/ws") as sender_ws, client.websocket_connect("/ws") as receiver_ws:
        _join(receiver_ws, mentor.email)
        _join(sender_ws, mentee.email)
        # receiver also hears the sender come online
        assert receiver_ws.receive_json()["event"] == "user-status"

        sender_ws.send_json(
            {"event": "send-message", "data": {"sender": mentee.email, "receiver": mentor.email, "content": "Hi"}}
        )
        delivered = receiver_ws.receive_json()
        notification = receiver_ws.receive_json()
        confirmation = sender_ws.receive_json()

    assert delivered["event"] == "receive-message"
    assert delivered["data"]["content"] == "Hi"
    assert notification["event"] == "new-chat-notification"
    assert notification["data"]["senderName"] == mentee.name
    assert confirmation["event"] == "message-sent"
    assert confirmation["data"]["conversation_id"] == chat_service.conversation_id(mentee.email, mentor.email)


def test_typing_is_forwarded(client, mentee, mentor):
    with client.websocket_connect("/ws") as sender_ws, client.websocket_connect("/ws") as receiver_ws:
        _join(receiver_ws, mentor.email)
        _join(sender_ws, mentee.email)
        receiver_ws.receive_json()

        sender_ws.send_json({"event": "typing", "data": {"sender": mentee.email, "receiver": mentor.email}})
        typing = receiver_ws.receive_json()

    assert typing == {"event": "user-typing", "data": {"sender": mentee.email}}


def test_each_message_frame_uses_a_closed_session(client, db_session, session_factory, mentee, mentor):
    from mentorhub.database import get_session_factory
    from mentorhub.main import app

    opened = []

    def recording_factory():
        session = session_factory()
        opened.append(session)
        return session

    app.dependency_overrides[get_session_factory] = lambda: recording_factory
    request, _, _ = chat_service.create_chat_request(db_session, mentee.email, mentor.email, "hello")
    chat_service.respond_to_request(db_session, request.id, "approved")
    frame = {"event": "send-message", "data": {"sender": mentee.email, "receiver": mentor.email, "content": "Hi"}}

    with client.websocket_connect("/ws") as ws:
        _join(ws, mentee.email)
        ws.send_json(frame)
        sent = ws.receive_json()
        ws.send_json({"event": "send-message", "data": {"sender": mentee.email}})
        rejected = ws.receive_json()

        assert sent["event"] == "message-sent"
        assert rejected["event"] == "message-error"
        assert len(opened) == 2
        assert not any(session.in_transaction() for session in opened)
