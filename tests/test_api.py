# tests/test_api.py
"""
HTTP behaviour of the routers: status codes, camelCase bodies and the
error handlers, checked through TestClient.
"""

import os

from mentorhub.config import settings
from mentorhub.services import booking_service

STRONG = "Str0ng@Pass"


# ======================
# HEALTH / AUTH
# ======================

def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_register_login_flow(client):
    registered = client.post(
        "/api/register",
        json={"name": "Ivy", "email": "ivy@mentorhub.io", "password": STRONG, "role": "mentor"},
    )
    duplicate = client.post(
        "/api/register",
        json={"name": "Ivy", "email": "ivy@mentorhub.io", "password": STRONG},
    )
    bad_login = client.post("/api/login", json={"email": "ivy@mentorhub.io", "password": "Wr0ng@Pass"})
    login = client.post("/api/login", json={"email": "ivy@mentorhub.io", "password": STRONG})

    assert registered.status_code == 201
    assert registered.json()["user"]["role"] == "mentor"
    assert duplicate.status_code == 400
    assert bad_login.status_code == 401
    assert login.status_code == 200
    assert login.json()["token_type"] == "bearer"


def test_weak_password_is_400(client):
    response = client.post(
        "/api/register", json={"name": "Weak", "email": "weak@mentorhub.io", "password": "password"}
    )
    assert response.status_code == 400
    assert "Password must be" in response.json()["detail"]


def test_validate_endpoint(client):
    response = client.post("/api/validate", json={"email": "nope", "phone": "0123456789"})

    body = response.json()
    assert body["valid"] is False
    assert body["results"]["email"]["valid"] is False
    assert body["results"]["phone"]["valid"] is True


def test_protected_route_requires_token(client, mentee):
    response = client.put(f"/api/users/{mentee.id}", json={"bio": "hi"})
    assert response.status_code == 401


# ======================
# PROFILE PICTURES
# ======================

def _upload_picture(client, headers, email, name="me.png", content_type="image/png"):
    return client.post(
        "/api/profile/upload-picture",
        data={"email": email},
        files={"profilePicture": (name, b"picture-bytes", content_type)},
        headers=headers,
    )


def test_profile_picture_upload_and_delete(client, mentee, auth_headers, tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(tmp_path))
    headers = auth_headers(mentee)

    first = _upload_picture(client, headers, mentee.email)
    second = _upload_picture(client, headers, mentee.email, name="me.jpg", content_type="image/jpeg")
    profile = client.get(f"/api/profile/{mentee.email}")
    deleted = client.request("DELETE", "/api/profile/delete-picture", json={"email": mentee.email}, headers=headers)
    again = client.request("DELETE", "/api/profile/delete-picture", json={"email": mentee.email}, headers=headers)

    assert first.status_code == 200
    assert second.status_code == 200
    picture = second.json()["profile_picture"]
    assert picture.startswith("/uploads/profiles/")
    assert second.json()["url"].endswith(picture)
    assert profile.json()["user"]["profile_picture"] == picture
    assert deleted.status_code == 200
    assert again.status_code == 400
    assert os.listdir(tmp_path / "profiles") == []


def test_profile_picture_rejections(client, mentee, auth_headers, tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(tmp_path))
    headers = auth_headers(mentee)

    wrong_type = _upload_picture(client, headers, mentee.email, name="notes.txt", content_type="text/plain")
    unknown = _upload_picture(client, headers, "ghost@mentorhub.io")
    no_file = client.post("/api/profile/upload-picture", data={"email": mentee.email}, headers=headers)
    no_token = _upload_picture(client, {}, mentee.email)

    assert wrong_type.status_code == 400
    assert wrong_type.json()["detail"].startswith("Invalid file type")
    assert unknown.status_code == 404
    assert no_file.status_code == 400
    assert no_token.status_code == 401
    assert not (tmp_path / "profiles").exists() or os.listdir(tmp_path / "profiles") == []


def test_uploaded_picture_is_served(client, mentee, auth_headers):
    headers = auth_headers(mentee)

    uploaded = _upload_picture(client, headers, mentee.email)
    served = client.get(uploaded.json()["profile_picture"])
    client.request("DELETE", "/api/profile/delete-picture", json={"email": mentee.email}, headers=headers)

    assert served.status_code == 200
    assert served.content == b"picture-bytes"


# ======================
# BOOKINGS
# ======================

def test_create_booking_accepts_camel_case(client, mentee, mentor):
    response = client.post(
        "/api/bookings/",
        json={
            "userId": mentee.id,
            "mentorId": mentor.id,
            "mentorName": mentor.name,
            "sessionType": "video-call",
            "duration": "30min",
            "date": "2026-03-02T00:00:00.000Z",
            "time": "14:00",
        },
    )

    assert response.status_code == 201
    booking = response.json()["booking"]
    assert booking["status"] == "pending"
    assert booking["date"] == "2026-03-02"
    assert booking["user_email"] == mentee.email


def test_create_booking_missing_fields_is_400(client, mentee):
    response = client.post("/api/bookings/", json={"userId": mentee.id})
    assert response.status_code == 400


def test_status_archived_is_400_and_unchanged(client, mentee, mentor, make_booking):
    booking = make_booking(mentee, mentor, status="confirmed")

    response = client.patch(f"/api/bookings/booking/{booking.id}/status", json={"status": "archived"})
    after = client.get(f"/api/bookings/booking/{booking.id}")

    assert response.status_code == 400
    assert after.json()["status"] == "confirmed"


def test_status_of_wrong_type_is_400(client, mentee, mentor, make_booking):
    booking = make_booking(mentee, mentor, status="confirmed")

    response = client.patch(f"/api/bookings/booking/{booking.id}/status", json={"status": 5})

    assert response.status_code == 400
    assert response.json()["detail"].startswith("Invalid status")


def test_update_with_null_required_field_is_400(client, mentee, mentor, make_booking):
    booking = make_booking(mentee, mentor)

    cleared_name = client.put(f"/api/bookings/booking/{booking.id}", json={"mentorName": None})
    cleared_date = client.put(f"/api/bookings/booking/{booking.id}", json={"date": None})
    after = client.get(f"/api/bookings/booking/{booking.id}")

    assert cleared_name.status_code == 400
    assert cleared_name.json()["detail"] == "mentor_name cannot be empty"
    assert cleared_date.status_code == 400
    assert after.json()["mentor_name"] == mentor.name
    assert after.json()["date"] == "2026-03-02"


def test_status_completed_updates_stats(client, db_session, mentee, mentor, make_booking):
    booking = make_booking(mentee, mentor, status="confirmed", duration="2 hours")

    response = client.patch(f"/api/bookings/booking/{booking.id}/status", json={"status": "completed"})

    assert response.status_code == 200
    assert response.json()["booking"]["status"] == "completed"
    db_session.expire_all()
    assert mentee.mentee_profile.hours_learned == 2.0
    assert mentor.mentor_profile.total_sessions == 1


def test_rate_errors(client, mentee, mentor, make_user, make_booking):
    stranger = make_user(role="student")
    pending = make_booking(mentee, mentor, status="pending")
    completed = make_booking(mentee, mentor, status="completed")

    not_owner = client.post(
        f"/api/bookings/booking/{completed.id}/rate", json={"rating": 5, "userId": stranger.id}
    )
    not_completed = client.post(
        f"/api/bookings/booking/{pending.id}/rate", json={"rating": 5, "userId": mentee.id}
    )
    out_of_range = client.post(
        f"/api/bookings/booking/{completed.id}/rate", json={"rating": 9, "userId": mentee.id}
    )
    fractional = client.post(
        f"/api/bookings/booking/{completed.id}/rate", json={"rating": 4.5, "userId": mentee.id}
    )
    missing = client.post("/api/bookings/booking/9999/rate", json={"rating": 5, "userId": mentee.id})

    assert not_owner.status_code == 403
    assert not_completed.status_code == 400
    assert out_of_range.status_code == 400
    assert fractional.status_code == 400
    assert missing.status_code == 404


def test_rate_success(client, mentee, mentor, make_booking):
    booking = make_booking(mentee, mentor, status="completed")

    response = client.post(
        f"/api/bookings/booking/{booking.id}/rate",
        json={"rating": 4, "review": "helpful", "user_id": mentee.id},
    )

    body = response.json()
    assert response.status_code == 200
    assert body["booking"]["rating"] == 4
    assert body["mentor_average_rating"] == 4.0
    assert body["mentor_total_reviews"] == 1


def test_date_range_requires_dates(client):
    assert client.get("/api/bookings/date-range").status_code == 400


def test_streak_endpoint(client, mentee):
    response = client.get(f"/api/bookings/user/{mentee.id}/streak")

    assert response.status_code == 200
    assert response.json() == {"user_id": mentee.id, "current_streak": 0, "longest_streak": 0}


def test_unexpected_error_is_generic_500(db_session, monkeypatch):
    from fastapi.testclient import TestClient
    from mentorhub.database import get_db
    from mentorhub.main import app

    def boom(db):
        raise RuntimeError("database exploded")

    monkeypatch.setattr(booking_service, "list_bookings", boom)
    app.dependency_overrides[get_db] = lambda: db_session
    try:
        response = TestClient(app, raise_server_exceptions=False).get("/api/bookings/")
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 500
    assert response.json()["detail"] == "Server error"
    assert "database exploded" in response.json()["error"]


# ======================
# CHAT
# ======================

def test_chat_gating_over_http(client, mentee, mentor, auth_headers):
    message = {"sender": mentee.email, "receiver": mentor.email, "content": "Hi!"}

    blocked = client.post("/api/chat/message", json=message, headers=auth_headers(mentee))
    request = client.post(
        "/api/chat/request", json={"sender": mentee.email, "receiver": mentor.email, "message": "Can we talk?"}
    )
    request_id = request.json()["request"]["id"]
    approved = client.put(f"/api/chat/request/{request_id}/approve")
    sent = client.post("/api/chat/message", json=message, headers=auth_headers(mentee))
    reply = client.post(
        "/api/chat/message",
        json={"sender": mentor.email, "receiver": mentee.email, "content": "Sure"},
        headers=auth_headers(mentor),
    )
    permission = client.get(f"/api/chat/permission/{mentor.email}/{mentee.email}")

    assert blocked.status_code == 403
    assert request.json()["can_chat"] is False
    assert approved.json()["request"]["status"] == "approved"
    assert sent.status_code == 201
    assert reply.status_code == 201
    assert permission.json()["can_chat"] is True


def test_chat_messages_require_token(client, mentee):
    response = client.get(f"/api/chat/unread/{mentee.email}")
    assert response.status_code == 401


# ======================
# BLOGS
# ======================

def test_blog_write_permissions(client, mentor, mentee, auth_headers):
    created = client.post(
        "/api/blogs/",
        json={"title": "Mentoring 101", "content": "Start with goals.", "category": "career"},
        headers=auth_headers(mentor),
    )
    blog_id = created.json()["id"]

    forbidden = client.put(f"/api/blogs/{blog_id}", json={"title": "Mine now"}, headers=auth_headers(mentee))
    unauthenticated = client.delete(f"/api/blogs/{blog_id}")
    liked = client.post(f"/api/blogs/{blog_id}/like", headers=auth_headers(mentee))
    fetched = client.get(f"/api/blogs/{blog_id}")

    assert created.status_code == 201
    assert created.json()["excerpt"] == "Start with goals...."
    assert forbidden.status_code == 403
    assert unauthenticated.status_code == 401
    assert liked.json() == [mentee.id]
    assert fetched.json()["views"] == 1


def test_garbage_token_is_401(client, mentee):
    response = client.put(
        f"/api/users/{mentee.id}", json={"bio": "hi"}, headers={"Authorization": "Bearer not-a-jwt"}
    )
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid token. Authorization denied."
