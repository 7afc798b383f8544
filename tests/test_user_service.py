# tests/test_user_service.py
"""
Registration rules, login, account updates and directory listings.
"""

import io
import os

import pytest

from mentorhub.config import settings
from mentorhub.errors import BadRequestError, NotFoundError
from mentorhub.models.user import MentorProfile
from mentorhub.services import resource_service, user_service
from mentorhub.utils.security import verify_password

STRONG = "Str0ng@Pass"


def test_register_creates_role_profile(db_session):
    user = user_service.register_user(
        db_session, name=" Rae ", email="Rae@MentorHub.io", password=STRONG, role="mentor"
    )

    assert user.email == "rae@mentorhub.io"
    assert user.name == "Rae"
    assert user.mentor_profile is not None
    assert user.mentee_profile is None
    assert verify_password(STRONG, user.password_hash)


def test_register_defaults_to_student(db_session):
    user = user_service.register_user(db_session, name="Sam", email="sam@mentorhub.io", password=STRONG, role=None)
    assert user.role == "student"
    assert user.mentee_profile is not None


@pytest.mark.parametrize(
    "email, password, phone",
    [
        ("not-an-email", STRONG, None),
        ("a@mentorhub.io", "weakpass", None),
        ("a@mentorhub.io", "NoSpecial123", None),
        ("a@mentorhub.io", STRONG, "12345"),
    ],
)
def test_register_validation(db_session, email, password, phone):
    with pytest.raises(BadRequestError):
        user_service.register_user(db_session, name="A", email=email, password=password, phone=phone)


def test_register_duplicate_email(db_session, make_user):
    make_user(email="taken@mentorhub.io")

    with pytest.raises(BadRequestError, match="already exists"):
        user_service.register_user(db_session, name="B", email="taken@mentorhub.io", password=STRONG)


def test_login_success_and_failure(db_session):
    user_service.register_user(db_session, name="Lee", email="lee@mentorhub.io", password=STRONG)

    result = user_service.login(db_session, "LEE@mentorhub.io", STRONG)

    assert result["token_type"] == "bearer"
    assert result["email"] == "lee@mentorhub.io"
    assert user_service.login(db_session, "lee@mentorhub.io", "Wr0ng@Pass") is None
    assert user_service.login(db_session, "missing@mentorhub.io", STRONG) is None


def test_update_user_ignores_protected_fields(db_session, make_user):
    user = make_user(email="u@mentorhub.io")
    original_hash = user.password_hash

    updated = user_service.update_user(
        db_session, user.id, {"bio": "hello", "password_hash": "x", "email_otp": "123456"}
    )

    assert updated.bio == "hello"
    assert updated.password_hash == original_hash
    assert updated.email_otp is None


def test_update_user_email_clash(db_session, make_user):
    make_user(email="first@mentorhub.io")
    second = make_user(email="second@mentorhub.io")

    with pytest.raises(BadRequestError, match="Email already exists"):
        user_service.update_user(db_session, second.id, {"email": "FIRST@mentorhub.io"})


def test_change_password(db_session):
    user = user_service.register_user(db_session, name="Pat", email="pat@mentorhub.io", password=STRONG)

    with pytest.raises(BadRequestError, match="incorrect"):
        user_service.change_password(db_session, user.id, "Wr0ng@Pass", "N3w@Password")
    with pytest.raises(BadRequestError):
        user_service.change_password(db_session, user.id, STRONG, "short")

    user_service.change_password(db_session, user.id, STRONG, "N3w@Password")
    assert verify_password("N3w@Password", user.password_hash)


def test_delete_user(db_session, make_user):
    user = make_user()
    user_service.delete_user(db_session, user.id)

    with pytest.raises(NotFoundError):
        user_service.get_user_or_404(db_session, user.id)


def test_list_mentors_filters_and_sorting(db_session, make_user):
    top = make_user(name="Top", role="mentor", company="Acme Labs", skills=["python", "sql"])
    busy = make_user(name="Busy", role="mentor", company="Acme Cloud", skills=["go"])
    unverified = make_user(name="New", role="mentor", company="Acme", skills=["python"])
    for user, rating, sessions, verified in (
        (top, 4.8, 10, True),
        (busy, 4.8, 30, True),
        (unverified, 5.0, 1, False),
    ):
        profile = db_session.query(MentorProfile).filter_by(user_id=user.id).one()
        profile.average_rating = rating
        profile.total_sessions = sessions
        profile.is_verified = verified
    db_session.commit()

    everyone = user_service.list_mentors(db_session)
    pythonistas = user_service.list_mentors(db_session, skills="python,rust")
    high_rated = user_service.list_mentors(db_session, min_rating=4.9)
    by_domain = user_service.list_mentors(db_session, domain="cloud")

    assert [m.name for m in everyone["items"]] == ["Busy", "Top"]
    assert [m.name for m in pythonistas["items"]] == ["Top"]
    assert high_rated["total"] == 0
    assert [m.name for m in by_domain["items"]] == ["Busy"]


def test_list_students_pagination(db_session, make_user):
    for _ in range(5):
        make_user(role="student")

    page = user_service.list_students(db_session, page=2, limit=2)

    assert page["total"] == 5
    assert page["total_pages"] == 3
    assert page["current_page"] == 2
    assert len(page["items"]) == 2


def test_upsert_profile_for_mentor(db_session, make_user):
    user = make_user(email="mentor@mentorhub.io", role="mentor")

    updated = user_service.upsert_profile(
        db_session,
        {
            "email": "mentor@mentorhub.io",
            "role": "mentor",
            "company": "Acme",
            "experience": "5 years",
            "languages": ["English", "Hindi"],
            "skills": ["python"],
            "mentor_extras": {"services": ["code review", "career"], "formats": ["1:1"]},
        },
    )

    profile = updated.mentor_profile
    assert updated.skills == ["python"]
    assert profile.domain == "Acme"
    assert profile.languages == "English, Hindi"
    assert profile.services == "code review, career"
    assert profile.mentorship_formats == ["1:1"]
    assert profile.max_students == 10
    assert updated.last_login is not None


def test_upsert_profile_unknown_email(db_session):
    with pytest.raises(NotFoundError):
        user_service.upsert_profile(db_session, {"email": "ghost@mentorhub.io"})


# ======================
# PROFILE PICTURES
# ======================

@pytest.fixture
def picture_dir(tmp_path, monkeypatch):
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(tmp_path))
    return tmp_path / user_service.PROFILE_PICTURE_DIR


def _stored_picture(name="me.png", payload=b"png-bytes"):
    return resource_service.store_upload(io.BytesIO(payload), name, subdir=user_service.PROFILE_PICTURE_DIR)


@pytest.mark.parametrize(
    "filename, content_type, allowed",
    [
        ("me.png", "image/png", True),
        ("ME.JPG", "image/jpeg", True),
        ("me.webp", "image/webp", True),
        ("me.svg", "image/svg+xml", False),
        ("notes.txt", "text/plain", False),
        ("me.png", "application/octet-stream", False),
    ],
)
def test_picture_type_check(filename, content_type, allowed):
    assert user_service.is_allowed_picture(filename, content_type) is allowed


def test_new_picture_replaces_the_old_file(db_session, make_user, picture_dir):
    user = make_user(email="pic@mentorhub.io")
    first = _stored_picture()
    user_service.set_profile_picture(db_session, user.email, first)
    second = _stored_picture("me.jpg")

    updated = user_service.set_profile_picture(db_session, "PIC@mentorhub.io", second)

    assert updated.profile_picture == "/uploads/profiles/" + os.path.basename(second)
    assert os.path.exists(second)
    assert not os.path.exists(first)


@pytest.mark.parametrize("email, error", [(None, BadRequestError), ("ghost@mentorhub.io", NotFoundError)])
def test_rejected_picture_is_removed(db_session, picture_dir, email, error):
    stored = _stored_picture()

    with pytest.raises(error):
        user_service.set_profile_picture(db_session, email, stored)

    assert not os.path.exists(stored)


def test_oversized_picture_is_rejected(db_session, make_user, picture_dir, monkeypatch):
    user = make_user(email="big@mentorhub.io")
    monkeypatch.setattr(user_service, "MAX_PROFILE_PICTURE_BYTES", 4)
    stored = _stored_picture(payload=b"too large")

    with pytest.raises(BadRequestError, match="5MB"):
        user_service.set_profile_picture(db_session, user.email, stored)

    assert user.profile_picture is None
    assert not os.path.exists(stored)


def test_delete_picture(db_session, make_user, picture_dir):
    user = make_user(email="del@mentorhub.io")
    stored = _stored_picture()
    user_service.set_profile_picture(db_session, user.email, stored)

    user_service.delete_profile_picture(db_session, user.email)

    assert user.profile_picture is None
    assert not os.path.exists(stored)
    with pytest.raises(BadRequestError, match="No profile picture"):
        user_service.delete_profile_picture(db_session, user.email)


def test_delete_keeps_external_picture_urls_off_disk(db_session, make_user, picture_dir):
    user = make_user(email="ext@mentorhub.io", profile_picture="https://cdn.example.com/me.png")

    user_service.delete_profile_picture(db_session, user.email)

    assert user.profile_picture is None
