"""Pytest bootstrap: test settings, in-memory database and factories."""

import os
import sys
import tempfile
from datetime import date
from pathlib import Path

# Settings are read at import time, so these must be set before mentorhub is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["EMAIL_NOTIFICATIONS_ENABLED"] = "false"
os.environ["APP_ENV"] = "development"
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="mentorhub-uploads-")

# Ensure project root is on sys.path so `import mentorhub` works without install
PROJECT_ROOT = Path(__file__).resolve().parents[1]
project_root_str = str(PROJECT_ROOT)
if project_root_str not in sys.path:
    sys.path.insert(0, project_root_str)

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from mentorhub.database import Base, get_db, get_session_factory
from mentorhub.models.booking import Booking
from mentorhub.models.user import MenteeProfile, MentorProfile, User
from mentorhub.utils.security import issue_user_token


# ======================
# TEST DATABASE SETUP
# ======================

@pytest.fixture
def session_factory():
    """Sessionmaker bound to a fresh in-memory database per test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)

    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)

    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(db_session, session_factory):
    """TestClient wired to the per-test database."""
    from fastapi.testclient import TestClient
    from mentorhub.main import app
    from mentorhub.services.presence import PresenceRegistry

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    app.state.presence = PresenceRegistry()
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


# ======================
# FACTORIES
# ======================

@pytest.fixture
def make_user(db_session):
    counter = {"n": 0}

    def _make_user(name=None, email=None, role="student", with_profile=True, **fields):
        counter["n"] += 1
        n = counter["n"]
        user = User(
            name=name or f"User {n}",
            email=email or f"user{n}@mentorhub.io",
            password_hash=fields.pop("password_hash", "not-a-real-hash"),
            role=role,
            is_active=True,
            **fields,
        )
        db_session.add(user)
        db_session.flush()
        if with_profile:
            if role == "mentor":
                db_session.add(MentorProfile(user_id=user.id))
            else:
                db_session.add(MenteeProfile(user_id=user.id))
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture
def make_booking(db_session):
    def _make_booking(mentee, mentor, status="pending", duration="1 hour", on=None, rating=None):
        booking = Booking(
            user_id=mentee.id,
            mentor_id=mentor.id,
            mentor_name=mentor.name,
            session_type="video-call",
            duration=duration,
            date=on or date(2026, 3, 2),
            time="10:00",
            notes="",
            cost=0,
            status=status,
            rating=rating,
            topics=["python"],
        )
        db_session.add(booking)
        db_session.commit()
        db_session.refresh(booking)
        return booking

    return _make_booking


@pytest.fixture
def mentee(make_user):
    return make_user(name="Maya Mentee", email="maya@mentorhub.io", role="student")


@pytest.fixture
def mentor(make_user):
    return make_user(name="Omar Mentor", email="omar@mentorhub.io", role="mentor")


@pytest.fixture
def auth_headers():
    def _auth_headers(user):
        token = issue_user_token(user)
        return {"Authorization": f"Bearer {token}"}

    return _auth_headers
