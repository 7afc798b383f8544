# mentorhub/main.py
import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from mentorhub.api import auth, blogs, bookings, chat, realtime, resources, users
from mentorhub.config import settings
from mentorhub.database import Base, engine
from mentorhub.errors import register_exception_handlers
from mentorhub.logging_config import setup_logging
from mentorhub.services.presence import PresenceRegistry

setup_logging(settings)
logger = logging.getLogger(__name__)

# Create database tables (Alembic handles migrations outside development)
Base.metadata.create_all(bind=engine)

# Initialize FastAPI app
app = FastAPI(title="MentorHub API", version="0.1")
app.state.presence = PresenceRegistry()
register_exception_handlers(app)

# CORS Middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# API routers
app.include_router(auth.router, prefix="/api")       # /api/register, /api/login, /api/otp/*
app.include_router(users.router, prefix="/api")      # /api/users/*, /api/mentors, /api/profile/*
app.include_router(bookings.router, prefix="/api")   # /api/bookings/*
app.include_router(chat.router, prefix="/api")       # /api/chat/*
app.include_router(resources.router, prefix="/api")  # /api/resource/*, /api/resources
app.include_router(blogs.router, prefix="/api")      # /api/blogs/*
app.include_router(realtime.router)                  # /ws

# Uploaded files (profile pictures under /uploads/profiles)
os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=settings.UPLOAD_DIR), name="uploads")

logger.info("MentorHub API started (env=%s)", settings.APP_ENV)


@app.get("/")
def root():
    return {"message": "MentorHub API is running", "version": "0.1"}
