from datetime import datetime, timedelta, UTC
from typing import Any, Dict, Optional

from jose import JWTError, jwt
from passlib.context import CryptContext
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from mentorhub import models
from mentorhub.config import settings
from mentorhub.database import get_db


# ==========================
# AUTH CONFIG
# ==========================

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="api/login")

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

BCRYPT_MAX_BYTES = 72


# ==========================
# PASSWORD UTILS
# ==========================

def _bcrypt_safe(password: str) -> str:
    raw = password.encode("utf-8")
    if len(raw) <= BCRYPT_MAX_BYTES:
        return password
    return raw[:BCRYPT_MAX_BYTES].decode("utf-8", errors="ignore")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(_bcrypt_safe(plain_password), hashed_password)


def get_password_hash(password: str) -> str:
    """Hash with bcrypt; input past 72 bytes is ignored by bcrypt anyway."""
    return pwd_context.hash(_bcrypt_safe(password))


# ==========================
# JWT TOKEN
# ==========================

def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    lifetime = expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode["exp"] = datetime.now(UTC) + lifetime
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def issue_user_token(user) -> str:
    """Token identifying a user by email, carrying the role for the client."""
    return create_access_token({"sub": user.email, "role": user.role})


def decode_access_token(token: str) -> Optional[Dict[str, Any]]:
    """Claims of a valid, unexpired token; None otherwise."""
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None


# ==========================
# AUTH HELPERS
# ==========================

def _active_user_by_email(db: Session, email: str):
    user = db.query(models.User).filter(models.User.email == email.strip().lower()).first()
    if user is None or not user.is_active:
        return None
    return user


def authenticate_user(db: Session, email: str, password: str):
    """The active user owning these credentials, or None."""
    user = _active_user_by_email(db, email)
    if user is None or not verify_password(password, user.password_hash):
        return None
    return user


def get_current_user(token: str = Depends(oauth2_scheme), db: Session = Depends(get_db)):
    claims = decode_access_token(token)
    email = claims.get("sub") if claims else None
    user = _active_user_by_email(db, email) if email else None
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token. Authorization denied.",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user
