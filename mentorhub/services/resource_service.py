# mentorhub/services/resource_service.py
"""
Mentor resources: shared links and uploaded files.
Files live under settings.UPLOAD_DIR; the database keeps their metadata.
"""

import logging
import os
import shutil
import uuid
from typing import Any, BinaryIO, Dict, List, Optional

from sqlalchemy.orm import Session

from mentorhub.config import settings
from mentorhub.errors import BadRequestError, NotFoundError
from mentorhub.models.resource import RESOURCE_CATEGORIES, RESOURCE_TYPES, Resource
from mentorhub.utils.timeutils import utcnow

logger = logging.getLogger(__name__)

LIST_LIMIT = 100
UPDATABLE_FIELDS = ("title", "description", "category", "url")


def _category(value: Optional[str]) -> str:
    category = value or "other"
    if category not in RESOURCE_CATEGORIES:
        raise BadRequestError("Invalid category. Must be one of: " + ", ".join(RESOURCE_CATEGORIES))
    return category


def remove_stored_file(path: Optional[str]) -> None:
    """Delete an uploaded file; failures are logged only."""
    if not path:
        return
    try:
        if os.path.exists(path):
            os.remove(path)
    except OSError:
        logger.exception("Failed to delete stored file %s", path)


def get_resource(db: Session, resource_id: int) -> Resource:
    resource = db.query(Resource).filter(Resource.id == resource_id).first()
    if not resource:
        raise NotFoundError("Resource not found")
    return resource


def create_link_resource(db: Session, data: Dict[str, Any]) -> Resource:
    if not data.get("mentor_email") or not data.get("mentor_name"):
        raise BadRequestError("Mentor information is required")
    if not data.get("title"):
        raise BadRequestError("Title is required")
    if (data.get("type") or "link") != "link":
        raise BadRequestError("Use the upload endpoint for file resources")
    if not data.get("url"):
        raise BadRequestError("URL is required for link resources")

    resource = Resource(
        mentor_id=data.get("mentor_id") or None,
        mentor_email=data["mentor_email"].strip().lower(),
        mentor_name=data["mentor_name"],
        type="link",
        title=data["title"],
        description=data.get("description") or "",
        category=_category(data.get("category")),
        url=data["url"],
    )
    db.add(resource)
    db.commit()
    db.refresh(resource)
    logger.info("Link resource %s created by %s", resource.id, resource.mentor_email)
    return resource


def store_upload(fileobj: BinaryIO, original_name: str, subdir: Optional[str] = None) -> str:
    """Copy an upload into UPLOAD_DIR (or a subdirectory of it) under a unique name and return its path."""
    directory = os.path.join(settings.UPLOAD_DIR, subdir) if subdir else settings.UPLOAD_DIR
    os.makedirs(directory, exist_ok=True)
    safe_name = os.path.basename(original_name or "upload")
    path = os.path.join(directory, f"{uuid.uuid4().hex}-{safe_name}")
    with open(path, "wb") as out:
        shutil.copyfileobj(fileobj, out)
    return path


def create_file_resource(
    db: Session,
    *,
    stored_path: str,
    file_name: str,
    file_type: Optional[str],
    mentor_email: Optional[str],
    mentor_name: Optional[str],
    title: Optional[str],
    description: Optional[str] = None,
    category: Optional[str] = None,
    mentor_id: Optional[int] = None,
) -> Resource:
    """
    Record an already stored upload.

    The stored file is removed again if validation or the insert fails.
    """
    try:
        if not mentor_email or not mentor_name or not title:
            raise BadRequestError("Mentor information and title are required")
        resource = Resource(
            mentor_id=mentor_id or None,
            mentor_email=mentor_email.strip().lower(),
            mentor_name=mentor_name,
            type="file",
            title=title,
            description=description or "",
            category=_category(category),
            file_name=file_name,
            file_size=os.path.getsize(stored_path),
            file_type=file_type,
            file_path=stored_path,
        )
        db.add(resource)
        db.commit()
    except Exception:
        db.rollback()
        remove_stored_file(stored_path)
        raise
    db.refresh(resource)
    logger.info("File resource %s uploaded by %s", resource.id, resource.mentor_email)
    return resource


def list_mentor_resources(db: Session, mentor_email: str) -> List[Resource]:
    return (
        db.query(Resource)
        .filter(Resource.mentor_email == mentor_email.strip().lower())
        .order_by(Resource.created_at.desc(), Resource.id.desc())
        .all()
    )


def list_resources(db: Session, category: Optional[str] = None, type: Optional[str] = None) -> List[Resource]:
    query = db.query(Resource)
    if category:
        query = query.filter(Resource.category == category)
    if type:
        if type not in RESOURCE_TYPES:
            raise BadRequestError("Invalid type. Must be one of: " + ", ".join(RESOURCE_TYPES))
        query = query.filter(Resource.type == type)
    return query.order_by(Resource.created_at.desc(), Resource.id.desc()).limit(LIST_LIMIT).all()


def get_download(db: Session, resource_id: int) -> Resource:
    resource = get_resource(db, resource_id)
    if resource.type != "file":
        raise BadRequestError("Resource is not a file")
    if not resource.file_path or not os.path.exists(resource.file_path):
        raise NotFoundError("File not found")
    return resource


def update_resource(db: Session, resource_id: int, changes: Dict[str, Any]) -> Resource:
    resource = get_resource(db, resource_id)
    for field in UPDATABLE_FIELDS:
        if changes.get(field) is None:
            continue
        value = _category(changes[field]) if field == "category" else changes[field]
        setattr(resource, field, value)
    resource.updated_at = utcnow()
    db.commit()
    db.refresh(resource)
    return resource


def delete_resource(db: Session, resource_id: int) -> None:
    resource = get_resource(db, resource_id)
    stored_path = resource.file_path if resource.type == "file" else None
    db.delete(resource)
    db.commit()
    remove_stored_file(stored_path)
    logger.info("Resource %s deleted", resource_id)
