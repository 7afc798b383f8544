# mentorhub/api/resources.py
"""
Resource API Router

Endpoints:
- POST /resource - Share a link
- POST /resource/upload - Upload a file (multipart)
- GET /resource/mentor/{mentor_email} - A mentor's resources
- GET /resources - Browse all, filter by category/type
- GET /resource/download/{resource_id} - Download a file
- PUT /resource/{resource_id} - Update
- DELETE /resource/{resource_id} - Delete (and remove the stored file)
"""

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from fastapi.responses import FileResponse
from sqlalchemy.orm import Session

from mentorhub.database import get_db
from mentorhub.errors import BadRequestError
from mentorhub.schemas.resource import (
    ResourceCreate,
    ResourceList,
    ResourceResponse,
    ResourceResult,
    ResourceUpdate,
)
from mentorhub.services import resource_service

router = APIRouter(tags=["resources"])


@router.post("/resource", response_model=ResourceResult, status_code=status.HTTP_201_CREATED)
def create_resource(payload: ResourceCreate, db: Session = Depends(get_db)):
    resource = resource_service.create_link_resource(db, payload.model_dump())
    return {"message": "Resource created successfully", "resource": resource}


@router.post("/resource/upload", response_model=ResourceResult, status_code=status.HTTP_201_CREATED)
def upload_resource(
    file: Optional[UploadFile] = File(None),
    title: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    mentor_email: Optional[str] = Form(None, alias="mentorEmail"),
    mentor_name: Optional[str] = Form(None, alias="mentorName"),
    mentor_id: Optional[int] = Form(None, alias="mentorId"),
    db: Session = Depends(get_db),
):
    if file is None or not file.filename:
        raise BadRequestError("No file uploaded")

    stored_path = resource_service.store_upload(file.file, file.filename)
    resource = resource_service.create_file_resource(
        db,
        stored_path=stored_path,
        file_name=file.filename,
        file_type=file.content_type,
        mentor_email=mentor_email,
        mentor_name=mentor_name,
        title=title,
        description=description,
        category=category,
        mentor_id=mentor_id,
    )
    return {"message": "File uploaded successfully", "resource": resource}


@router.get("/resource/mentor/{mentor_email}", response_model=ResourceList)
def list_mentor_resources(mentor_email: str, db: Session = Depends(get_db)):
    resources = resource_service.list_mentor_resources(db, mentor_email)
    return {"count": len(resources), "resources": resources}


@router.get("/resources", response_model=ResourceList)
def list_resources(
    category: Optional[str] = None,
    type: Optional[str] = None,
    db: Session = Depends(get_db),
):
    resources = resource_service.list_resources(db, category=category, type=type)
    return {"count": len(resources), "resources": resources}


@router.get("/resource/download/{resource_id}")
def download_resource(resource_id: int, db: Session = Depends(get_db)):
    resource = resource_service.get_download(db, resource_id)
    return FileResponse(
        resource.file_path,
        media_type=resource.file_type or "application/octet-stream",
        filename=resource.file_name,
    )


@router.put("/resource/{resource_id}", response_model=ResourceResult)
def update_resource(resource_id: int, payload: ResourceUpdate, db: Session = Depends(get_db)):
    resource = resource_service.update_resource(db, resource_id, payload.model_dump(exclude_unset=True))
    return {"message": "Resource updated successfully", "resource": resource}


@router.delete("/resource/{resource_id}", response_model=ResourceResult)
def delete_resource(resource_id: int, db: Session = Depends(get_db)):
    # Serialize before the row is gone
    snapshot = ResourceResponse.model_validate(resource_service.get_resource(db, resource_id))
    resource_service.delete_resource(db, resource_id)
    return {"message": "Resource deleted successfully", "resource": snapshot}
