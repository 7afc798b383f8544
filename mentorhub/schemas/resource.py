# mentorhub/schemas/resource.py
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

_REQUEST_CONFIG = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ResourceCreate(BaseModel):
    mentor_id: Optional[int] = None
    mentor_email: Optional[str] = None
    mentor_name: Optional[str] = None
    type: str = "link"
    title: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    url: Optional[str] = None

    model_config = _REQUEST_CONFIG


class ResourceUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    url: Optional[str] = None

    model_config = _REQUEST_CONFIG


class ResourceResponse(BaseModel):
    id: int
    mentor_id: Optional[int] = None
    mentor_email: str
    mentor_name: str
    type: str
    title: str
    description: Optional[str] = None
    category: str
    url: Optional[str] = None
    file_name: Optional[str] = None
    file_size: Optional[int] = None
    file_type: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ResourceResult(BaseModel):
    success: bool = True
    message: str
    resource: ResourceResponse


class ResourceList(BaseModel):
    success: bool = True
    count: int
    resources: List[ResourceResponse]
