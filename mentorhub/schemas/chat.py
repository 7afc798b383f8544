# mentorhub/schemas/chat.py
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

_REQUEST_CONFIG = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ======================
# MESSAGES
# ======================

class MessageCreate(BaseModel):
    sender: Optional[str] = None
    receiver: Optional[str] = None
    content: Optional[str] = None
    type: str = "text"


class MarkReadRequest(BaseModel):
    # Reader is the receiver whose inbox is cleared; partner sent the messages
    user_id: Optional[str] = None
    other_user_id: Optional[str] = None

    model_config = _REQUEST_CONFIG


class MessageResponse(BaseModel):
    id: int
    conversation_id: str
    sender: str
    receiver: str
    content: str
    type: str
    read: bool
    timestamp: datetime

    model_config = ConfigDict(from_attributes=True)


class ConversationSummary(BaseModel):
    conversation_id: str
    partner: str
    last_message: MessageResponse
    unread_count: int


class MarkReadResponse(BaseModel):
    message: str
    updated: int


# ======================
# CHAT REQUESTS
# ======================

class ChatRequestCreate(BaseModel):
    sender: Optional[str] = None
    receiver: Optional[str] = None
    message: Optional[str] = None


class ChatRequestResponse(BaseModel):
    id: int
    sender: str
    receiver: str
    message: Optional[str] = None
    status: str
    created_at: Optional[datetime] = None
    responded_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ChatRequestResult(BaseModel):
    message: str
    request: ChatRequestResponse
    can_chat: bool = False


class ChatRequestList(BaseModel):
    requests: List[ChatRequestResponse]


class ChatPermission(BaseModel):
    can_chat: bool
    request: Optional[ChatRequestResponse] = None
