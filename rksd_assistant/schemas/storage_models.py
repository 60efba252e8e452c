"""Record models shared by both storage backends.

- Insert* models carry what callers provide; the storage stamps ids/timestamps.
- `metadata` on CollegeInfo stays a JSON string, as stored.
"""
from enum import Enum
from datetime import datetime
from pydantic import BaseModel, ConfigDict
from typing import Optional

class MessageRole(str, Enum):
    user = "user"
    assistant = "assistant"

class InsertUser(BaseModel):
    username: str
    password: str

class User(InsertUser):
    model_config = ConfigDict(from_attributes=True)

    id: str

class InsertChatMessage(BaseModel):
    content: str
    role: MessageRole
    language: Optional[str] = None

class ChatMessage(InsertChatMessage):
    model_config = ConfigDict(from_attributes=True)

    id: str
    timestamp: Optional[datetime] = None

class InsertCollegeInfo(BaseModel):
    category: str
    title: str
    content: str
    metadata: Optional[str] = None

class CollegeInfo(InsertCollegeInfo):
    id: str
