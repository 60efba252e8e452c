import uuid
from sqlalchemy import Column, String, Text, DateTime
from sqlalchemy.sql import func
from .database import Base


def _uuid():
    return str(uuid.uuid4())


class User(Base):
    __tablename__ = "users"

    id = Column(String, primary_key=True, default=_uuid)
    username = Column(Text, unique=True, nullable=False)
    password = Column(Text, nullable=False)


class ChatMessage(Base):
    __tablename__ = "chat_messages"

    id = Column(String, primary_key=True, default=_uuid)
    content = Column(Text, nullable=False)
    role = Column(Text, nullable=False)  # 'user' or 'assistant'
    timestamp = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    language = Column(Text, nullable=True)  # 'en' or 'hi'


class CollegeInfo(Base):
    __tablename__ = "college_info"

    id = Column(String, primary_key=True, default=_uuid)
    category = Column(Text, nullable=False, index=True)  # 'hostel', 'department', 'contact', etc.
    title = Column(Text, nullable=False)
    content = Column(Text, nullable=False)
    # "metadata" is reserved on declarative classes
    info_metadata = Column("metadata", Text, nullable=True)  # JSON string for additional data
