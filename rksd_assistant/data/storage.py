"""Storage backends for chat history, users and the college fact store.

Two interchangeable implementations sit behind the `Storage` interface:

- `MemStorage` keeps everything in Python lists/dicts for the life of the
  process. This is the default and what the widget runs with in production.
- `DatabaseStorage` persists to a relational database through SQLAlchemy.

Both seed the college facts from the bundled `raw/college_info.json` and only
ever offer flat create/list/filter/search operations.
"""
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Dict, List, Optional
import json
import uuid

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from ..app.config import Config
from ..schemas.storage_models import (
    ChatMessage,
    CollegeInfo,
    InsertChatMessage,
    InsertCollegeInfo,
    InsertUser,
    User,
)
from ..utils.logger import get_logger

logger = get_logger("storage")

COLLEGE_INFO_PATH = Config.COLLEGE_INFO_PATH


class StorageError(Exception):
    """Raised when a storage backend cannot complete an operation."""


def load_college_facts(path: Optional[str] = None) -> List[InsertCollegeInfo]:
    """Read the bundled fact file; nested metadata is kept as a JSON string."""
    with open(path or COLLEGE_INFO_PATH, encoding="utf-8") as f:
        rows = json.load(f)
    facts = []
    for row in rows:
        metadata = row.get("metadata")
        if metadata is not None and not isinstance(metadata, str):
            metadata = json.dumps(metadata)
        facts.append(InsertCollegeInfo(
            category=row["category"],
            title=row["title"],
            content=row["content"],
            metadata=metadata,
        ))
    return facts


def _matches(info: CollegeInfo, term: str) -> bool:
    return (term in info.title.lower()
            or term in info.content.lower()
            or term in info.category.lower())


class Storage(ABC):
    """Interface shared by the in-memory and relational backends."""

    # Users
    @abstractmethod
    def get_user(self, user_id: str) -> Optional[User]:
        ...

    @abstractmethod
    def get_user_by_username(self, username: str) -> Optional[User]:
        ...

    @abstractmethod
    def create_user(self, user: InsertUser) -> User:
        ...

    # Chat messages
    @abstractmethod
    def get_chat_messages(self, limit: int = Config.MAX_CHAT_MESSAGES) -> List[ChatMessage]:
        """Return the most recent `limit` messages, oldest first."""
        ...

    @abstractmethod
    def create_chat_message(self, message: InsertChatMessage) -> ChatMessage:
        ...

    # College information
    @abstractmethod
    def get_college_info(self) -> List[CollegeInfo]:
        ...

    @abstractmethod
    def get_college_info_by_category(self, category: str) -> List[CollegeInfo]:
        ...

    @abstractmethod
    def create_college_info(self, info: InsertCollegeInfo) -> CollegeInfo:
        ...

    @abstractmethod
    def search_college_info(self, query: str) -> List[CollegeInfo]:
        """Case-insensitive substring match on title, content and category."""
        ...


class MemStorage(Storage):
    def __init__(self, facts_path: Optional[str] = None):
        self.users: Dict[str, User] = {}
        self.chat_messages: List[ChatMessage] = []
        self.college_info: List[CollegeInfo] = []
        for fact in load_college_facts(facts_path):
            self.create_college_info(fact)
        logger.info("MemStorage ready with %d college facts", len(self.college_info))

    def get_user(self, user_id: str) -> Optional[User]:
        return self.users.get(user_id)

    def get_user_by_username(self, username: str) -> Optional[User]:
        return next((u for u in self.users.values() if u.username == username), None)

    def create_user(self, user: InsertUser) -> User:
        if self.get_user_by_username(user.username):
            raise StorageError(f"username '{user.username}' already exists")
        record = User(id=str(uuid.uuid4()), **user.model_dump())
        self.users[record.id] = record
        return record

    def get_chat_messages(self, limit: int = Config.MAX_CHAT_MESSAGES) -> List[ChatMessage]:
        if limit <= 0:
            return []
        ordered = sorted(self.chat_messages, key=lambda m: m.timestamp)
        return ordered[-limit:]

    def create_chat_message(self, message: InsertChatMessage) -> ChatMessage:
        record = ChatMessage(
            id=str(uuid.uuid4()),
            timestamp=datetime.now(timezone.utc),
            **message.model_dump(),
        )
        self.chat_messages.append(record)
        return record

    def get_college_info(self) -> List[CollegeInfo]:
        return list(self.college_info)

    def get_college_info_by_category(self, category: str) -> List[CollegeInfo]:
        return [i for i in self.college_info if i.category == category]

    def create_college_info(self, info: InsertCollegeInfo) -> CollegeInfo:
        record = CollegeInfo(id=str(uuid.uuid4()), **info.model_dump())
        self.college_info.append(record)
        return record

    def search_college_info(self, query: str) -> List[CollegeInfo]:
        term = query.lower()
        return [i for i in self.college_info if _matches(i, term)]


class DatabaseStorage(Storage):
    def __init__(self, engine=None, facts_path: Optional[str] = None):
        from . import database
        from . import models

        self.models = models
        if engine is None:
            self.engine = database.engine
            self.Session = database.SessionLocal
        else:
            self.engine = engine
            self.Session = sessionmaker(autocommit=False, autoflush=False, bind=engine)
        database.create_tables(bind=self.engine)
        self._seed(facts_path)

    def _seed(self, facts_path: Optional[str]):
        with self.Session() as db:
            if db.query(self.models.CollegeInfo).count() > 0:
                return
        facts = load_college_facts(facts_path)
        for fact in facts:
            self.create_college_info(fact)
        logger.info("Seeded college_info table with %d facts", len(facts))

    def _add(self, row):
        with self.Session() as db:
            try:
                db.add(row)
                db.commit()
                db.refresh(row)
                return row
            except IntegrityError as e:
                db.rollback()
                raise StorageError(f"Constraint violated: {e.orig}") from e
            except SQLAlchemyError as e:
                db.rollback()
                raise StorageError(f"Database write failed: {e}") from e

    def _query(self, build):
        with self.Session() as db:
            try:
                return build(db)
            except SQLAlchemyError as e:
                raise StorageError(f"Database read failed: {e}") from e

    @staticmethod
    def _to_info(row) -> CollegeInfo:
        return CollegeInfo(
            id=row.id,
            category=row.category,
            title=row.title,
            content=row.content,
            metadata=row.info_metadata,
        )

    @staticmethod
    def _to_message(row) -> ChatMessage:
        message = ChatMessage.model_validate(row)
        # SQLite hands back naive datetimes; they were written as UTC
        if message.timestamp is not None and message.timestamp.tzinfo is None:
            message.timestamp = message.timestamp.replace(tzinfo=timezone.utc)
        return message

    def get_user(self, user_id: str) -> Optional[User]:
        row = self._query(lambda db: db.get(self.models.User, user_id))
        return User.model_validate(row) if row else None

    def get_user_by_username(self, username: str) -> Optional[User]:
        User_ = self.models.User
        row = self._query(lambda db: db.query(User_).filter(User_.username == username).first())
        return User.model_validate(row) if row else None

    def create_user(self, user: InsertUser) -> User:
        row = self._add(self.models.User(username=user.username, password=user.password))
        return User.model_validate(row)

    def get_chat_messages(self, limit: int = Config.MAX_CHAT_MESSAGES) -> List[ChatMessage]:
        if limit <= 0:
            return []
        Message = self.models.ChatMessage
        rows = self._query(
            lambda db: db.query(Message).order_by(Message.timestamp.desc()).limit(limit).all()
        )
        return [self._to_message(r) for r in reversed(rows)]

    def create_chat_message(self, message: InsertChatMessage) -> ChatMessage:
        row = self._add(self.models.ChatMessage(
            content=message.content,
            role=message.role.value,
            language=message.language,
            timestamp=datetime.now(timezone.utc),
        ))
        return self._to_message(row)

    def get_college_info(self) -> List[CollegeInfo]:
        Info = self.models.CollegeInfo
        rows = self._query(lambda db: db.query(Info).all())
        return [self._to_info(r) for r in rows]

    def get_college_info_by_category(self, category: str) -> List[CollegeInfo]:
        Info = self.models.CollegeInfo
        rows = self._query(lambda db: db.query(Info).filter(Info.category == category).all())
        return [self._to_info(r) for r in rows]

    def create_college_info(self, info: InsertCollegeInfo) -> CollegeInfo:
        row = self._add(self.models.CollegeInfo(
            category=info.category,
            title=info.title,
            content=info.content,
            info_metadata=info.metadata,
        ))
        return self._to_info(row)

    def search_college_info(self, query: str) -> List[CollegeInfo]:
        term = query.lower()
        return [i for i in self.get_college_info() if _matches(i, term)]


_storage: Optional[Storage] = None


def get_storage() -> Storage:
    """Module-level singleton picked by STORAGE_BACKEND."""
    global _storage
    if _storage is None:
        if Config.STORAGE_BACKEND == "database":
            _storage = DatabaseStorage()
        else:
            _storage = MemStorage()
    return _storage
