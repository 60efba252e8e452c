import os
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base

from ..app.config import Config

# Define the default database file path
DB_PATH = os.path.join(os.path.dirname(__file__), "college.db")
DATABASE_URL = Config.DATABASE_URL or f"sqlite:///{DB_PATH}"

# Create a base class for our models
Base = declarative_base()


def make_engine(database_url: str):
    """Create an engine; SQLite connections are shared across request threads."""
    connect_args = {"check_same_thread": False} if database_url.startswith("sqlite") else {}
    return create_engine(database_url, connect_args=connect_args)


# Create the SQLAlchemy engine
engine = make_engine(DATABASE_URL)

# Create a configured "Session" class
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def create_tables(bind=None):
    """Create all tables in the database."""
    # Import all models here before calling create_all
    # This ensures they are registered with the Base metadata
    from .models import User, ChatMessage, CollegeInfo
    Base.metadata.create_all(bind=bind or engine)


if __name__ == "__main__":
    create_tables()
    print("Database tables created successfully.")
