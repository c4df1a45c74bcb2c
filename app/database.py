from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
import os

# Loads the active env file as a side effect
from Security.sanitizer_config import SANITIZER_SETTINGS  # noqa: F401

# Database connection (fallback to local SQLite if not provided)
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./vetconnect.db")


def is_sqlite_database(url):
    return url is not None and url.startswith("sqlite")


connect_args = {"check_same_thread": False} if is_sqlite_database(DATABASE_URL) else {}

engine = create_engine(DATABASE_URL, pool_pre_ping=True, connect_args=connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
