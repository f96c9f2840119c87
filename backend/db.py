"""
Database setup for the optional shared usage store.
Provides SQLAlchemy engine/session utilities; only touched when USAGE_STORE=sql.
"""
import os

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from settings import settings

DATABASE_URL = settings.PLACES_DB_URL

_connect_args = {}
if DATABASE_URL.startswith("sqlite"):
    # check_same_thread=False allows usage across FastAPI threads
    _connect_args = {"check_same_thread": False}
    _db_file = DATABASE_URL.split("sqlite:///", 1)[-1]
    if _db_file and _db_file != ":memory:":
        os.makedirs(os.path.dirname(os.path.abspath(_db_file)), exist_ok=True)

engine = create_engine(DATABASE_URL, connect_args=_connect_args)
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)
Base = declarative_base()


def init_db() -> None:
    """Create tables if they don't exist."""
    from repositories import models  # noqa: F401  Ensures models are registered

    Base.metadata.create_all(bind=engine)


def get_session():
    """FastAPI dependency-style session generator."""
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
