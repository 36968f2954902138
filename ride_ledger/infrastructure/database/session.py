"""Database session management for the managed table store"""

from functools import lru_cache
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session
from ride_ledger.config import settings


@lru_cache
def get_engine() -> Engine:
    """Engine is built on first use so importing the app needs no database driver"""
    return create_engine(
        settings.database_url,
        pool_pre_ping=True,
        pool_size=5,
        max_overflow=5,
        pool_recycle=1800,
    )


@lru_cache
def get_sessionmaker() -> sessionmaker:
    return sessionmaker(autoflush=False, bind=get_engine())


def get_db() -> Generator[Session, None, None]:
    """Dependency injection for database sessions"""
    db = get_sessionmaker()()
    try:
        yield db
    finally:
        db.close()
