"""
Database engine + session factory.

DATABASE_URL defaults to a local SQLite file. Schema changes go through
Alembic; nothing here creates tables.
"""
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, DeclarativeBase

from outlet_ops.config import DATABASE_URL


class Base(DeclarativeBase):
    pass


def normalize_url(raw: str) -> str:
    """SQLAlchemy 2.x only accepts the postgresql:// scheme."""
    if raw.startswith('postgres://'):
        return 'postgresql://' + raw[len('postgres://'):]
    return raw


def make_engine(database_url: str):
    if database_url.startswith('sqlite'):
        # Flask may hand a session to a different worker thread
        return create_engine(database_url, connect_args={'check_same_thread': False})
    return create_engine(database_url, pool_pre_ping=True, pool_size=5, max_overflow=10)


url = normalize_url(DATABASE_URL)
engine = make_engine(url)
SessionLocal = sessionmaker(bind=engine)


def get_session():
    """New session on the configured engine. Caller closes it."""
    return SessionLocal()
