"""
Database session setup for readinglog.
Creates the SQLAlchemy engine, the session factory and the declarative base for
the ORM models, plus helpers to hand out sessions and create the schema.
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from readinglog.core.config import settings

connect_args = {"check_same_thread": False} if settings.is_sqlite else {}

engine = create_engine(settings.DATABASE_URL, pool_pre_ping=True, connect_args=connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()

def get_db():
    """
    Yields a database session and closes it once the caller is done.

    Yields:
        Session: SQLAlchemy session.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def init_db(bind=None) -> None:
    """
    Creates every table registered on Base.

    Args:
        bind: Engine or connection to use. Defaults to the module engine.
    """
    # Register the models on Base before create_all
    from readinglog.models import book  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)
