# tests/conftest.py
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
import os
import sys

# Add the src directory to the Python path so the tests run without an install
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
src_path = os.path.join(project_root, 'src')
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from readinglog.db.session import Base
# Import the models so they are registered with Base
from readinglog.models import book  # noqa: F401
from readinglog.models.book import Book

# --- Test Database Setup ---
# In-memory SQLite database shared by the whole test session
TEST_DATABASE_URL = "sqlite:///:memory:"

@pytest.fixture(scope="session")
def db_engine():
    engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
    Base.metadata.create_all(bind=engine)
    yield engine

@pytest.fixture(scope="session")
def db_session_factory(db_engine):
    """Returns a SQLAlchemy session factory."""
    return sessionmaker(autocommit=False, autoflush=False, bind=db_engine)

@pytest.fixture(scope="function")
def db_session(db_engine, db_session_factory):
    """Provides a transactional scope around a test function."""
    connection = db_engine.connect()
    transaction = connection.begin()
    session = db_session_factory(bind=connection)

    try:
        yield session
    finally:
        session.close()
        # Roll back everything the test wrote, unless a failed commit already did
        if transaction.is_active:
            transaction.rollback()
        connection.close()

@pytest.fixture
def saved_book(db_session):
    book = Book(title="Kafka on the Shore", author="Haruki Murakami")
    db_session.add(book)
    db_session.commit()
    db_session.refresh(book)
    return book
