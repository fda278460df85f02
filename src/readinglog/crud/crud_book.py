"""
CRUD operations for the Book model.
One function per remote operation the page performs: insert, ordered select,
status update and delete.
"""

from sqlalchemy.orm import Session
from sqlalchemy import select, desc, or_
from sqlalchemy.exc import SQLAlchemyError
from typing import List, Optional
import logging

from ..models.book import Book, READ_STATUS
from ..schemas.book import BookCreate

logger = logging.getLogger(__name__)

def create_book(db: Session, book: BookCreate) -> Book:
    """
    Inserts a book.

    Args:
        db (Session): SQLAlchemy session.
        book (BookCreate): Validated submission. The author must already be resolved.

    Returns:
        Book: The stored book, with its id assigned.

    Raises:
        ValueError: If the author is missing. Nothing is written.
        SQLAlchemyError: If the insert fails. The session is rolled back first.
    """
    if not book.author:
        raise ValueError("author must be resolved before the book is saved")

    db_book = Book(title=book.title, author=book.author, image_url=book.image_url)
    db.add(db_book)
    try:
        db.commit()
        db.refresh(db_book)
        logger.info(f"Book {db_book.id} created: '{db_book.title}' by {db_book.author}.")
    except SQLAlchemyError as e:
        logger.exception(f"Error saving book '{book.title}': {e}")
        db.rollback()
        raise

    return db_book

def get_books(db: Session, skip: int = 0, limit: int = 100) -> List[Book]:
    """Returns saved books, newest first."""
    stmt = (
        select(Book)
        .order_by(desc(Book.created_at), desc(Book.id))
        .offset(skip)
        .limit(limit)
    )
    return list(db.execute(stmt).scalars().all())

def get_book_by_id(db: Session, book_id: int) -> Optional[Book]:
    return db.get(Book, book_id)

def get_books_missing_cover(db: Session, limit: int = 50) -> List[Book]:
    """Returns books that have no cover image yet, oldest first."""
    stmt = (
        select(Book)
        .where(or_(Book.image_url.is_(None), Book.image_url == ""))
        .order_by(Book.id)
        .limit(limit)
    )
    return list(db.execute(stmt).scalars().all())

def mark_book_as_read(db: Session, book_id: int) -> bool:
    """
    Sets a book's status to "read".
    Returns True if the book is now read, False if it does not exist or the update failed.
    """
    db_book = get_book_by_id(db, book_id)
    if not db_book:
        logger.warning(f"Attempted to mark non-existent book ID {book_id} as read")
        return False

    if db_book.status == READ_STATUS:
        return True

    db_book.status = READ_STATUS
    try:
        db.commit()
        logger.info(f"Book {book_id} marked as read.")
        return True
    except SQLAlchemyError as e:
        logger.exception(f"Error marking book {book_id} as read: {e}")
        db.rollback()
        return False

def set_book_cover(db: Session, book_id: int, image_url: str) -> bool:
    """Stores a cover URL for a book. Used by the cover back-fill script."""
    db_book = get_book_by_id(db, book_id)
    if not db_book:
        return False

    db_book.image_url = image_url
    try:
        db.commit()
        return True
    except SQLAlchemyError as e:
        logger.exception(f"Error storing cover for book {book_id}: {e}")
        db.rollback()
        return False

def delete_book(db: Session, book_id: int) -> bool:
    """
    Deletes a book.
    Returns True if deleted, False if it does not exist or the delete failed.
    """
    db_book = get_book_by_id(db, book_id)
    if not db_book:
        logger.warning(f"Attempted to delete non-existent book ID {book_id}")
        return False

    try:
        db.delete(db_book)
        db.commit()
        logger.info(f"Book {book_id} deleted.")
        return True
    except SQLAlchemyError as e:
        logger.exception(f"Error deleting book {book_id}: {e}")
        db.rollback()
        return False
