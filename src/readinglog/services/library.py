"""
Adding books to the reading list, with best-effort metadata enrichment.

A submission goes through three steps:

1. `lookup_metadata` asks Google Books, then Open Library, for the author and
   cover of the title, filling from the second source whatever the first one
   left blank. Any failure simply yields None.
2. `apply_metadata` fills the author and cover only where the user left them
   empty. What the user typed always wins.
3. `add_book` checks that title and author are both present and inserts the row.
"""

import logging
from typing import Awaitable, Callable, Optional, Sequence

import httpx
from sqlalchemy.orm import Session

from readinglog.clients import google_books, open_library
from readinglog.core.config import settings
from readinglog.crud.crud_book import create_book, get_books_missing_cover, set_book_cover
from readinglog.models.book import Book
from readinglog.schemas.book import BookCreate, BookMetadata

logger = logging.getLogger(__name__)

MetadataSource = Callable[..., Awaitable[Optional[BookMetadata]]]

DEFAULT_SOURCES: Sequence[MetadataSource] = (
    google_books.fetch_book_metadata,
    open_library.fetch_book_metadata,
)

class MissingAuthorError(ValueError):
    """Raised when a book has no author after enrichment."""

    def __init__(self, title: str):
        super().__init__(f"No author given or found for '{title}'")
        self.title = title

def needs_lookup(book_in: BookCreate) -> bool:
    return not book_in.author or not book_in.image_url

def merge_metadata(found: Optional[BookMetadata], extra: BookMetadata) -> BookMetadata:
    """
    Fills the blanks of `found` from `extra`. Fields `found` already has are kept.
    """
    if found is None:
        return extra

    updates = {
        field: getattr(extra, field)
        for field in ("title", "author", "image_url")
        if not getattr(found, field) and getattr(extra, field)
    }
    if not updates:
        return found
    updates["source"] = f"{found.source}+{extra.source}"
    return found.model_copy(update=updates)

async def lookup_metadata(
    title: str,
    author: Optional[str] = None,
    sources: Optional[Sequence[MetadataSource]] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> Optional[BookMetadata]:
    """
    Asks each source in turn until the author and cover are both known.

    The author counts as known when the caller passes one. Later sources only
    fill what earlier ones left blank. Returns None when nothing was found, and
    right away when enrichment is disabled in the settings.
    """
    if not settings.ENRICHMENT_ENABLED:
        return None

    found: Optional[BookMetadata] = None
    for source in sources or DEFAULT_SOURCES:
        metadata = await source(title, author, client=client)
        if metadata is None:
            continue
        found = merge_metadata(found, metadata)
        if (author or found.author) and found.image_url:
            break

    if found is None:
        logger.info(f"No metadata found for '{title}'.")
    else:
        logger.info(f"Metadata for '{title}' found via {found.source}.")
    return found

async def backfill_covers(
    db: Session,
    limit: int = 50,
    sources: Optional[Sequence[MetadataSource]] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> int:
    """
    Looks up covers for saved books that have none. Authors are never changed.

    Args:
        db (Session): SQLAlchemy session.
        limit (int): Maximum number of books to look up.
        sources: Metadata sources to ask, Google Books then Open Library by default.
        client (Optional[httpx.AsyncClient]): Client shared by all lookups.

    Returns:
        int: Number of books that received a cover.
    """
    books = get_books_missing_cover(db, limit=limit)
    logger.info(f"--- {len(books)} book(s) without a cover ---")
    updated = 0

    for book in books:
        metadata = await lookup_metadata(book.title, book.author, sources=sources, client=client)
        if metadata is None or not metadata.image_url:
            logger.info(f"  No cover for '{book.title}'.")
            continue
        if set_book_cover(db, book.id, metadata.image_url):
            updated += 1
            logger.info(f"  Cover stored for '{book.title}' ({metadata.source}).")

    logger.info(f"--- Back-fill finished: {updated} cover(s) added ---")
    return updated

def apply_metadata(book_in: BookCreate, metadata: Optional[BookMetadata]) -> BookCreate:
    if metadata is None:
        return book_in

    updates = {}
    if not book_in.author and metadata.author:
        updates["author"] = metadata.author
    if not book_in.image_url and metadata.image_url:
        updates["image_url"] = metadata.image_url
    return book_in.model_copy(update=updates) if updates else book_in

def add_book(db: Session, book_in: BookCreate, metadata: Optional[BookMetadata] = None) -> Book:
    """
    Saves a submission, enriched with the given metadata.

    Args:
        db (Session): SQLAlchemy session.
        book_in (BookCreate): What the user typed.
        metadata (Optional[BookMetadata]): Result of `lookup_metadata`, if one was made.

    Returns:
        Book: The stored book.

    Raises:
        MissingAuthorError: If neither the user nor the lookup provided an author.
    """
    book_in = apply_metadata(book_in, metadata)
    if not book_in.author:
        raise MissingAuthorError(book_in.title)
    return create_book(db, book_in)
