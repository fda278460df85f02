from .crud_book import (
    create_book,
    get_books,
    get_book_by_id,
    get_books_missing_cover,
    mark_book_as_read,
    set_book_cover,
    delete_book,
)

__all__ = [
    "create_book",
    "get_books",
    "get_book_by_id",
    "get_books_missing_cover",
    "mark_book_as_read",
    "set_book_cover",
    "delete_book",
]
