"""
Pydantic schemas for the Book entity of readinglog.
Covers the user submission, the metadata lookup result and the read model.
"""

from enum import Enum
import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

class BookStatus(str, Enum):
    """Allowed values for Book.status. An unread book has no status."""
    READ = "read"

class BookCreate(BaseModel):
    """
    Schema for a book submitted through the form.

    Attributes:
        title (str): Book title, required and non-empty.
        author (Optional[str]): Author, may be left out and back-filled by the lookup.
        image_url (Optional[str]): Cover URL, normally filled in by the lookup.
    """
    title: str
    author: Optional[str] = None
    image_url: Optional[str] = None

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("title must not be empty")
        return value

    @field_validator("author", "image_url")
    @classmethod
    def blank_to_none(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        value = value.strip()
        return value or None

class BookMetadata(BaseModel):
    """
    Metadata found by a lookup source.

    Attributes:
        title (Optional[str]): Title as the source knows it.
        author (Optional[str]): Comma-separated author names.
        image_url (Optional[str]): Cover image URL.
        source (str): Name of the source that answered ("google_books", "open_library").
    """
    title: Optional[str] = None
    author: Optional[str] = None
    image_url: Optional[str] = None
    source: str

    @property
    def is_empty(self) -> bool:
        return not self.author and not self.image_url

class BookSchema(BaseModel):
    """
    Output schema for a saved book.
    """
    id: int
    title: str
    author: str
    status: Optional[BookStatus] = None
    image_url: Optional[str] = None
    created_at: Optional[datetime.datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @property
    def is_read(self) -> bool:
        return self.status == BookStatus.READ
