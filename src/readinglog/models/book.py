"""
ORM model for the Book entity of readinglog.
A book is the only record the application stores.
"""

from sqlalchemy import Column, Integer, String, Text, DateTime, CheckConstraint, func
from readinglog.db.session import Base

READ_STATUS = "read"

class Book(Base):
    """
    A book saved to the reading list.

    Attributes:
        id (int): Primary key assigned by the store.
        title (str): Title of the book.
        author (str): Author, typed by the user or filled in from the metadata lookup.
        status (str): None while unread, "read" once marked as read.
        image_url (str): Cover image URL from the metadata lookup.
        created_at (datetime): Insertion time, used to order the list.
    """
    __tablename__ = "books"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(Text, nullable=False)
    author = Column(Text, nullable=False)
    status = Column(String(20), nullable=True, default=None)
    image_url = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)

    __table_args__ = (
        CheckConstraint(f"status IS NULL OR status = '{READ_STATUS}'", name="book_status_check"),
        CheckConstraint("title <> ''", name="book_title_not_empty"),
        CheckConstraint("author <> ''", name="book_author_not_empty"),
    )

    @property
    def is_read(self) -> bool:
        return self.status == READ_STATUS

    def __repr__(self) -> str:
        read_flag = " [READ]" if self.is_read else ""
        return f"<Book(id={self.id}, title='{self.title[:30]}', author='{self.author}'){read_flag}>"
