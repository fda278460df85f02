"""
Async client for the Open Library search API.
Second metadata source, asked for whatever Google Books did not return. No key required.
"""

import httpx
from pydantic import ValidationError
from readinglog.core.config import settings
from readinglog.schemas.book import BookMetadata
import logging
from typing import Optional

logger = logging.getLogger(__name__)

OPEN_LIBRARY_SEARCH_URL = "https://openlibrary.org/search.json"
OPEN_LIBRARY_COVER_URL = "https://covers.openlibrary.org/b/id/{cover_id}-M.jpg"
SOURCE_NAME = "open_library"

def doc_to_metadata(doc: dict) -> BookMetadata:
    authors = doc.get("author_name", []) or []
    cover_id = doc.get("cover_i")
    return BookMetadata(
        title=doc.get("title"),
        author=", ".join(a for a in authors if a) or None,
        image_url=OPEN_LIBRARY_COVER_URL.format(cover_id=cover_id) if cover_id else None,
        source=SOURCE_NAME,
    )

async def fetch_book_metadata(
    title: str,
    author: Optional[str] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> Optional[BookMetadata]:
    """
    Looks up a book on Open Library by title (and author, if known).

    Args:
        title (str): Title typed by the user.
        author (Optional[str]): Author typed by the user, narrows the search.
        client (Optional[httpx.AsyncClient]): Client to reuse. A short-lived one is opened otherwise.

    Returns:
        Optional[BookMetadata]: Metadata of the first match, None when nothing matched
        or the request failed.
    """
    if not title or not title.strip():
        return None

    params = {"title": title.strip(), "limit": 1, "fields": "title,author_name,cover_i"}
    if author and author.strip():
        params["author"] = author.strip()

    try:
        if client is None:
            async with httpx.AsyncClient(timeout=settings.LOOKUP_TIMEOUT) as own_client:
                response = await own_client.get(OPEN_LIBRARY_SEARCH_URL, params=params)
        else:
            response = await client.get(OPEN_LIBRARY_SEARCH_URL, params=params)
        response.raise_for_status()
        docs = response.json().get("docs", [])
        if not isinstance(docs, list):
            raise TypeError(f"docs is {type(docs).__name__}, expected a list")
    except httpx.RequestError as exc:
        logger.error(f"Open Library request failed: {exc}")
        return None
    except httpx.HTTPStatusError as exc:
        logger.error(f"Open Library HTTP error: {exc.response.status_code}")
        return None
    except (ValueError, AttributeError, TypeError) as exc:
        logger.error(f"Open Library returned an unreadable payload: {exc}")
        return None
    except Exception as e:
        logger.exception(f"Unexpected error searching Open Library: {e}")
        return None

    if not docs:
        logger.info(f"Open Library has no match for '{title}'.")
        return None

    try:
        metadata = doc_to_metadata(docs[0])
    except (AttributeError, TypeError, ValidationError) as exc:
        logger.error(f"Open Library match for '{title}' is malformed: {exc}")
        return None
    return None if metadata.is_empty else metadata
