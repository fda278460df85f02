"""
Async client for the public Google Books API.
Used to fill in the author and cover of a book the user is adding. The API works
without a key; when GOOGLE_BOOKS_API_KEY is set it is sent along for a higher quota.
"""

import httpx
from pydantic import ValidationError
from readinglog.core.config import settings
from readinglog.schemas.book import BookMetadata
import logging
from typing import Any, List, Optional

logger = logging.getLogger(__name__)

GOOGLE_BOOKS_API_URL = "https://www.googleapis.com/books/v1/volumes"
SOURCE_NAME = "google_books"

async def search_books_google_api(
    query: str,
    max_results: int = 10,
    client: Optional[httpx.AsyncClient] = None,
) -> Optional[List[Any]]:
    """
    Searches volumes on the Google Books API.

    Args:
        query (str): Search expression (keywords, intitle:, inauthor:, ...).
        max_results (int, optional): Maximum number of volumes to return (default 10).
        client (Optional[httpx.AsyncClient]): Client to reuse. A short-lived one is opened otherwise.

    Returns:
        Optional[List[Any]]: Volumes (each a dict) on success, None if the request failed.
    """
    params = {
        "q": query,
        "maxResults": max_results,
        "printType": "books",
    }
    if settings.GOOGLE_BOOKS_API_KEY:
        params["key"] = settings.GOOGLE_BOOKS_API_KEY

    try:
        if client is None:
            async with httpx.AsyncClient(timeout=settings.LOOKUP_TIMEOUT) as own_client:
                response = await own_client.get(GOOGLE_BOOKS_API_URL, params=params)
        else:
            response = await client.get(GOOGLE_BOOKS_API_URL, params=params)
        response.raise_for_status()
        data = response.json()
        items = data.get("items", [])
        if not isinstance(items, list):
            raise TypeError(f"items is {type(items).__name__}, expected a list")
        logger.info(
            f"Google Books search for '{query}' succeeded. "
            f"{len(items)} results."
        )
        return items
    except httpx.RequestError as exc:
        logger.error(f"Google Books request failed: {exc}")
        return None
    except httpx.HTTPStatusError as exc:
        logger.error(f"Google Books HTTP error: {exc.response.status_code} - {exc.response.text}")
        return None
    except (ValueError, AttributeError, TypeError) as exc:
        logger.error(f"Google Books returned an unreadable payload: {exc}")
        return None
    except Exception as e:
        logger.exception(f"Unexpected error searching Google Books: {e}")
        return None

def build_query(title: str, author: Optional[str] = None) -> str:
    query = f"intitle:{title.strip()}"
    if author and author.strip():
        query += f" inauthor:{author.strip()}"
    return query

def _https(url: Optional[str]) -> Optional[str]:
    if url and url.startswith("http://"):
        return "https://" + url[len("http://"):]
    return url

def volume_to_metadata(volume: dict) -> BookMetadata:
    """
    Maps a Google Books volume onto BookMetadata.
    """
    info = volume.get("volumeInfo", {}) or {}
    authors = info.get("authors", []) or []
    image_links = info.get("imageLinks", {}) or {}
    cover_url = image_links.get("thumbnail") or image_links.get("smallThumbnail")
    return BookMetadata(
        title=info.get("title"),
        author=", ".join(a for a in authors if a) or None,
        image_url=_https(cover_url),
        source=SOURCE_NAME,
    )

async def fetch_book_metadata(
    title: str,
    author: Optional[str] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> Optional[BookMetadata]:
    """
    Looks up the best matching volume for a title (and author, if known).

    Returns:
        Optional[BookMetadata]: Metadata of the first volume, None when nothing was found
        or the request failed.
    """
    if not title or not title.strip():
        return None

    volumes = await search_books_google_api(build_query(title, author), max_results=1, client=client)
    if not volumes:
        return None

    try:
        metadata = volume_to_metadata(volumes[0])
    except (AttributeError, TypeError, ValidationError) as exc:
        logger.error(f"Google Books volume for '{title}' is malformed: {exc}")
        return None

    if metadata.is_empty:
        logger.info(f"Google Books volume for '{title}' has no author or cover.")
        return None
    return metadata
