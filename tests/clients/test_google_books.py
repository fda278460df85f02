# tests/clients/test_google_books.py
import asyncio

import httpx

from readinglog.clients import google_books
from readinglog.clients.google_books import (
    build_query,
    fetch_book_metadata,
    search_books_google_api,
    volume_to_metadata,
)

VOLUME = {
    "volumeInfo": {
        "title": "The Remains of the Day",
        "authors": ["Kazuo Ishiguro"],
        "imageLinks": {
            "smallThumbnail": "http://books.google.com/small.jpg",
            "thumbnail": "http://books.google.com/thumb.jpg",
        },
    }
}

def _run(handler, coro_factory):
    async def runner():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            return await coro_factory(client)
    return asyncio.run(runner())

def test_build_query():
    assert build_query(" Kokoro ") == "intitle:Kokoro"
    assert build_query("Kokoro", "Natsume Sōseki") == "intitle:Kokoro inauthor:Natsume Sōseki"
    assert build_query("Kokoro", "  ") == "intitle:Kokoro"

def test_volume_to_metadata_prefers_thumbnail_over_https():
    metadata = volume_to_metadata(VOLUME)

    assert metadata.title == "The Remains of the Day"
    assert metadata.author == "Kazuo Ishiguro"
    assert metadata.image_url == "https://books.google.com/thumb.jpg"
    assert metadata.source == "google_books"

def test_volume_to_metadata_joins_authors_and_handles_missing_fields():
    metadata = volume_to_metadata({"volumeInfo": {"authors": ["A. One", "B. Two"]}})

    assert metadata.author == "A. One, B. Two"
    assert metadata.image_url is None

def test_fetch_book_metadata(monkeypatch):
    monkeypatch.setattr(google_books.settings, "GOOGLE_BOOKS_API_KEY", "")
    seen = {}

    def handler(request):
        seen["q"] = request.url.params.get("q")
        seen["key"] = request.url.params.get("key")
        seen["maxResults"] = request.url.params.get("maxResults")
        return httpx.Response(200, json={"items": [VOLUME]})

    metadata = _run(handler, lambda c: fetch_book_metadata("The Remains of the Day", client=c))

    assert metadata.author == "Kazuo Ishiguro"
    assert seen == {"q": "intitle:The Remains of the Day", "key": None, "maxResults": "1"}

def test_search_sends_api_key_when_configured(monkeypatch):
    monkeypatch.setattr(google_books.settings, "GOOGLE_BOOKS_API_KEY", "secret")
    seen = {}

    def handler(request):
        seen["key"] = request.url.params.get("key")
        return httpx.Response(200, json={})

    items = _run(handler, lambda c: search_books_google_api("anything", client=c))

    assert items == []
    assert seen["key"] == "secret"

def test_fetch_book_metadata_no_results():
    handler = lambda request: httpx.Response(200, json={"totalItems": 0})
    assert _run(handler, lambda c: fetch_book_metadata("Nothing Matches", client=c)) is None

def test_fetch_book_metadata_http_error():
    handler = lambda request: httpx.Response(503, text="unavailable")
    assert _run(handler, lambda c: fetch_book_metadata("Any", client=c)) is None

def test_fetch_book_metadata_network_error():
    def handler(request):
        raise httpx.ConnectError("offline", request=request)

    assert _run(handler, lambda c: fetch_book_metadata("Any", client=c)) is None

def test_fetch_book_metadata_bad_json():
    handler = lambda request: httpx.Response(200, text="<html>not json</html>")
    assert _run(handler, lambda c: fetch_book_metadata("Any", client=c)) is None

def test_fetch_book_metadata_volume_without_author_or_cover():
    handler = lambda request: httpx.Response(200, json={"items": [{"volumeInfo": {"title": "Bare"}}]})
    assert _run(handler, lambda c: fetch_book_metadata("Bare", client=c)) is None

def test_fetch_book_metadata_blank_title_skips_request():
    def handler(request):
        raise AssertionError("no request expected")

    assert _run(handler, lambda c: fetch_book_metadata("   ", client=c)) is None

def test_search_list_body_returns_none():
    handler = lambda request: httpx.Response(200, json=[])
    assert _run(handler, lambda c: search_books_google_api("Any", client=c)) is None

def test_search_items_not_a_list_returns_none():
    handler = lambda request: httpx.Response(200, json={"items": {"volumeInfo": {}}})
    assert _run(handler, lambda c: search_books_google_api("Any", client=c)) is None

def test_fetch_book_metadata_wrongly_typed_field():
    volume = {"volumeInfo": {"title": 42, "authors": ["Someone"]}}
    handler = lambda request: httpx.Response(200, json={"items": [volume]})
    assert _run(handler, lambda c: fetch_book_metadata("Typed", client=c)) is None

def test_fetch_book_metadata_volume_not_a_dict():
    handler = lambda request: httpx.Response(200, json={"items": ["just a string"]})
    assert _run(handler, lambda c: fetch_book_metadata("Odd", client=c)) is None
