"""Book Resources - ELC Catalog Access

Exposes the catalog read-only. Every resource here requires a staff session.

Resources:
- library://books/list - The whole catalog in shelf order
- library://books/{book_id} - One book with its active loan
- library://books/search/{term} - Title, author or ISBN search
- library://books/categories - Category filter values
"""

import logging
from typing import Any
from urllib.parse import unquote

from fastmcp.exceptions import ResourceError

from ..models import Book
from ..state import get_library_state
from .session import require_user

logger = logging.getLogger(__name__)


def _book_payload(book: Book) -> dict[str, Any]:
    return book.model_dump(mode="json", by_alias=True, exclude_none=True)


async def list_books_handler() -> dict[str, Any]:
    """Returns the full catalog with availability counts."""
    require_user()
    try:
        books = get_library_state().books
        available = sum(1 for book in books if book.is_available)
        return {
            "books": [_book_payload(book) for book in books],
            "total": len(books),
            "available": available,
            "checked_out": len(books) - available,
        }
    except Exception as e:
        logger.exception("Error in books/list resource")
        raise ResourceError(f"Failed to retrieve book list: {e!s}") from e


async def get_book_handler(book_id: str) -> dict[str, Any]:
    """Returns one book and, when it is out, its active loan."""
    require_user()
    logger.debug("MCP Resource Request - books/%s", book_id)

    state = get_library_state()
    book = state.get_book(book_id)
    if book is None:
        raise ResourceError(f"Book not found: {book_id}")

    record = state.active_record_for(book_id)
    return {
        "book": _book_payload(book),
        "active_loan": record.model_dump(mode="json", by_alias=True) if record else None,
    }


async def search_books_handler(term: str) -> dict[str, Any]:
    """Returns books whose title, author or ISBN match the term."""
    require_user()
    term = unquote(term)
    logger.debug("MCP Resource Request - books/search/%s", term)

    matches = get_library_state().search_books(term)
    return {
        "term": term,
        "books": [_book_payload(book) for book in matches],
        "total": len(matches),
    }


async def list_categories_handler() -> dict[str, Any]:
    """Returns "All" plus every category present in the catalog."""
    require_user()
    return {"categories": get_library_state().categories()}


book_resources: list[dict[str, Any]] = [
    {
        "uri": "library://books/list",
        "name": "Book Catalog",
        "description": "The complete ELC catalog with loan status for every title",
        "mime_type": "application/json",
        "handler": list_books_handler,
    },
    {
        "uri": "library://books/categories",
        "name": "Book Categories",
        "description": "Categories present in the catalog, preceded by 'All'",
        "mime_type": "application/json",
        "handler": list_categories_handler,
    },
    {
        "uri_template": "library://books/search/{term}",
        "name": "Book Search",
        "description": "Search the catalog by title or author (case-insensitive) or ISBN",
        "mime_type": "application/json",
        "handler": search_books_handler,
    },
    {
        "uri_template": "library://books/{book_id}",
        "name": "Book Details",
        "description": "Details of one book, including its active loan if checked out",
        "mime_type": "application/json",
        "handler": get_book_handler,
    },
]
