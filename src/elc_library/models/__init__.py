"""
ELC Library models.

Pydantic models for the catalog, the loan ledger and the session user.
The adapters below convert whole collections to and from the JSON layout
kept in the storage area.
"""

from pydantic import TypeAdapter

from .book import Book, BookCategory, BookLevel, BookStatus
from .circulation import CheckoutRecord, LoanStats, LoanStatus
from .user import User, UserRole

BookList = TypeAdapter(list[Book])
RecordList = TypeAdapter(list[CheckoutRecord])


def dump_books(books: list[Book]) -> list[dict]:
    """Serialize a catalog to JSON-ready dicts."""
    return BookList.dump_python(books, mode="json", by_alias=True, exclude_none=True)


def dump_records(records: list[CheckoutRecord]) -> list[dict]:
    """Serialize loan records to JSON-ready dicts."""
    return RecordList.dump_python(records, mode="json", by_alias=True, exclude_none=True)


def dump_user(user: User) -> dict:
    """Serialize the session user to a JSON-ready dict."""
    return user.model_dump(mode="json")


__all__ = [
    "Book",
    "BookCategory",
    "BookLevel",
    "BookList",
    "BookStatus",
    "CheckoutRecord",
    "LoanStats",
    "LoanStatus",
    "RecordList",
    "User",
    "UserRole",
    "dump_books",
    "dump_records",
    "dump_user",
]
