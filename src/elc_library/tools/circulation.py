"""Circulation Tools - Loan Management

Modifies the catalog and the loan ledger. Both change together in one
storage transaction, so a book is never shown as out without its record.

Tools:
- checkout_book: Lend a book to a teacher for the standard loan period
- return_book: Take a book back and close its active loan
"""

import logging
from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator

from ..observability.decorators import trace_tool
from ..observability.metrics import record_circulation_event
from ..state import BookUnavailableError, get_library_state
from ._responses import error_response, require_session, success_response

logger = logging.getLogger(__name__)


def _log_operation(operation: str, **kwargs) -> None:
    """Log operation details for audit trail."""
    logger.info(
        "Operation: %s | Details: %s", operation, " | ".join(f"{k}={v}" for k, v in kwargs.items())
    )


class CheckoutBookInput(BaseModel):
    """Input schema for book checkout operations."""

    book_id: str = Field(
        ...,
        description="Id of the book to lend",
        min_length=1,
        examples=["elc-001"],
    )

    teacher_id: str = Field(
        ...,
        description="Staff id of the borrowing teacher",
        min_length=1,
        max_length=50,
        examples=["T-12345"],
    )

    teacher_name: str = Field(
        ...,
        description="Full name of the borrowing teacher",
        min_length=1,
        max_length=200,
        examples=["Sarah J. Mitchell"],
    )

    @field_validator("teacher_id", "teacher_name")
    @classmethod
    def strip_whitespace(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class ReturnBookInput(BaseModel):
    """Input schema for book returns."""

    book_id: str = Field(
        ...,
        description="Id of the book being returned",
        min_length=1,
        examples=["elc-001"],
    )


@trace_tool("checkout_book")
async def checkout_book_handler(arguments: dict[str, Any]) -> dict[str, Any]:
    """Lend an available book to a teacher."""
    state = get_library_state()
    if unauthorized := require_session(state, "checkout_book"):
        return unauthorized

    try:
        params = CheckoutBookInput.model_validate(arguments)
    except ValidationError as e:
        logger.warning("Invalid checkout parameters: %s", e)
        return error_response("Invalid checkout parameters", str(e))

    try:
        record = state.checkout(params.book_id, params.teacher_id, params.teacher_name)
    except BookUnavailableError as e:
        return error_response("Book unavailable", str(e))
    except Exception as e:
        logger.exception("Unexpected error during checkout")
        return error_response("Checkout failed", str(e))

    if record is None:
        return error_response("Not found", f"No book with id {params.book_id}")

    book = state.get_book(params.book_id)
    record_circulation_event("checkout", book.category.value if book else "unknown")
    _log_operation(
        "checkout", book_id=record.book_id, teacher=record.borrower_id, due=record.due_date
    )

    title = book.title if book else record.book_id
    return success_response(
        f"'{title}' checked out to {record.borrower_name}. "
        f"Due back on {record.due_date.isoformat()}.",
        {
            "record": record.model_dump(mode="json", by_alias=True),
            "book": book.model_dump(mode="json", by_alias=True, exclude_none=True) if book else None,
        },
    )


@trace_tool("return_book")
async def return_book_handler(arguments: dict[str, Any]) -> dict[str, Any]:
    """Take a book back and close its active loan."""
    state = get_library_state()
    if unauthorized := require_session(state, "return_book"):
        return unauthorized

    try:
        params = ReturnBookInput.model_validate(arguments)
    except ValidationError as e:
        logger.warning("Invalid return parameters: %s", e)
        return error_response("Invalid return parameters", str(e))

    book = state.get_book(params.book_id)
    if book is None:
        return error_response("Not found", f"No book with id {params.book_id}")
    was_out = not book.is_available

    try:
        record = state.return_book(params.book_id)
    except Exception as e:
        logger.exception("Unexpected error during return")
        return error_response("Return failed", str(e))

    if record is None and not was_out:
        return success_response(
            f"'{book.title}' was not checked out. Nothing to return.",
            {"record": None, "book": book.model_dump(mode="json", by_alias=True, exclude_none=True)},
        )

    record_circulation_event("return", book.category.value)
    _log_operation("return", book_id=params.book_id, record=record.id if record else None)

    returned = state.get_book(params.book_id)
    borrower = f" from {record.borrower_name}" if record else ""
    return success_response(
        f"'{book.title}' returned{borrower}. It is available again.",
        {
            "record": record.model_dump(mode="json", by_alias=True) if record else None,
            "book": returned.model_dump(mode="json", by_alias=True, exclude_none=True)
            if returned
            else None,
        },
    )


checkout_book = {
    "name": "checkout_book",
    "description": (
        "Check out an available book to a teacher for the standard loan period. "
        "Requires a staff session."
    ),
    "handler": checkout_book_handler,
}

return_book = {
    "name": "return_book",
    "description": (
        "Return a checked-out book, closing its active loan and making it "
        "available again. Requires a staff session."
    ),
    "handler": return_book_handler,
}
