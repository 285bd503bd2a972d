"""Loan Resources - Circulation Dashboard

The admin view of the loan ledger. Every resource here requires a staff
session.

Resources:
- library://loans/active - Books currently out, with overdue flags
- library://loans/history - Returned loans, most recent first
- library://loans/stats - Active, overdue and returned totals
"""

import logging
from typing import Any

from ..models import CheckoutRecord
from ..state import LibraryState, get_library_state
from .session import require_user

logger = logging.getLogger(__name__)


def _loan_payload(state: LibraryState, record: CheckoutRecord) -> dict[str, Any]:
    """A loan record joined with the title and ISBN of its book."""
    book = state.get_book(record.book_id)
    today = state.today()
    return {
        **record.model_dump(mode="json", by_alias=True),
        "title": book.title if book else None,
        "isbn": book.isbn if book else None,
        "overdue": record.is_overdue(today),
        "daysOverdue": record.days_overdue(today),
    }


async def active_loans_handler() -> dict[str, Any]:
    """Returns every active loan in checkout order."""
    require_user()
    state = get_library_state()
    loans = [_loan_payload(state, record) for record in state.active_loans()]
    logger.debug("MCP Resource Request - loans/active (%d loans)", len(loans))
    return {"loans": loans, "total": len(loans)}


async def loan_history_handler() -> dict[str, Any]:
    """Returns returned loans, most recent checkout first."""
    require_user()
    state = get_library_state()
    loans = [_loan_payload(state, record) for record in state.returned_loans()]
    return {"loans": loans, "total": len(loans)}


async def loan_stats_handler() -> dict[str, Any]:
    """Returns the dashboard headline numbers."""
    require_user()
    state = get_library_state()
    return {
        **state.loan_stats().model_dump(),
        "as_of": state.today().isoformat(),
    }


loan_resources: list[dict[str, Any]] = [
    {
        "uri": "library://loans/active",
        "name": "Active Loans",
        "description": "Books currently checked out, with borrower, due date and overdue flag",
        "mime_type": "application/json",
        "handler": active_loans_handler,
    },
    {
        "uri": "library://loans/history",
        "name": "Loan History",
        "description": "Returned loans, most recent checkout first",
        "mime_type": "application/json",
        "handler": loan_history_handler,
    },
    {
        "uri": "library://loans/stats",
        "name": "Loan Statistics",
        "description": "Counts of active loans, overdue loans and returns",
        "mime_type": "application/json",
        "handler": loan_stats_handler,
    },
]
