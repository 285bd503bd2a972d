"""Custom metrics for the ELC Library MCP server."""

import logfire

books_circulation = logfire.metric_counter(
    "library.books.circulation", description="Book circulation events (checkout/return)"
)

assistant_requests = logfire.metric_counter(
    "assistant.requests", description="Pedagogy assistant requests by outcome"
)


def record_circulation_event(event_type: str, book_category: str) -> None:
    """Record a checkout or return."""
    books_circulation.add(1, {"event_type": event_type, "category": book_category})


def record_assistant_request(outcome: str) -> None:
    """Record one assistant exchange: ``ok``, ``empty`` or ``transport_error``."""
    assistant_requests.add(1, {"outcome": outcome})
