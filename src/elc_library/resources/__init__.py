"""
ELC Library MCP Resources

Resources are the read-only side of the server: the catalog, the loan
dashboard, the session and the assistant transcript. Each resource is a
dictionary with a ``uri`` (or ``uri_template``), name, description, MIME
type and async handler.
"""

from .assistant import assistant_resources
from .books import book_resources
from .loans import loan_resources
from .session import session_resources

all_resources = book_resources + loan_resources + session_resources + assistant_resources

__all__ = [
    "all_resources",
    "assistant_resources",
    "book_resources",
    "loan_resources",
    "session_resources",
]
