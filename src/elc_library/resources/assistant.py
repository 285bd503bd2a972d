"""Assistant Resources

Resources:
- library://assistant/transcript - The conversation so far
- library://assistant/inventory-summary - What the assistant is told about the collection
"""

from typing import Any

from ..assistant import QUICK_PROMPTS, get_assistant, summarize_inventory
from ..state import get_library_state
from .session import require_user


async def transcript_handler() -> dict[str, Any]:
    """Returns the assistant transcript and the quick prompts."""
    require_user()
    assistant = get_assistant()
    return {
        "messages": [message.model_dump() for message in assistant.messages],
        "pending": assistant.is_pending,
        "quick_prompts": QUICK_PROMPTS,
    }


async def inventory_summary_handler() -> dict[str, Any]:
    """Returns the per-category summary sent with every assistant request."""
    require_user()
    books = get_library_state().books
    return {
        "total": len(books),
        "categories": [summary.model_dump() for summary in summarize_inventory(books)],
    }


assistant_resources: list[dict[str, Any]] = [
    {
        "uri": "library://assistant/transcript",
        "name": "Assistant Transcript",
        "description": "The pedagogy assistant conversation, starting with its greeting",
        "mime_type": "application/json",
        "handler": transcript_handler,
    },
    {
        "uri": "library://assistant/inventory-summary",
        "name": "Inventory Summary",
        "description": "Per-category totals and sample titles given to the pedagogy assistant",
        "mime_type": "application/json",
        "handler": inventory_summary_handler,
    },
]
