"""Pedagogy Assistant Tool

Lets a logged-in teacher consult the pedagogy assistant. The reply comes
from the client's own LLM through MCP sampling, grounded in a summary of
the current collection.
"""

import logging
from typing import Any

from fastmcp import Context
from pydantic import BaseModel, Field, ValidationError

from ..assistant import get_assistant
from ..observability.decorators import trace_tool
from ..state import get_library_state
from ._responses import error_response, require_session, success_response

logger = logging.getLogger(__name__)


class AskAssistantInput(BaseModel):
    """Input schema for assistant questions."""

    message: str = Field(
        ...,
        description="Question for the pedagogy consultant",
        max_length=2000,
        examples=["What medical English resources do we have?"],
    )


@trace_tool("ask_pedagogy_assistant")
async def ask_pedagogy_assistant_handler(arguments: dict[str, Any], ctx: Context) -> dict[str, Any]:
    """Send a question to the assistant and return its reply."""
    if unauthorized := require_session(get_library_state(), "ask_pedagogy_assistant"):
        return unauthorized

    try:
        params = AskAssistantInput.model_validate(arguments)
    except ValidationError as e:
        logger.warning("Invalid assistant parameters: %s", e)
        return error_response("Invalid assistant parameters", str(e))

    assistant = get_assistant()
    try:
        reply = await assistant.send(ctx, params.message)
    except Exception as e:
        logger.exception("Unexpected error in pedagogy assistant")
        return error_response("Assistant failed", str(e))

    if reply is None:
        reason = "a reply is still pending" if assistant.is_pending else "the message was blank"
        return error_response("Message ignored", reason)

    return success_response(
        reply.content,
        {"reply": reply.model_dump(), "transcript_length": len(assistant.messages)},
    )


ask_pedagogy_assistant = {
    "name": "ask_pedagogy_assistant",
    "description": (
        "Ask the ELC pedagogy consultant for resource recommendations from the "
        "collection. Requires a staff session and a client that supports sampling."
    ),
    "handler": ask_pedagogy_assistant_handler,
}
