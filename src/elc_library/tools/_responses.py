"""Response helpers shared by the MCP tools."""

import json
import logging
from typing import Any

from ..state import LibraryState

logger = logging.getLogger(__name__)

NOT_LOGGED_IN = "Not logged in: call the login tool with your staff id and name first"


def error_response(error_type: str, details: str) -> dict[str, Any]:
    """Format error responses consistently across all tools."""
    return {"isError": True, "content": [{"type": "text", "text": f"{error_type}: {details}"}]}


def success_response(message: str, data: dict[str, Any]) -> dict[str, Any]:
    """Human-readable text first, structured data for further processing."""
    return {
        "content": [{"type": "text", "text": message}],
        "data": json.loads(json.dumps(data, default=str)),
    }


def require_session(state: LibraryState, tool_name: str) -> dict[str, Any] | None:
    """Error response when no one is logged in, None otherwise."""
    if state.is_authenticated:
        return None
    logger.warning("Rejected %s call without a session", tool_name)
    return error_response("Unauthorized", NOT_LOGGED_IN)
