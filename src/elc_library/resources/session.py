"""Session Resource - Who Is Logged In

Exposes the current staff session. This is the only resource readable
without a session, so clients can find out whether they need to log in.

Resources:
- library://session/current - The logged-in user, or null
"""

import logging
from typing import Any

from fastmcp.exceptions import ResourceError

from ..models import User
from ..state import get_library_state

logger = logging.getLogger(__name__)


def require_user() -> User:
    """The logged-in user; raises ResourceError when there is none."""
    user = get_library_state().current_user
    if user is None:
        raise ResourceError("Not logged in: call the login tool first")
    return user


async def current_session_handler() -> dict[str, Any]:
    """Returns the logged-in user and the loan period in force."""
    state = get_library_state()
    user = state.current_user
    logger.debug("MCP Resource Request - session/current (authenticated=%s)", user is not None)
    return {
        "authenticated": user is not None,
        "user": {**user.model_dump(mode="json"), "initial": user.initial} if user else None,
        "loan_period_days": state.loan_period_days,
    }


session_resources: list[dict[str, Any]] = [
    {
        "uri": "library://session/current",
        "name": "Current Session",
        "description": "The staff member currently logged in, if any",
        "mime_type": "application/json",
        "handler": current_session_handler,
    },
]
