"""Session Tools - Staff Login

Start and end the admin session that gates every other tool and resource.
There is no credential check: any staff id and name are accepted.

Tools:
- login: Start a session as an admin
- logout: End the current session
"""

import logging
from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator

from ..observability.decorators import trace_tool
from ..state import get_library_state
from ._responses import error_response, success_response

logger = logging.getLogger(__name__)


class LoginInput(BaseModel):
    """Input schema for staff login."""

    staff_id: str = Field(
        ...,
        description="Academic staff id",
        min_length=1,
        max_length=50,
        examples=["T-12345"],
    )

    name: str = Field(
        ...,
        description="Full name as it should appear on loan records",
        min_length=1,
        max_length=200,
        examples=["Sarah J. Mitchell"],
    )

    @field_validator("staff_id", "name")
    @classmethod
    def strip_whitespace(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


@trace_tool("login")
async def login_handler(arguments: dict[str, Any]) -> dict[str, Any]:
    """Start an admin session for the given staff member."""
    try:
        params = LoginInput.model_validate(arguments)
    except ValidationError as e:
        logger.warning("Invalid login parameters: %s", e)
        return error_response("Invalid login parameters", str(e))

    try:
        user = get_library_state().login(params.staff_id, params.name)
    except Exception as e:
        logger.exception("Unexpected error during login")
        return error_response("Login failed", str(e))

    return success_response(
        f"Welcome back, {user.name}. You are logged in as {user.role.value}.",
        {"user": user.model_dump(mode="json")},
    )


@trace_tool("logout")
async def logout_handler(arguments: dict[str, Any] | None = None) -> dict[str, Any]:  # noqa: ARG001
    """End the current session."""
    state = get_library_state()
    previous = state.current_user

    try:
        state.logout()
    except Exception as e:
        logger.exception("Unexpected error during logout")
        return error_response("Logout failed", str(e))

    message = f"Goodbye, {previous.name}." if previous else "No session was active."
    return success_response(message, {"user": None})


login = {
    "name": "login",
    "description": (
        "Start a staff session. Every other tool and most resources require a "
        "session. Provide the academic staff id and full name."
    ),
    "handler": login_handler,
}

logout = {
    "name": "logout",
    "description": "End the current staff session.",
    "handler": logout_handler,
}
