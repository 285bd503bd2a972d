"""
Pedagogy Assistant - AI consultation over the ELC collection

The assistant answers teachers' questions about the collection by asking the
connected MCP client's LLM for a completion (MCP sampling). The catalog is far
too large to send whole, so every request carries a system prompt built from
a per-category summary of the current inventory instead.

The assistant only reads the catalog. Failures never escape ``send``: they
become fixed chat replies.
"""

import logging
from collections.abc import Sequence
from typing import Any, Literal

from fastmcp import Context
from mcp.types import ModelHint, ModelPreferences
from pydantic import BaseModel, Field

from .config import LibraryConfig, get_config
from .models import Book
from .observability.metrics import record_assistant_request
from .state import LibraryState, get_library_state

logger = logging.getLogger(__name__)

GREETING = (
    "Hello! I'm the ELC Pedagogy Specialist. I've just indexed our entire collection. "
    "Are you looking for ESP resources, teacher's books, or something specific like "
    "legal or medical English?"
)
NETWORK_ERROR_REPLY = "Network error. Please try again."
EMPTY_REPLY = "Apologies, I encountered an error processing that request."

# Label shown on the shortcut button -> message it fills in
QUICK_PROMPTS: dict[str, str] = {
    "Medical ESP": "What medical English resources do we have?",
    "Speakout Resources": "Show me Speakout Teacher's Books.",
    "Legal English": "Do we have books for legal English?",
}


class AssistantTransportError(Exception):
    """Raised when the completion request itself fails."""


class ChatMessage(BaseModel):
    """One line of the assistant transcript."""

    role: Literal["assistant", "user"]
    content: str


class CategorySummary(BaseModel):
    """Inventory numbers for one category."""

    category: str
    total: int = Field(..., ge=0)
    available: int = Field(..., ge=0)
    borrowed: int = Field(..., ge=0)
    sample_titles: list[str] = Field(default_factory=list)


def summarize_inventory(books: Sequence[Book], sample_size: int = 5) -> list[CategorySummary]:
    """Group the catalog by category, in the order categories first appear."""
    grouped: dict[str, list[Book]] = {}
    for book in books:
        grouped.setdefault(book.category.value, []).append(book)

    summaries = []
    for category, members in grouped.items():
        available = sum(1 for book in members if book.is_available)
        summaries.append(
            CategorySummary(
                category=category,
                total=len(members),
                available=available,
                borrowed=len(members) - available,
                sample_titles=[book.title for book in members[:sample_size]],
            )
        )
    return summaries


def format_inventory_summary(summaries: Sequence[CategorySummary]) -> str:
    """One line per category with its counts and a few sample titles."""
    return "\n".join(
        f"{summary.category}: {summary.total} titles "
        f"({summary.available} available, {summary.borrowed} borrowed). "
        f"Includes titles like {', '.join(summary.sample_titles)}..."
        for summary in summaries
    )


def build_system_instruction(books: Sequence[Book], institution: str) -> str:
    """Role instruction for the consultant, with the current inventory embedded."""
    summary = format_inventory_summary(summarize_inventory(books))
    return f"""You are a specialized ELC Pedagogy Consultant at {institution}.
Your audience is professional teachers and faculty.
We have an inventory of {len(books)} academic titles.

Inventory Summary:
{summary}

Guidelines:
1. Speak professionally as a peer to university teachers.
2. If they ask for a specific book or topic, assume we likely have it.
3. Recommend books based on pedagogical needs.
4. Focus on professional development and student outcomes.
5. Encourage checking out Teacher's Books for the Speakout, face2face, and Global series."""


async def request_completion(
    context: Context,
    prompt: str,
    system_prompt: str,
    *,
    model_hint: str,
    max_tokens: int = 800,
    temperature: float = 0.7,
) -> str | None:
    """
    Ask the client's LLM for a reply through MCP sampling.

    Returns:
        The reply text, or None if the reply carried no text

    Raises:
        AssistantTransportError: If the sampling request fails
    """
    model_preferences = ModelPreferences(
        hints=[ModelHint(name=model_hint)],
        intelligencePriority=0.7,
        speedPriority=0.6,
    )

    logger.debug("Sending sampling request: %s", prompt[:100])
    try:
        result: Any = await context.sample(
            messages=prompt,
            system_prompt=system_prompt,
            temperature=temperature,
            max_tokens=max_tokens,
            model_preferences=model_preferences,
        )
    except Exception as e:
        raise AssistantTransportError(f"Sampling request failed: {e!s}") from e

    text = getattr(result, "text", None)
    if not text:
        logger.warning("Sampling returned no text content")
        return None
    return text


class PedagogyAssistant:
    """
    Conversation with the pedagogy consultant.

    The transcript opens with a greeting and grows by one user and one
    assistant message per exchange. Only one exchange runs at a time.
    """

    def __init__(self, state: LibraryState, config: LibraryConfig | None = None):
        self.state = state
        self.config = config or get_config()
        self._messages: list[ChatMessage] = [ChatMessage(role="assistant", content=GREETING)]
        self._pending = False

    @property
    def messages(self) -> list[ChatMessage]:
        return list(self._messages)

    @property
    def is_pending(self) -> bool:
        return self._pending

    async def send(self, context: Context, message: str) -> ChatMessage | None:
        """
        Send a teacher's question and wait for the consultant's reply.

        Returns:
            The assistant's reply, or None if the message was blank or
            another exchange is still pending
        """
        text = message.strip()
        if not text or self._pending:
            return None

        self._messages.append(ChatMessage(role="user", content=text))
        self._pending = True
        try:
            system_prompt = build_system_instruction(
                self.state.books, self.config.institution_name
            )
            try:
                reply = await request_completion(
                    context,
                    text,
                    system_prompt,
                    model_hint=self.config.assistant_model_hint,
                    max_tokens=self.config.assistant_max_tokens,
                    temperature=self.config.assistant_temperature,
                )
            except AssistantTransportError:
                logger.exception("Pedagogy assistant request failed")
                record_assistant_request("transport_error")
                content = NETWORK_ERROR_REPLY
            else:
                record_assistant_request("ok" if reply else "empty")
                content = reply or EMPTY_REPLY
        finally:
            self._pending = False

        answer = ChatMessage(role="assistant", content=content)
        self._messages.append(answer)
        return answer


class _AssistantStore:
    """Internal storage for the process-wide assistant."""

    _instance: PedagogyAssistant | None = None


def get_assistant() -> PedagogyAssistant:
    """Get or create the assistant bound to the process-wide state."""
    if _AssistantStore._instance is None:  # type: ignore[reportPrivateUsage]
        _AssistantStore._instance = PedagogyAssistant(get_library_state())  # type: ignore[reportPrivateUsage]
    return _AssistantStore._instance  # type: ignore[reportPrivateUsage]


def reset_assistant() -> None:
    """Drop the process-wide assistant and its transcript."""
    _AssistantStore._instance = None  # type: ignore[reportPrivateUsage]
