"""Pedagogy Consultation Prompt

Starts a conversation with the LLM in the role of the ELC pedagogy
consultant, grounded in the current collection.

Usage: prompt.get("pedagogy_consultation", {"topic": "teaching IELTS writing"})
"""

from ..assistant import build_system_instruction
from ..config import get_config
from ..state import get_library_state


async def pedagogy_consultation(topic: str | None = None) -> str:
    """Consult the ELC pedagogy specialist about resources for a teaching need.

    Embeds the role instruction and inventory summary so the LLM answers
    from what the collection actually holds.
    """
    instruction = build_system_instruction(
        get_library_state().books, get_config().institution_name
    )

    if topic:
        request = f"A colleague is asking for help with: {topic}"
    else:
        request = "A colleague would like general advice on resources for their classes."

    return f"""{instruction}

{request}

Please recommend titles from the collection, say which are available now,
and explain how each one would support the lesson or course."""
