"""
Prompts for the ELC Library server.

Prompts are reusable conversation templates the client can fill in and
hand to its LLM.
"""

from .pedagogy import pedagogy_consultation

all_prompts = [
    pedagogy_consultation,
]

__all__ = ["all_prompts", "pedagogy_consultation"]
