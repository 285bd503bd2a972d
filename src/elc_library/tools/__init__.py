"""
MCP Tools for the ELC Library server.

Tools are the actions with side effects: starting a session, lending and
returning books, and consulting the pedagogy assistant. Each tool is a
dictionary with its name, description and async handler.
"""

from .assistant import ask_pedagogy_assistant
from .circulation import checkout_book, return_book
from .session import login, logout

all_tools = [
    login,
    logout,
    checkout_book,
    return_book,
    ask_pedagogy_assistant,
]

__all__ = [
    "all_tools",
    "ask_pedagogy_assistant",
    "checkout_book",
    "login",
    "logout",
    "return_book",
]
