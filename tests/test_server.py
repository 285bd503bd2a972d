"""
Tests for server assembly.

Uses the FastMCP in-memory client to check what an MCP client would see.
"""

import json

import pytest
from fastmcp import Client

from elc_library.config import LibraryConfig
from elc_library.server import create_server


@pytest.fixture
def server(app_state, test_db_path):
    return create_server(LibraryConfig(database_path=test_db_path))


@pytest.mark.mcp_protocol
class TestServerRegistration:
    @pytest.mark.asyncio
    async def test_tools_registered(self, server):
        async with Client(server) as client:
            tools = await client.list_tools()

        assert {tool.name for tool in tools} == {
            "login",
            "logout",
            "checkout_book",
            "return_book",
            "ask_pedagogy_assistant",
        }

    @pytest.mark.asyncio
    async def test_assistant_tool_can_be_disabled(self, app_state, test_db_path):
        server = create_server(LibraryConfig(database_path=test_db_path, enable_assistant=False))

        async with Client(server) as client:
            tools = await client.list_tools()

        assert "ask_pedagogy_assistant" not in {tool.name for tool in tools}

    @pytest.mark.asyncio
    async def test_resources_registered(self, server):
        async with Client(server) as client:
            resources = await client.list_resources()
            templates = await client.list_resource_templates()

        assert {str(r.uri) for r in resources} == {
            "library://books/list",
            "library://books/categories",
            "library://loans/active",
            "library://loans/history",
            "library://loans/stats",
            "library://session/current",
            "library://assistant/transcript",
            "library://assistant/inventory-summary",
        }
        assert {t.uriTemplate for t in templates} == {
            "library://books/{book_id}",
            "library://books/search/{term}",
        }

    @pytest.mark.asyncio
    async def test_prompt_registered(self, server):
        async with Client(server) as client:
            prompts = await client.list_prompts()

        assert [prompt.name for prompt in prompts] == ["pedagogy_consultation"]

    @pytest.mark.asyncio
    async def test_session_resource_read(self, server):
        async with Client(server) as client:
            contents = await client.read_resource("library://session/current")

        assert json.loads(contents[0].text)["authenticated"] is False
