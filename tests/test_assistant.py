"""
Tests for the pedagogy assistant.

These tests verify that:
1. The inventory summary and role instruction reflect the current catalog
2. Sampling requests carry the instruction and model preferences
3. Failures become fixed chat replies and never escape
4. Blank or overlapping sends are ignored
"""

import asyncio
from unittest.mock import AsyncMock, Mock

import pytest
from mcp.types import TextContent

from elc_library.assistant import (
    EMPTY_REPLY,
    GREETING,
    NETWORK_ERROR_REPLY,
    QUICK_PROMPTS,
    AssistantTransportError,
    PedagogyAssistant,
    build_system_instruction,
    request_completion,
    summarize_inventory,
)


class TestInventorySummary:
    def test_counts_per_category(self, state):
        state.checkout("b2", "T-1", "A. Smith")

        summaries = summarize_inventory(state.books)

        assert [s.category for s in summaries] == ["Teacher Resource", "ESP"]
        esp = summaries[1]
        assert (esp.total, esp.available, esp.borrowed) == (2, 1, 1)
        assert esp.sample_titles == [
            "English for Medicine in Higher Education Studies",
            "Professional English in Use: Law",
        ]

    def test_sample_titles_are_capped(self, small_catalog):
        books = small_catalog * 4

        (teacher, esp) = summarize_inventory(books, sample_size=5)

        assert len(teacher.sample_titles) == 4
        assert len(esp.sample_titles) == 5

    def test_empty_catalog(self):
        assert summarize_inventory([]) == []


class TestSystemInstruction:
    def test_instruction_mentions_institution_and_inventory(self, small_catalog):
        instruction = build_system_instruction(small_catalog, "Pharos University Alexandria")

        assert "ELC Pedagogy Consultant at Pharos University Alexandria" in instruction
        assert "inventory of 3 academic titles" in instruction
        assert "ESP: 2 titles (2 available, 0 borrowed)." in instruction
        assert "Includes titles like English for Medicine" in instruction
        assert "Speakout, face2face, and Global" in instruction

    def test_instruction_carries_counts_after_checkout(self, state):
        state.checkout("b2", "T-1", "A. Smith")

        instruction = build_system_instruction(state.books, "PUA")

        assert "Teacher Resource: 1 titles (1 available, 0 borrowed)." in instruction
        assert "ESP: 2 titles (1 available, 1 borrowed)." in instruction


class TestRequestCompletion:
    @pytest.mark.asyncio
    async def test_returns_reply_text(self, mock_context):
        reply = await request_completion(
            mock_context, "Any IELTS books?", "You are a consultant", model_hint="test-model"
        )

        assert reply == "Try the Speakout Teacher's Books."
        kwargs = mock_context.sample.call_args.kwargs
        assert kwargs["messages"] == "Any IELTS books?"
        assert kwargs["system_prompt"] == "You are a consultant"
        assert kwargs["max_tokens"] == 800
        assert kwargs["model_preferences"].hints[0].name == "test-model"

    @pytest.mark.asyncio
    async def test_reply_without_text(self):
        context = Mock()
        context.sample = AsyncMock(return_value=TextContent(type="text", text=""))

        assert await request_completion(context, "hi", "sys", model_hint="m") is None

    @pytest.mark.asyncio
    async def test_transport_failure_raises(self, failing_context):
        with pytest.raises(AssistantTransportError, match="client went away"):
            await request_completion(failing_context, "hi", "sys", model_hint="m")


class TestPedagogyAssistant:
    def test_transcript_opens_with_greeting(self, state, test_config):
        assistant = PedagogyAssistant(state, test_config)

        assert [(m.role, m.content) for m in assistant.messages] == [("assistant", GREETING)]

    @pytest.mark.asyncio
    async def test_exchange_appends_both_messages(self, state, test_config, mock_context):
        assistant = PedagogyAssistant(state, test_config)

        reply = await assistant.send(mock_context, "  What medical English resources do we have? ")

        assert reply.content == "Try the Speakout Teacher's Books."
        assert [m.role for m in assistant.messages] == ["assistant", "user", "assistant"]
        assert assistant.messages[1].content == "What medical English resources do we have?"
        assert not assistant.is_pending

    @pytest.mark.asyncio
    async def test_instruction_tracks_current_catalog(self, state, test_config, mock_context):
        assistant = PedagogyAssistant(state, test_config)
        state.checkout("b1", "T-1", "A. Smith")

        await assistant.send(mock_context, "Hello")

        system_prompt = mock_context.sample.call_args.kwargs["system_prompt"]
        assert test_config.institution_name in system_prompt
        assert "inventory of 3 academic titles" in system_prompt
        assert "Teacher Resource: 1 titles (0 available, 1 borrowed)." in system_prompt

    @pytest.mark.asyncio
    async def test_assistant_never_changes_catalog(self, state, test_config, mock_context):
        books_before = state.books
        records_before = state.records

        await PedagogyAssistant(state, test_config).send(mock_context, "Check out b1 for me")

        assert state.books == books_before
        assert state.records == records_before

    @pytest.mark.asyncio
    async def test_transport_failure_reply(self, state, test_config, failing_context):
        assistant = PedagogyAssistant(state, test_config)

        reply = await assistant.send(failing_context, "Hello")

        assert reply.content == NETWORK_ERROR_REPLY
        assert not assistant.is_pending

    @pytest.mark.asyncio
    async def test_empty_reply(self, state, test_config):
        context = Mock()
        context.sample = AsyncMock(return_value=TextContent(type="text", text=""))

        reply = await PedagogyAssistant(state, test_config).send(context, "Hello")

        assert reply.content == EMPTY_REPLY

    @pytest.mark.asyncio
    async def test_blank_message_ignored(self, state, test_config, mock_context):
        assistant = PedagogyAssistant(state, test_config)

        assert await assistant.send(mock_context, "   ") is None
        assert len(assistant.messages) == 1
        mock_context.sample.assert_not_called()

    @pytest.mark.asyncio
    async def test_send_while_pending_ignored(self, state, test_config):
        release = asyncio.Event()

        async def slow_sample(**kwargs):
            await release.wait()
            return TextContent(type="text", text="Done")

        context = Mock()
        context.sample = AsyncMock(side_effect=slow_sample)
        assistant = PedagogyAssistant(state, test_config)

        first = asyncio.create_task(assistant.send(context, "First"))
        await asyncio.sleep(0)
        assert assistant.is_pending

        assert await assistant.send(context, "Second") is None

        release.set()
        assert (await first).content == "Done"
        assert [m.content for m in assistant.messages[1:]] == ["First", "Done"]


def test_quick_prompts():
    assert QUICK_PROMPTS["Medical ESP"] == "What medical English resources do we have?"
    assert QUICK_PROMPTS["Speakout Resources"] == "Show me Speakout Teacher's Books."
    assert QUICK_PROMPTS["Legal English"] == "Do we have books for legal English?"
