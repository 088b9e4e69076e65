"""Tests for UI message assembly."""

import logging

import pytest

from chatweave_core.assembler import assemble
from chatweave_core.fragments import (
    ReasoningFragment,
    TextFragment,
    ToolCallContent,
    ToolCallFragment,
    ToolResultContent,
    ToolResultFragment,
)

from .conftest import make_message


def call(call_id: str, order: int = 0, name: str = "calc") -> ToolCallFragment:
    return ToolCallFragment(
        content=ToolCallContent(tool_call_id=call_id, tool_name=name, args={"x": 1}),
        order=order,
    )


def result(call_id: str, value: object, order: int = 0, name: str = "calc") -> ToolResultFragment:
    return ToolResultFragment(
        content=ToolResultContent(tool_call_id=call_id, tool_name=name, result=value),
        order=order,
    )


class TestAssembleBasics:
    """Test plain message assembly."""

    def test_plain_user_message(self) -> None:
        """A plain-text user message becomes one UI message."""
        ui = assemble([make_message("u1", "user", content="hi")])

        assert len(ui) == 1
        assert ui[0].id == "u1"
        assert ui[0].role == "user"
        assert ui[0].content == "hi"
        assert ui[0].tool_invocations == []
        assert ui[0].reasoning is None

    def test_text_concatenation_follows_order(self) -> None:
        """Text fragments are joined by order, not list position."""
        message = make_message(
            "a1",
            "assistant",
            fragments=[TextFragment(content="world", order=5), TextFragment(content="hello ", order=1)],
        )

        assert assemble([message])[0].content == "hello world"

    def test_fragments_preferred_over_content(self) -> None:
        """Stored fragments win over the placeholder content column."""
        message = make_message(
            "a1", "assistant", content="{}", fragments=[TextFragment(content="real", order=0)]
        )

        assert assemble([message])[0].content == "real"

    def test_placeholder_without_fragments_is_empty(self) -> None:
        """A '{}' placeholder with no fragments renders as empty text."""
        assert assemble([make_message("a1", "assistant", content="{}")])[0].content == ""

    def test_legacy_json_content_is_normalized(self) -> None:
        """Legacy JSON array content is normalized on read."""
        message = make_message(
            "a1",
            "assistant",
            content='[{"type": "text", "text": "Sure. "}, {"type": "tool-call", "toolCallId": "t", "toolName": "calc", "args": {}}]',
        )
        ui = assemble([message])[0]

        assert ui.content == "Sure. "
        assert ui.tool_invocations[0].tool_call_id == "t"
        assert ui.tool_invocations[0].state == "call"

    @pytest.mark.parametrize("raw", ["42", "true", "3.5", "null", '{"a": 1}'])
    def test_legacy_string_content_is_verbatim(self, raw: str) -> None:
        """Legacy string content that is not a part array is the text itself."""
        ui = assemble([make_message("u1", "user", content=raw)])

        assert ui[0].content == raw

    def test_unrecognized_text_payload_is_empty(self) -> None:
        """Non-string text payloads contribute no text."""
        message = make_message(
            "a1",
            "assistant",
            fragments=[TextFragment(content={"weird": True}, order=0), TextFragment(content="ok", order=1)],
        )

        assert assemble([message])[0].content == "ok"

    def test_preserves_message_order(self) -> None:
        """Output order matches input order."""
        messages = [
            make_message("u1", "user", content="q1"),
            make_message("a1", "assistant", content="r1", offset=1),
            make_message("s1", "system", content="note", offset=2),
        ]

        assert [m.id for m in assemble(messages)] == ["u1", "a1", "s1"]


class TestReasoning:
    """Test reasoning merge."""

    def test_last_reasoning_wins(self) -> None:
        """By default the latest reasoning fragment is kept."""
        message = make_message(
            "a1",
            "assistant",
            fragments=[ReasoningFragment(content="first", order=0), ReasoningFragment(content="second", order=1)],
        )

        assert assemble([message])[0].reasoning == "second"

    def test_concat_policy(self) -> None:
        """The concat policy joins reasoning fragments in order."""
        message = make_message(
            "a1",
            "assistant",
            fragments=[ReasoningFragment(content="a", order=0), ReasoningFragment(content="b", order=1)],
        )

        assert assemble([message], reasoning_policy="concat")[0].reasoning == "ab"


class TestToolPairing:
    """Test tool call / result reconciliation."""

    def test_tool_message_resolves_prior_call(self) -> None:
        """A tool-role result updates the assistant invocation."""
        messages = [
            make_message("a1", "assistant", fragments=[call("a")]),
            make_message("t1", "tool", fragments=[result("a", "42")], offset=1),
        ]
        ui = assemble(messages)

        assert len(ui) == 1
        assert len(ui[0].tool_invocations) == 1
        invocation = ui[0].tool_invocations[0]
        assert invocation.state == "result"
        assert invocation.result == "42"
        assert invocation.args == {"x": 1}

    def test_tool_message_resolves_earlier_assistant(self) -> None:
        """Results can resolve calls from any earlier message."""
        messages = [
            make_message("a1", "assistant", fragments=[call("a")]),
            make_message("a2", "assistant", fragments=[TextFragment(content="waiting")], offset=1),
            make_message("t1", "tool", content=[{"type": "tool-result", "toolCallId": "a", "result": 7}], offset=2),
        ]
        ui = assemble(messages)

        assert ui[0].tool_invocations[0].state == "result"
        assert ui[0].tool_invocations[0].result == 7
        assert ui[1].content == "waiting"

    def test_orphan_tool_result_is_dropped(self, caplog: pytest.LogCaptureFixture) -> None:
        """An unmatched tool result creates nothing and is logged."""
        messages = [
            make_message("u1", "user", content="hi"),
            make_message("t1", "tool", fragments=[result("missing", "x")], offset=1),
        ]
        with caplog.at_level(logging.WARNING, logger="chatweave_core.assembler"):
            ui = assemble(messages)

        assert [m.id for m in ui] == ["u1"]
        assert ui[0].tool_invocations == []
        assert "missing" in caplog.text

    def test_orphan_warning_can_be_disabled(self, caplog: pytest.LogCaptureFixture) -> None:
        """No warning is logged when orphan warnings are off."""
        messages = [make_message("t1", "tool", fragments=[result("missing", "x")])]
        with caplog.at_level(logging.WARNING, logger="chatweave_core.assembler"):
            assert assemble(messages, warn_on_orphan_results=False) == []

        assert caplog.records == []

    def test_in_message_result_updates_local_call(self) -> None:
        """A result in the same message resolves the local call."""
        message = make_message("a1", "assistant", fragments=[call("a", 0), result("a", "done", 1)])
        invocations = assemble([message])[0].tool_invocations

        assert len(invocations) == 1
        assert invocations[0].state == "result"
        assert invocations[0].result == "done"

    def test_in_message_result_without_call(self) -> None:
        """A result with no local call becomes a resolved invocation."""
        message = make_message("a1", "assistant", fragments=[result("b", "done")])
        invocations = assemble([message])[0].tool_invocations

        assert len(invocations) == 1
        assert invocations[0].tool_call_id == "b"
        assert invocations[0].state == "result"

    def test_unresolved_call_stays_pending(self) -> None:
        """A call without any result stays in state call."""
        ui = assemble([make_message("a1", "assistant", fragments=[call("a")])])

        assert ui[0].tool_invocations[0].state == "call"
        assert ui[0].tool_invocations[0].result is None

    def test_resolved_call_is_not_resolved_twice(self) -> None:
        """A second result for the same call is treated as an orphan."""
        messages = [
            make_message("a1", "assistant", fragments=[call("a")]),
            make_message("t1", "tool", fragments=[result("a", "first")], offset=1),
            make_message("t2", "tool", fragments=[result("a", "second")], offset=2),
        ]

        assert assemble(messages)[0].tool_invocations[0].result == "first"

    def test_input_is_not_mutated(self) -> None:
        """Assembling twice gives the same output."""
        messages = [
            make_message("a1", "assistant", fragments=[call("a")]),
            make_message("t1", "tool", fragments=[result("a", "42")], offset=1),
        ]

        assert assemble(messages) == assemble(messages)
