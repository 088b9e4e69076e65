"""Assemble persisted messages into UI messages.

Messages are processed in chronological order. Tool-role messages never become
UI messages of their own: their results are folded into the assistant message
that issued the matching call. Pending calls are tracked in a dict keyed by
call id, so pairing a result is a single lookup however long the chat is.
"""

import logging
from typing import Literal

from chatweave_core.adapters.legacy import parse_json
from chatweave_core.fragments import (
    ContentFragment,
    ReasoningFragment,
    TextFragment,
    ToolCallFragment,
    ToolResultFragment,
    sort_fragments,
)
from chatweave_core.messages import (
    PLACEHOLDER_CONTENT,
    PersistedMessage,
    ToolInvocation,
    UIMessage,
)
from chatweave_core.normalizer import normalize

logger = logging.getLogger(__name__)

ReasoningPolicy = Literal["last", "concat"]


def message_fragments(message: PersistedMessage) -> list[ContentFragment]:
    """Fragments of a message in order, normalizing legacy content if needed.

    Legacy string content is the message text unless it encodes a part array.
    """
    if message.fragments:
        return sort_fragments(message.fragments)
    if isinstance(message.content, str):
        if message.content == PLACEHOLDER_CONTENT:
            return []
        ok, parsed = parse_json(message.content)
        if not (ok and isinstance(parsed, list)):
            return [TextFragment(content=message.content, order=0)]
    return normalize(message.content)


def assemble(
    messages: list[PersistedMessage],
    reasoning_policy: ReasoningPolicy = "last",
    warn_on_orphan_results: bool = True,
) -> list[UIMessage]:
    """Convert persisted messages into UI messages.

    Args:
        messages: Messages of one chat in chronological order.
        reasoning_policy: ``last`` keeps the latest reasoning fragment of a
            message, ``concat`` joins them in order.
        warn_on_orphan_results: Log a warning for tool results that match no
            pending call. They are dropped either way.

    Returns:
        One UIMessage per non-tool message, in input order.
    """
    ui_messages: list[UIMessage] = []
    pending: dict[str, ToolInvocation] = {}

    for message in messages:
        if message.role == "tool":
            _apply_tool_message(message, pending, warn_on_orphan_results)
            continue
        ui_messages.append(_build_ui_message(message, reasoning_policy, pending))

    logger.debug(
        "assemble messages=%d ui_messages=%d pending_calls=%d",
        len(messages),
        len(ui_messages),
        len(pending),
    )
    return ui_messages


def _apply_tool_message(
    message: PersistedMessage,
    pending: dict[str, ToolInvocation],
    warn_on_orphan_results: bool,
) -> None:
    for fragment in message_fragments(message):
        if not isinstance(fragment, ToolResultFragment):
            continue
        invocation = pending.pop(fragment.tool_call_id, None) if fragment.tool_call_id else None
        if invocation is None:
            if warn_on_orphan_results:
                logger.warning(
                    "dropping tool result with no pending call message_id=%s tool_call_id=%s",
                    message.id,
                    fragment.tool_call_id,
                )
            continue
        invocation.state = "result"
        invocation.result = fragment.content.result


def _build_ui_message(
    message: PersistedMessage,
    reasoning_policy: ReasoningPolicy,
    pending: dict[str, ToolInvocation],
) -> UIMessage:
    text_parts: list[str] = []
    reasoning_parts: list[str] = []
    invocations: list[ToolInvocation] = []
    local: dict[str, ToolInvocation] = {}

    for fragment in message_fragments(message):
        if isinstance(fragment, TextFragment):
            # Unrecognized legacy payloads render as empty text
            if isinstance(fragment.content, str):
                text_parts.append(fragment.content)

        elif isinstance(fragment, ReasoningFragment):
            reasoning_parts.append(fragment.content)

        elif isinstance(fragment, ToolCallFragment):
            invocation = ToolInvocation(
                tool_call_id=fragment.content.tool_call_id,
                tool_name=fragment.content.tool_name,
                args=fragment.content.args,
                state="call",
            )
            invocations.append(invocation)
            if invocation.tool_call_id is not None:
                local[invocation.tool_call_id] = invocation

        elif isinstance(fragment, ToolResultFragment):
            existing = local.get(fragment.tool_call_id) if fragment.tool_call_id else None
            if existing is not None:
                existing.state = "result"
                existing.result = fragment.content.result
            else:
                invocations.append(
                    ToolInvocation(
                        tool_call_id=fragment.content.tool_call_id,
                        tool_name=fragment.content.tool_name,
                        state="result",
                        result=fragment.content.result,
                    )
                )

    reasoning = None
    if reasoning_parts:
        reasoning = reasoning_parts[-1] if reasoning_policy == "last" else "".join(reasoning_parts)

    ui_message = UIMessage(
        id=message.id,
        role=message.role,
        content="".join(text_parts),
        reasoning=reasoning,
        tool_invocations=invocations,
    )
    for invocation in ui_message.tool_invocations:
        if invocation.state == "call" and invocation.tool_call_id is not None:
            pending[invocation.tool_call_id] = invocation
    return ui_message
