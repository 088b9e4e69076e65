"""Sanitize messages before persistence or resubmission.

A streamed turn can be interrupted mid tool call. Persisting a call that never
got a result would leave a permanently pending invocation in every later
read of the chat, so calls without results are dropped here.
"""

import logging

from chatweave_core.fragments import (
    ContentFragment,
    ReasoningFragment,
    TextFragment,
    ToolCallFragment,
    ToolResultFragment,
)
from chatweave_core.messages import ResponseMessage, UIMessage

logger = logging.getLogger(__name__)


def _result_ids(messages: list[ResponseMessage]) -> set[str]:
    ids: set[str] = set()
    for message in messages:
        if isinstance(message.content, str):
            continue
        for fragment in message.content:
            if isinstance(fragment, ToolResultFragment) and fragment.tool_call_id:
                ids.add(fragment.tool_call_id)
    return ids


def _keep(fragment: ContentFragment, result_ids: set[str]) -> bool:
    if isinstance(fragment, ToolCallFragment):
        return fragment.tool_call_id in result_ids
    if isinstance(fragment, TextFragment):
        return fragment.content != ""
    return True


def sanitize_response_messages(
    messages: list[ResponseMessage],
    reasoning: str | None = None,
) -> list[ResponseMessage]:
    """Filter one completed model turn before it is persisted.

    Args:
        messages: Messages produced by the turn, in order.
        reasoning: Reasoning text for the turn, appended as a fragment to each
            structured assistant message.

    Returns:
        New messages with dangling tool calls and empty text removed. Messages
        left without content are dropped.
    """
    result_ids = _result_ids(messages)
    sanitized: list[ResponseMessage] = []
    dropped_calls = 0

    for message in messages:
        content = message.content
        if message.role == "assistant" and not isinstance(content, str):
            kept = [fragment for fragment in content if _keep(fragment, result_ids)]
            dropped_calls += len(content) - len(kept) - sum(
                1 for fragment in content if isinstance(fragment, TextFragment) and fragment.content == ""
            )
            if reasoning:
                next_order = max((fragment.order for fragment in content), default=-1) + 1
                kept.append(ReasoningFragment(content=reasoning, order=next_order))
            content = kept

        if len(content) == 0:
            continue
        sanitized.append(message.model_copy(update={"content": content}))

    logger.debug(
        "sanitize_response_messages messages=%d kept=%d dropped_calls=%d",
        len(messages),
        len(sanitized),
        dropped_calls,
    )
    return sanitized


def sanitize_ui_messages(messages: list[UIMessage]) -> list[UIMessage]:
    """Strip unresolved tool invocations from UI messages.

    Used when a client resubmits a chat after an interrupted stream. Assistant
    messages keep only invocations in state ``result``; any message left with
    no text and no invocations is dropped.
    """
    sanitized: list[UIMessage] = []
    for message in messages:
        if message.role == "assistant" and message.tool_invocations:
            message = message.model_copy(
                update={
                    "tool_invocations": [
                        invocation
                        for invocation in message.tool_invocations
                        if invocation.state == "result"
                    ]
                }
            )
        if message.content or message.tool_invocations:
            sanitized.append(message)
    return sanitized


def get_most_recent_user_message(messages: list[UIMessage]) -> UIMessage | None:
    """Return the last user message, or None."""
    for message in reversed(messages):
        if message.role == "user":
            return message
    return None
