"""Incremental reconciliation of a streamed assistant message.

A ``MessageStream`` folds stream events, one at a time and in arrival order,
into an in-flight UI message:

    empty --(content event)--> streaming --(finish)--> finalized

Events after ``finish`` are ignored. The stream has no timer: if the transport
aborts before ``finish`` the message stays ``streaming`` and the consumer
decides whether to discard it or keep it as partial.

Not safe for concurrent use. Callers must serialize delivery per message.
"""

import logging
from collections.abc import Iterable
from enum import Enum
from typing import Any

from pydantic import BaseModel

from chatweave_core.adapters.legacy import LegacyContentAdapter
from chatweave_core.fragments import ToolCallFragment, ToolResultFragment
from chatweave_core.messages import ToolInvocation, UIMessage

logger = logging.getLogger(__name__)

_adapter = LegacyContentAdapter()

_EVENT_ALIASES = {
    "text-delta": "text-delta",
    "text_delta": "text-delta",
    "tool-call": "tool-call",
    "tool_call": "tool-call",
    "tool-result": "tool-result",
    "tool_result": "tool-result",
    "reasoning": "reasoning",
    "finish": "finish",
}


class StreamState(str, Enum):
    """Lifecycle of an in-flight message."""

    EMPTY = "empty"
    STREAMING = "streaming"
    FINALIZED = "finalized"


class StreamEvent(BaseModel):
    """One event from the streaming transport."""

    type: str
    content: Any = None


class MessageStream:
    """Builds one assistant UIMessage from stream events.

    Example:
        ```python
        stream = MessageStream("msg-1")
        stream.feed([
            StreamEvent(type="text-delta", content="He"),
            StreamEvent(type="text-delta", content="llo"),
            StreamEvent(type="finish"),
        ])
        stream.message.content  # "Hello"
        ```
    """

    def __init__(self, message_id: str) -> None:
        """Initialize an empty stream.

        Args:
            message_id: ID of the UI message being built.
        """
        self._message_id = message_id
        self._state = StreamState.EMPTY
        self._text: list[str] = []
        self._reasoning: list[str] = []
        self._invocations: list[ToolInvocation] = []
        self._by_call_id: dict[str, ToolInvocation] = {}

    @property
    def state(self) -> StreamState:
        return self._state

    @property
    def finalized(self) -> bool:
        return self._state is StreamState.FINALIZED

    @property
    def message(self) -> UIMessage:
        """Snapshot of the message built so far."""
        return UIMessage(
            id=self._message_id,
            role="assistant",
            content="".join(self._text),
            reasoning="".join(self._reasoning) if self._reasoning else None,
            tool_invocations=[invocation.model_copy(deep=True) for invocation in self._invocations],
        )

    def feed(self, events: Iterable[StreamEvent | dict[str, Any]]) -> UIMessage:
        """Apply events in order and return the resulting snapshot."""
        for event in events:
            self.apply(event)
        return self.message

    def apply(self, event: StreamEvent | dict[str, Any]) -> bool:
        """Apply a single event.

        Args:
            event: A StreamEvent or its dict form.

        Returns:
            True if the event changed the message or its state.
        """
        if isinstance(event, dict):
            event = StreamEvent(type=str(event.get("type", "")), content=event.get("content"))

        if self._state is StreamState.FINALIZED:
            logger.debug("ignoring %s event after finish message_id=%s", event.type, self._message_id)
            return False

        kind = _EVENT_ALIASES.get(event.type)
        if kind == "finish":
            self._state = StreamState.FINALIZED
            return True

        if kind == "text-delta":
            applied = self._append(self._text, event.content)
        elif kind == "reasoning":
            applied = self._append(self._reasoning, event.content)
        elif kind == "tool-call":
            applied = self._on_tool_call(event.content)
        elif kind == "tool-result":
            applied = self._on_tool_result(event.content)
        else:
            # Data parts such as suggestions do not belong to the message
            logger.debug("skipping event type=%s message_id=%s", event.type, self._message_id)
            return False

        if applied and self._state is StreamState.EMPTY:
            self._state = StreamState.STREAMING
        return applied

    def _append(self, buffer: list[str], payload: Any) -> bool:
        if not isinstance(payload, str):
            logger.debug("skipping non-text delta message_id=%s", self._message_id)
            return False
        buffer.append(payload)
        return True

    def _on_tool_call(self, payload: Any) -> bool:
        if not isinstance(payload, dict):
            return False
        fragment = _adapter.convert_element({**payload, "type": "tool_call"}, 0)
        if not isinstance(fragment, ToolCallFragment):
            return False

        call_id = fragment.tool_call_id
        if call_id is not None and call_id in self._by_call_id:
            logger.debug("duplicate tool call tool_call_id=%s", call_id)
            return False

        invocation = ToolInvocation(
            tool_call_id=call_id,
            tool_name=fragment.content.tool_name,
            args=fragment.content.args,
            state="call",
        )
        self._invocations.append(invocation)
        if call_id is not None:
            self._by_call_id[call_id] = invocation
        return True

    def _on_tool_result(self, payload: Any) -> bool:
        if not isinstance(payload, dict):
            return False
        fragment = _adapter.convert_element({**payload, "type": "tool_result"}, 0)
        if not isinstance(fragment, ToolResultFragment):
            return False

        call_id = fragment.tool_call_id
        invocation = self._by_call_id.get(call_id) if call_id is not None else None
        if invocation is None:
            # Result without an observed call, e.g. partial delivery
            invocation = ToolInvocation(
                tool_call_id=call_id,
                tool_name=fragment.content.tool_name,
            )
            self._invocations.append(invocation)
            if call_id is not None:
                self._by_call_id[call_id] = invocation

        invocation.state = "result"
        invocation.result = fragment.content.result
        return True
