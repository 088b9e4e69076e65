"""LangChain message adapter.

Converts LangChain response messages (AIMessage, ToolMessage) into chatweave
``ResponseMessage`` objects so a completed turn can be sanitized and persisted.
"""

import logging
from typing import TYPE_CHECKING, Any
from uuid import uuid4

from chatweave_core.messages import ResponseMessage

if TYPE_CHECKING:
    from langchain_core.messages import BaseMessage

logger = logging.getLogger(__name__)


class LangChainAdapter:
    """Converts LangChain messages to ``ResponseMessage``.

    Request-side messages (HumanMessage, SystemMessage) are not part of a
    model response and are skipped.

    Usage:
        ```python
        from langchain_core.messages import AIMessage, ToolMessage
        from chatweave_core.adapters.langchain import LangChainAdapter

        adapter = LangChainAdapter()
        messages = adapter.convert([
            AIMessage(content="", tool_calls=[...]),
            ToolMessage(content="42", tool_call_id="call_1"),
        ])
        ```
    """

    def convert(self, messages: list["BaseMessage"]) -> list[ResponseMessage]:
        """Convert a list of LangChain messages.

        Args:
            messages: List of LangChain BaseMessage objects.

        Returns:
            ResponseMessages for the assistant and tool messages, in order.
        """
        converted = []
        for message in messages:
            response = self.convert_single(message)
            if response is not None:
                converted.append(response)
        return converted

    def convert_single(self, message: "BaseMessage") -> ResponseMessage | None:
        """Convert a single LangChain message.

        Args:
            message: A LangChain BaseMessage object.

        Returns:
            A ResponseMessage, or None for request-side message types.
        """
        from langchain_core.messages import AIMessage, ToolMessage

        message_id = message.id or str(uuid4())

        if isinstance(message, AIMessage):
            parts = self._content_parts(message.content)
            reasoning = message.additional_kwargs.get("reasoning_content")
            if reasoning:
                parts.insert(0, {"type": "reasoning", "reasoning": reasoning})
            for tc in message.tool_calls or []:
                parts.append(
                    {
                        "type": "tool-call",
                        "toolCallId": tc.get("id"),
                        "toolName": tc.get("name"),
                        "args": tc.get("args", {}),
                    }
                )
            return ResponseMessage(id=message_id, role="assistant", content=parts)

        if isinstance(message, ToolMessage):
            return ResponseMessage(
                id=message_id,
                role="tool",
                content=[
                    {
                        "type": "tool-result",
                        "toolCallId": message.tool_call_id,
                        "toolName": message.name,
                        "result": message.content,
                    }
                ],
            )

        logger.debug("skipping request-side message type=%s", message.type)
        return None

    def _content_parts(self, content: str | list[Any]) -> list[dict[str, Any]]:
        """Turn LangChain content (string or block list) into raw parts.

        Args:
            content: Message content as LangChain stores it.

        Returns:
            Raw parts for the legacy adapter. Empty string content yields no
            parts. Empty text blocks inside a block list are kept, and the
            sanitizer drops them.
        """
        if isinstance(content, str):
            return [{"type": "text", "text": content}] if content else []

        parts: list[dict[str, Any]] = []
        for block in content:
            if isinstance(block, str):
                parts.append({"type": "text", "text": block})
            elif isinstance(block, dict) and block.get("type") == "text":
                parts.append({"type": "text", "text": block.get("text", "")})
            elif isinstance(block, dict) and block.get("type") in ("thinking", "reasoning"):
                text = block.get("thinking") or block.get("reasoning") or ""
                parts.append({"type": "reasoning", "reasoning": text})
        return parts
