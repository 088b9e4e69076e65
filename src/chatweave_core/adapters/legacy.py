"""Legacy content adapter.

Stored and incoming message content has taken several shapes over time:

- a plain string, or a JSON-encoded string of either of the shapes below
- an array of parts whose ``type`` is spelled ``tool-call``/``tool-result``
  (SDK style) or ``tool_call``/``tool_result`` (storage style)
- tool parts with ``toolCallId``/``toolName``/``args``/``result`` either on the
  part itself or nested under a ``content`` object
- a single object

This module is the only place that knows about those shapes. Everything it
returns is a clean ``ContentFragment``.
"""

import json
import logging
from typing import Any

from pydantic import BaseModel, ValidationError

from chatweave_core.fragments import (
    ContentFragment,
    FragmentType,
    ReasoningFragment,
    TextFragment,
    ToolCallContent,
    ToolCallFragment,
    ToolResultContent,
    ToolResultFragment,
)

logger = logging.getLogger(__name__)

_TYPE_ALIASES: dict[str, FragmentType] = {
    "text": "text",
    "reasoning": "reasoning",
    "tool_call": "tool_call",
    "tool-call": "tool_call",
    "tool_result": "tool_result",
    "tool-result": "tool_result",
}


def normalize_type(value: Any) -> FragmentType:
    """Map a declared part type onto a fragment type.

    Missing or unrecognized types are treated as text.
    """
    if isinstance(value, str):
        return _TYPE_ALIASES.get(value, "text")
    return "text"


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Non-standard JSON constant: {name}")


def parse_json(raw: str) -> tuple[bool, Any]:
    """Strictly parse a JSON string.

    Returns:
        Tuple of (ok, value). ``ok`` is False when the string is not valid JSON.
    """
    try:
        return True, json.loads(raw, parse_constant=_reject_constant)
    except (ValueError, RecursionError):
        return False, None


def _pick(element: dict[str, Any], nested: Any, key: str) -> Any:
    """Read a field from the part itself, falling back to its nested content."""
    if element.get(key) is not None:
        return element[key]
    if isinstance(nested, dict):
        return nested.get(key)
    return None


def _first_present(element: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if element.get(key) is not None:
            return element[key]
    return element


class LegacyContentAdapter:
    """Converts raw message content of any historical shape into fragments.

    Usage:
        ```python
        adapter = LegacyContentAdapter()
        adapter.convert('[{"type": "tool-call", "toolCallId": "a", "toolName": "x"}]')
        ```

    Conversion never raises. Shapes that cannot be understood degrade to a
    single text fragment holding the original value.
    """

    def convert(self, raw: Any) -> list[ContentFragment]:
        """Convert raw content into an ordered list of fragments."""
        if isinstance(raw, str):
            ok, parsed = parse_json(raw)
            if not ok:
                return [TextFragment(content=raw, order=0)]
            if isinstance(parsed, list):
                return self.convert_list(parsed)
            return [TextFragment(content=parsed, order=0)]

        if isinstance(raw, list | tuple):
            return self.convert_list(list(raw))

        return [TextFragment(content=raw, order=0)]

    def convert_list(self, elements: list[Any]) -> list[ContentFragment]:
        """Convert an array of parts. Each part's order is its array index."""
        return [
            self.convert_element(element, order)
            for order, element in enumerate(elements)
        ]

    def convert_element(self, element: Any, order: int) -> ContentFragment:
        """Convert one part into a fragment with the given order."""
        if isinstance(element, BaseModel):
            element = element.model_dump(by_alias=True)

        if not isinstance(element, dict):
            return TextFragment(content=element, order=order)

        fragment_type = normalize_type(element.get("type"))
        nested = element.get("content")

        try:
            if fragment_type == "tool_call":
                return ToolCallFragment(
                    order=order,
                    content=ToolCallContent(
                        tool_call_id=_pick(element, nested, "toolCallId"),
                        tool_name=_pick(element, nested, "toolName"),
                        args=_pick(element, nested, "args"),
                    ),
                )

            if fragment_type == "tool_result":
                return ToolResultFragment(
                    order=order,
                    content=ToolResultContent(
                        tool_call_id=_pick(element, nested, "toolCallId"),
                        tool_name=_pick(element, nested, "toolName"),
                        result=_pick(element, nested, "result"),
                    ),
                )

            if fragment_type == "reasoning":
                reasoning = _pick(element, nested, "reasoning")
                if reasoning is None:
                    reasoning = _first_present(element, "text", "content")
                return ReasoningFragment(order=order, content=reasoning)
        except ValidationError:
            logger.debug("degrading malformed %s part at order=%d", fragment_type, order)
            return TextFragment(content=element, order=order)

        return TextFragment(content=_first_present(element, "text", "content"), order=order)
