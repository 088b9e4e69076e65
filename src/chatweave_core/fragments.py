"""Normalized message content fragments.

A message is stored as an ordered list of fragments. Each fragment carries a
``type`` tag, a ``content`` payload and an ``order`` index that defines
reconstruction sequence within its message. Orders are unique per message but
need not be contiguous.
"""

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field

FragmentType = Literal["text", "tool_call", "tool_result", "reasoning"]


class ToolCallContent(BaseModel):
    """Payload of a tool_call fragment."""

    model_config = ConfigDict(populate_by_name=True)

    tool_call_id: str | None = Field(default=None, alias="toolCallId")
    tool_name: str | None = Field(default=None, alias="toolName")
    args: Any = None


class ToolResultContent(BaseModel):
    """Payload of a tool_result fragment."""

    model_config = ConfigDict(populate_by_name=True)

    tool_call_id: str | None = Field(default=None, alias="toolCallId")
    tool_name: str | None = Field(default=None, alias="toolName")
    result: Any = None


class FragmentBase(BaseModel):
    """Properties shared by all fragments."""

    order: int = Field(default=0, ge=0)


class TextFragment(FragmentBase):
    """Plain text. Legacy rows may carry a non-string payload here."""

    type: Literal["text"] = "text"
    content: Any = ""


class ReasoningFragment(FragmentBase):
    """Model reasoning attached to an assistant message."""

    type: Literal["reasoning"] = "reasoning"
    content: str = ""


class ToolCallFragment(FragmentBase):
    """A tool invocation issued by the model."""

    type: Literal["tool_call"] = "tool_call"
    content: ToolCallContent

    @property
    def tool_call_id(self) -> str | None:
        return self.content.tool_call_id


class ToolResultFragment(FragmentBase):
    """The result returned for a tool invocation."""

    type: Literal["tool_result"] = "tool_result"
    content: ToolResultContent

    @property
    def tool_call_id(self) -> str | None:
        return self.content.tool_call_id


ContentFragment = Annotated[
    TextFragment | ToolCallFragment | ToolResultFragment | ReasoningFragment,
    Field(discriminator="type"),
]


def sort_fragments(fragments: list[ContentFragment]) -> list[ContentFragment]:
    """Return fragments sorted by their order index (stable for ties)."""
    return sorted(fragments, key=lambda fragment: fragment.order)
