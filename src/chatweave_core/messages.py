"""Message representations for chatweave.

``PersistedMessage`` is what the store hands back, ``ResponseMessage`` is what a
completed model turn produces, and ``UIMessage`` is the derived, render-ready
view built fresh on every read. Field aliases match the camelCase wire shapes
used by the web client and the hosted table store.
"""

from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from chatweave_core.adapters.legacy import LegacyContentAdapter
from chatweave_core.fragments import ContentFragment

Role = Literal["user", "assistant", "system", "tool"]

# Message rows keep their content in the side table
PLACEHOLDER_CONTENT = "{}"

_adapter = LegacyContentAdapter()


class PersistedMessage(BaseModel):
    """A message row plus its ordered content fragments.

    Attributes:
        id: Opaque unique identifier.
        chat_id: Owning conversation.
        role: Sender role. ``tool`` messages carry results for earlier calls.
        content: Raw ``content`` column. Legacy rows keep their whole payload
            here; newer rows store a ``"{}"`` placeholder and use fragments.
        fragments: Normalized content, if already fragment-shaped.
        created_at: Orders messages within a chat, never fragments.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str
    chat_id: str = Field(alias="chatId")
    role: Role
    content: Any = None
    fragments: list[ContentFragment] = Field(default_factory=list)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC), alias="createdAt"
    )


class ResponseMessage(BaseModel):
    """A message produced by one streamed model turn, before persistence.

    List content is normalized on construction, so SDK-style parts
    (``tool-call``, ``tool-result``) arrive here as fragments. String content
    is kept as-is.
    """

    id: str
    role: Literal["assistant", "tool"]
    content: str | list[ContentFragment]

    @field_validator("content", mode="before")
    @classmethod
    def _normalize_parts(cls, value: Any) -> Any:
        if isinstance(value, list):
            return _adapter.convert_list(value)
        return value


class ToolInvocation(BaseModel):
    """A tool call tracked together with its eventual result."""

    model_config = ConfigDict(populate_by_name=True)

    tool_call_id: str | None = Field(default=None, alias="toolCallId")
    tool_name: str | None = Field(default=None, alias="toolName")
    args: Any = None
    state: Literal["call", "result"] = "call"
    result: Any = None


class UIMessage(BaseModel):
    """Render-ready message. Derived on read, never persisted."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    role: Literal["user", "assistant", "system"]
    content: str = ""
    reasoning: str | None = None
    tool_invocations: list[ToolInvocation] = Field(
        default_factory=list, alias="toolInvocations"
    )
