"""Row models for the hosted table store."""

from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from chatweave_core.fragments import FragmentType


class Chat(BaseModel):
    """A conversation thread owned by one user."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    user_id: str = Field(alias="userId")
    title: str
    visibility: Literal["private", "public"] = "private"
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC), alias="createdAt"
    )


class ContentRow(BaseModel):
    """One row of the per-message content side table."""

    model_config = ConfigDict(populate_by_name=True)

    message_id: str = Field(alias="messageId")
    type: FragmentType
    content: Any = None
    order: int = 0
