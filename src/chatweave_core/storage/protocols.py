from datetime import datetime
from typing import Protocol

from chatweave_core.messages import PersistedMessage
from chatweave_core.storage.records import Chat, ContentRow


class MessageStore(Protocol):
    """Protocol for chat persistence.

    Implementations wrap a table store with Chat, Message and MessageContent
    tables. Message rows are returned without fragments; content rows are
    fetched separately and decoded by the caller.
    """

    async def get_chat(self, chat_id: str) -> Chat | None:
        """Get a chat by ID."""
        ...

    async def save_chat(self, chat: Chat) -> None:
        """Insert a chat."""
        ...

    async def delete_chat(self, chat_id: str) -> None:
        """Delete a chat together with its messages and content rows."""
        ...

    async def save_messages(self, messages: list[PersistedMessage]) -> None:
        """Insert message rows."""
        ...

    async def save_message_content(self, message_id: str, rows: list[ContentRow]) -> None:
        """Insert the content rows of one message."""
        ...

    async def get_messages_by_chat_id(self, chat_id: str) -> list[PersistedMessage]:
        """Get message rows of a chat ordered by created_at ascending."""
        ...

    async def get_content_rows(self, message_ids: list[str]) -> list[ContentRow]:
        """Get content rows for the given messages, in any order."""
        ...

    async def delete_messages_after(self, chat_id: str, timestamp: datetime) -> int:
        """Delete messages created at or after timestamp. Returns the count."""
        ...
