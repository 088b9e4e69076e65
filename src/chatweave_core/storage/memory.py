"""In-process message store.

Keeps chats, messages and content rows in dicts. Useful for tests and for
running the history service without a hosted backend.
"""

import logging
from datetime import datetime

from chatweave_core.messages import PersistedMessage
from chatweave_core.storage.records import Chat, ContentRow

logger = logging.getLogger(__name__)


class InMemoryMessageStore:
    """MessageStore implementation backed by dicts."""

    def __init__(self) -> None:
        self._chats: dict[str, Chat] = {}
        self._messages: dict[str, PersistedMessage] = {}
        self._rows: dict[str, list[ContentRow]] = {}

    async def get_chat(self, chat_id: str) -> Chat | None:
        return self._chats.get(chat_id)

    async def save_chat(self, chat: Chat) -> None:
        self._chats[chat.id] = chat

    async def delete_chat(self, chat_id: str) -> None:
        self._chats.pop(chat_id, None)
        for message in [m for m in self._messages.values() if m.chat_id == chat_id]:
            self._drop_message(message.id)

    async def save_messages(self, messages: list[PersistedMessage]) -> None:
        for message in messages:
            if message.id in self._messages:
                raise RuntimeError(f"Duplicate message id: {message.id}")
            self._messages[message.id] = message.model_copy(update={"fragments": []})

    async def save_message_content(self, message_id: str, rows: list[ContentRow]) -> None:
        self._rows.setdefault(message_id, []).extend(rows)

    async def get_messages_by_chat_id(self, chat_id: str) -> list[PersistedMessage]:
        messages = [m for m in self._messages.values() if m.chat_id == chat_id]
        return sorted(messages, key=lambda m: m.created_at)

    async def get_content_rows(self, message_ids: list[str]) -> list[ContentRow]:
        return [row for message_id in message_ids for row in self._rows.get(message_id, [])]

    async def delete_messages_after(self, chat_id: str, timestamp: datetime) -> int:
        doomed = [
            m.id
            for m in self._messages.values()
            if m.chat_id == chat_id and m.created_at >= timestamp
        ]
        for message_id in doomed:
            self._drop_message(message_id)
        logger.debug("delete_messages_after chat_id=%s deleted=%d", chat_id, len(doomed))
        return len(doomed)

    def _drop_message(self, message_id: str) -> None:
        self._messages.pop(message_id, None)
        self._rows.pop(message_id, None)
