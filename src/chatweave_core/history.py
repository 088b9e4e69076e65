"""Chat history service.

Wires a ``MessageStore`` to the content pipeline for the flows a chat server
needs: persisting the user's message, persisting a completed model turn, and
reading a chat back as UI messages.

Usage:
    ```python
    from chatweave_core import ChatHistory
    from chatweave_core.storage import InMemoryMessageStore

    history = ChatHistory(InMemoryMessageStore())
    await history.record_user_message("chat-1", client_messages, user_id="u-1")
    await history.record_turn("chat-1", response_messages, reasoning=reasoning)
    ui_messages = await history.load_ui_messages("chat-1")
    ```

The authenticated user is always passed in by the caller. Nothing here reads
session state.
"""

import logging
from collections import defaultdict
from datetime import UTC, datetime, timedelta

from chatweave_core.assembler import assemble
from chatweave_core.config import ChatWeaveConfig
from chatweave_core.fragments import TextFragment
from chatweave_core.messages import (
    PLACEHOLDER_CONTENT,
    PersistedMessage,
    ResponseMessage,
    UIMessage,
)
from chatweave_core.sanitizer import get_most_recent_user_message, sanitize_response_messages
from chatweave_core.storage.codec import fragments_from_rows, rows_from_fragments
from chatweave_core.storage.protocols import MessageStore
from chatweave_core.storage.records import Chat, ContentRow

logger = logging.getLogger(__name__)

TITLE_MAX_LENGTH = 80


class ChatHistory:
    """Reads and writes chat messages through a MessageStore."""

    def __init__(self, store: MessageStore, config: ChatWeaveConfig | None = None) -> None:
        """Initialize the service.

        Args:
            store: Persistence backend.
            config: Settings. Uses defaults if not provided.
        """
        self._store = store
        self._config = config or ChatWeaveConfig()

    async def ensure_chat(self, chat_id: str, user_id: str, title: str) -> Chat:
        """Return the chat, creating it for ``user_id`` if it does not exist.

        Raises:
            PermissionError: If the chat belongs to another user.
        """
        chat = await self._store.get_chat(chat_id)
        if chat is None:
            chat = Chat(id=chat_id, user_id=user_id, title=title)
            await self._store.save_chat(chat)
            logger.debug("created chat chat_id=%s", chat_id)
            return chat
        if chat.user_id != user_id:
            raise PermissionError(f"Chat {chat_id} is not owned by this user")
        return chat

    async def delete_chat(self, chat_id: str, user_id: str) -> None:
        """Delete a chat owned by ``user_id``.

        Raises:
            LookupError: If the chat does not exist.
            PermissionError: If the chat belongs to another user.
        """
        chat = await self._store.get_chat(chat_id)
        if chat is None:
            raise LookupError(f"Chat {chat_id} not found")
        if chat.user_id != user_id:
            raise PermissionError(f"Chat {chat_id} is not owned by this user")
        await self._store.delete_chat(chat_id)

    async def record_user_message(
        self,
        chat_id: str,
        messages: list[UIMessage],
        user_id: str,
        title: str | None = None,
    ) -> PersistedMessage:
        """Persist the most recent user message of a client submission.

        Args:
            chat_id: Target chat. Created for ``user_id`` if missing.
            messages: Messages as submitted by the client.
            user_id: Authenticated user.
            title: Title for a new chat. Defaults to the start of the message.

        Returns:
            The persisted message with its fragments.

        Raises:
            ValueError: If ``messages`` contains no user message.
            PermissionError: If the chat belongs to another user.
        """
        user_message = get_most_recent_user_message(messages)
        if user_message is None:
            raise ValueError("No user message found")

        await self.ensure_chat(
            chat_id, user_id, title or user_message.content[:TITLE_MAX_LENGTH]
        )

        persisted = PersistedMessage(
            id=user_message.id,
            chat_id=chat_id,
            role="user",
            content=PLACEHOLDER_CONTENT,
            fragments=[TextFragment(content=user_message.content, order=0)],
        )
        await self._store.save_messages([persisted])
        await self._store.save_message_content(
            persisted.id, rows_from_fragments(persisted.id, persisted.fragments)
        )
        return persisted

    async def record_turn(
        self,
        chat_id: str,
        messages: list[ResponseMessage],
        reasoning: str | None = None,
    ) -> list[PersistedMessage]:
        """Sanitize and persist the messages of a completed model turn.

        Args:
            chat_id: Chat the turn belongs to.
            messages: Response messages in the order the model produced them.
            reasoning: Reasoning text for the turn, if any.

        Returns:
            The persisted messages.
        """
        if not self._config.persist_reasoning:
            reasoning = None
        sanitized = sanitize_response_messages(messages, reasoning=reasoning)

        # Spread timestamps so the store returns the turn in production order
        base = datetime.now(UTC)
        persisted = [
            PersistedMessage(
                id=message.id,
                chat_id=chat_id,
                role=message.role,
                content=PLACEHOLDER_CONTENT,
                fragments=(
                    [TextFragment(content=message.content, order=0)]
                    if isinstance(message.content, str)
                    else message.content
                ),
                created_at=base + timedelta(microseconds=index),
            )
            for index, message in enumerate(sanitized)
        ]
        if not persisted:
            return []

        await self._store.save_messages(persisted)
        for message in persisted:
            await self._store.save_message_content(
                message.id, rows_from_fragments(message.id, message.fragments)
            )
        logger.debug(
            "record_turn chat_id=%s received=%d persisted=%d",
            chat_id,
            len(messages),
            len(persisted),
        )
        return persisted

    async def load_messages(self, chat_id: str) -> list[PersistedMessage]:
        """Load a chat's messages with fragments decoded from content rows.

        Messages without content rows keep their legacy ``content`` column and
        are normalized during assembly.
        """
        messages = await self._store.get_messages_by_chat_id(chat_id)
        rows = await self._store.get_content_rows([m.id for m in messages])

        rows_by_message: dict[str, list[ContentRow]] = defaultdict(list)
        for row in rows:
            rows_by_message[row.message_id].append(row)

        return [
            message.model_copy(
                update={"fragments": fragments_from_rows(rows_by_message[message.id])}
            )
            if rows_by_message.get(message.id)
            else message
            for message in messages
        ]

    async def load_ui_messages(self, chat_id: str) -> list[UIMessage]:
        """Load a chat as render-ready UI messages."""
        messages = await self.load_messages(chat_id)
        return assemble(
            messages,
            reasoning_policy=self._config.reasoning_policy,
            warn_on_orphan_results=self._config.warn_on_orphan_results,
        )

    async def delete_messages_after(
        self, chat_id: str, timestamp: datetime, user_id: str
    ) -> int:
        """Delete messages created at or after ``timestamp``.

        Used when a user edits a message or regenerates a response.

        Raises:
            PermissionError: If the chat does not belong to ``user_id``.
        """
        chat = await self._store.get_chat(chat_id)
        if chat is None or chat.user_id != user_id:
            raise PermissionError(f"Chat {chat_id} is not owned by this user")
        return await self._store.delete_messages_after(chat_id, timestamp)
