from datetime import UTC, datetime, timedelta
from typing import Any
from unittest.mock import AsyncMock

import pytest

from chatweave_core.adapters.legacy import LegacyContentAdapter
from chatweave_core.config import ChatWeaveConfig
from chatweave_core.history import ChatHistory
from chatweave_core.messages import PersistedMessage
from chatweave_core.storage.memory import InMemoryMessageStore

BASE_TIME = datetime(2025, 3, 1, 12, 0, tzinfo=UTC)


def make_message(
    message_id: str,
    role: str,
    content: Any = None,
    fragments: list | None = None,
    chat_id: str = "chat-1",
    offset: int = 0,
) -> PersistedMessage:
    """Build a PersistedMessage with a deterministic timestamp."""
    return PersistedMessage(
        id=message_id,
        chat_id=chat_id,
        role=role,
        content=content,
        fragments=fragments or [],
        created_at=BASE_TIME + timedelta(seconds=offset),
    )


@pytest.fixture
def adapter() -> LegacyContentAdapter:
    """Provide a legacy content adapter."""
    return LegacyContentAdapter()


@pytest.fixture
def store() -> InMemoryMessageStore:
    """Provide an empty in-memory store."""
    return InMemoryMessageStore()


@pytest.fixture
def history(store: InMemoryMessageStore) -> ChatHistory:
    """Provide a history service over the in-memory store."""
    return ChatHistory(store, config=ChatWeaveConfig())


@pytest.fixture
def mock_store(mocker) -> AsyncMock:
    """Provide a mock message store."""
    mock = AsyncMock()
    mock.get_chat = AsyncMock(return_value=None)
    mock.save_chat = AsyncMock()
    mock.delete_chat = AsyncMock()
    mock.save_messages = AsyncMock()
    mock.save_message_content = AsyncMock()
    mock.get_messages_by_chat_id = AsyncMock(return_value=[])
    mock.get_content_rows = AsyncMock(return_value=[])
    mock.delete_messages_after = AsyncMock(return_value=0)
    return mock
