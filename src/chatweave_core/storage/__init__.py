from chatweave_core.storage.codec import fragments_from_rows, rows_from_fragments
from chatweave_core.storage.memory import InMemoryMessageStore
from chatweave_core.storage.protocols import MessageStore
from chatweave_core.storage.records import Chat, ContentRow

__all__ = [
    "Chat",
    "ContentRow",
    "MessageStore",
    "InMemoryMessageStore",
    "fragments_from_rows",
    "rows_from_fragments",
]
