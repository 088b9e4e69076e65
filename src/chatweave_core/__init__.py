from chatweave_core.adapters import ContentAdapter, LegacyContentAdapter
from chatweave_core.assembler import assemble
from chatweave_core.config import ChatWeaveConfig, load_config
from chatweave_core.fragments import (
    ContentFragment,
    ReasoningFragment,
    TextFragment,
    ToolCallContent,
    ToolCallFragment,
    ToolResultContent,
    ToolResultFragment,
)
from chatweave_core.history import ChatHistory
from chatweave_core.messages import (
    PersistedMessage,
    ResponseMessage,
    ToolInvocation,
    UIMessage,
)
from chatweave_core.normalizer import dump_fragments, normalize
from chatweave_core.sanitizer import (
    get_most_recent_user_message,
    sanitize_response_messages,
    sanitize_ui_messages,
)
from chatweave_core.storage import (
    Chat,
    ContentRow,
    InMemoryMessageStore,
    MessageStore,
)
from chatweave_core.streaming import MessageStream, StreamEvent, StreamState

__all__ = [
    # Service
    "ChatHistory",
    # Config
    "ChatWeaveConfig",
    "load_config",
    # Fragments
    "ContentFragment",
    "TextFragment",
    "ReasoningFragment",
    "ToolCallFragment",
    "ToolResultFragment",
    "ToolCallContent",
    "ToolResultContent",
    # Messages
    "PersistedMessage",
    "ResponseMessage",
    "UIMessage",
    "ToolInvocation",
    # Adapters
    "ContentAdapter",
    "LegacyContentAdapter",
    # Pipeline
    "normalize",
    "dump_fragments",
    "assemble",
    "sanitize_response_messages",
    "sanitize_ui_messages",
    "get_most_recent_user_message",
    # Streaming
    "MessageStream",
    "StreamEvent",
    "StreamState",
    # Storage
    "Chat",
    "ContentRow",
    "MessageStore",
    "InMemoryMessageStore",
]
