"""Adapters for converting raw or framework-specific content to chatweave fragments.

Available adapters:
    - LegacyContentAdapter: Any historical stored/incoming content shape.
    - LangChainAdapter: LangChain response messages (AIMessage, ToolMessage).

Usage:
    ```python
    from chatweave_core.adapters import LegacyContentAdapter

    adapter = LegacyContentAdapter()
    fragments = adapter.convert('[{"type": "text", "text": "Hello"}]')
    ```
"""

from chatweave_core.adapters.legacy import LegacyContentAdapter
from chatweave_core.adapters.protocol import ContentAdapter

__all__ = ["ContentAdapter", "LegacyContentAdapter"]
