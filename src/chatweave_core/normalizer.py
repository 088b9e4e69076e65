"""Content normalization entry points.

``normalize`` turns raw content into fragments. ``dump_fragments`` encodes
fragments as the JSON array string that ``normalize`` reads back into an
equivalent sequence.
"""

import json
from typing import Any

from pydantic import TypeAdapter

from chatweave_core.adapters.legacy import LegacyContentAdapter
from chatweave_core.fragments import ContentFragment

_adapter = LegacyContentAdapter()
_fragment_list = TypeAdapter(list[ContentFragment])


def normalize(raw: Any) -> list[ContentFragment]:
    """Normalize raw message content into ordered fragments.

    Args:
        raw: Plain string, JSON string, list of parts, or a single object.

    Returns:
        Fragments in order. Never raises; unreadable input becomes one text
        fragment.
    """
    return _adapter.convert(raw)


def dump_fragments(fragments: list[ContentFragment]) -> str:
    """Encode fragments as a JSON array string.

    Args:
        fragments: Fragments to encode.

    Returns:
        JSON string of ``{type, content, order}`` objects with camelCase
        tool fields.
    """
    return json.dumps(_fragment_list.dump_python(fragments, mode="json", by_alias=True))
