"""Encode fragments as content rows and decode them back.

Rows written by older clients are inconsistent: tool rows may hold a JSON
string or an object whose keys mirror the fragment payload. Text and reasoning
strings are always read back verbatim.
Decoding turns each row into a fragment-like part and hands it to the legacy
adapter, keeping the stored ``order`` (gaps included).
"""

from typing import Any

from chatweave_core.adapters.legacy import LegacyContentAdapter, parse_json
from chatweave_core.fragments import ContentFragment, TextFragment, sort_fragments
from chatweave_core.storage.records import ContentRow

_adapter = LegacyContentAdapter()


def rows_from_fragments(message_id: str, fragments: list[ContentFragment]) -> list[ContentRow]:
    """Build content rows for a message.

    Args:
        message_id: Owning message.
        fragments: Normalized fragments of the message.

    Returns:
        One row per fragment, in fragment order.
    """
    rows = []
    for fragment in sort_fragments(fragments):
        if isinstance(fragment, TextFragment):
            content = fragment.content
        else:
            content = fragment.model_dump(mode="json", by_alias=True)["content"]
        rows.append(
            ContentRow(
                message_id=message_id,
                type=fragment.type,
                content=content,
                order=fragment.order,
            )
        )
    return rows


_TOOL_ROW_TYPES = ("tool_call", "tool_result")


def _row_part(row: ContentRow) -> dict[str, Any]:
    content = row.content
    if isinstance(content, str):
        # Only tool payloads are ever stored as JSON strings; text is verbatim
        if row.type in _TOOL_ROW_TYPES:
            ok, parsed = parse_json(content)
            if ok and isinstance(parsed, dict):
                return {**parsed, "type": row.type}
        return {"type": row.type, "text": content}
    if isinstance(content, dict):
        return {**content, "type": row.type}
    return {"type": row.type, "text": content}


def fragments_from_rows(rows: list[ContentRow]) -> list[ContentFragment]:
    """Decode content rows of one message into ordered fragments."""
    ordered = sorted(rows, key=lambda row: row.order)
    return sort_fragments([_adapter.convert_element(_row_part(row), row.order) for row in ordered])
