"""Protocol for content adapters."""

from typing import Any, Protocol

from chatweave_core.fragments import ContentFragment


class ContentAdapter(Protocol):
    """Protocol for converting raw message content to fragments.

    Implementations accept whatever shape a source produces and return an
    ordered list of ``ContentFragment``.
    """

    def convert(self, raw: Any) -> list[ContentFragment]:
        """Convert raw content of any supported shape.

        Args:
            raw: A string, JSON string, list of parts or single object.

        Returns:
            Fragments ordered by position.
        """
        ...

    def convert_list(self, elements: list[Any]) -> list[ContentFragment]:
        """Convert an array of parts, ordering fragments by index.

        Args:
            elements: Heterogeneous fragment-like parts.

        Returns:
            One fragment per element.
        """
        ...
