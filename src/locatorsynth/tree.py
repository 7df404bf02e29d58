"""Capabilities the engine needs from a host document.

Concrete hosts live in :mod:`locatorsynth.soup_tree` (static HTML) and
:mod:`locatorsynth.playwright_tree` (a live browser page). The engine never
touches a host's node objects directly; it only passes them back to the tree.
"""

from __future__ import annotations

from typing import Any, Callable, Hashable, Protocol

NodeKey = Hashable
InsertionListener = Callable[[NodeKey, float], None]
RemovalListener = Callable[[NodeKey], None]


class DocumentTree(Protocol):
    def matches_uniquely(self, selector: str, node: Any) -> bool:
        """True when exactly one node matches ``selector`` and it is ``node``.

        Malformed selectors must be reported as ``False``, never raised.
        """
        ...

    def tag_name(self, node: Any) -> str: ...

    def element_id(self, node: Any) -> str: ...

    def class_names(self, node: Any) -> list[str]: ...

    def class_string(self, node: Any) -> str: ...

    def get_attribute(self, node: Any, name: str) -> str | None: ...

    def has_attribute(self, node: Any, name: str) -> bool: ...

    def parent(self, node: Any) -> Any | None: ...

    def previous_sibling(self, node: Any) -> Any | None: ...

    def child_element_count(self, node: Any) -> int: ...

    def visible_text(self, node: Any) -> str: ...

    def outer_html(self, node: Any) -> str: ...

    def ancestors(self, node: Any, limit: int | None = None) -> list[Any]: ...

    def node_key(self, node: Any) -> NodeKey: ...

    def add_insertion_listener(self, listener: InsertionListener) -> None: ...

    def remove_insertion_listener(self, listener: InsertionListener) -> None: ...

    def add_removal_listener(self, listener: RemovalListener) -> None: ...

    def remove_removal_listener(self, listener: RemovalListener) -> None: ...
