from __future__ import annotations

import logging
import time
from typing import Callable

from bs4 import BeautifulSoup, Tag
from soupsieve import SelectorSyntaxError

from .tree import InsertionListener, NodeKey, RemovalListener

logger = logging.getLogger("locatorsynth.tree")

_SKIPPED_TEXT_TAGS = {"script", "style", "template", "noscript"}


class SoupTree:
    """In-memory HTML document backed by BeautifulSoup and soupsieve.

    Node identity is object identity: two structurally equal tags are still
    different nodes, so comparisons use ``is`` and keys use ``id()``.
    """

    def __init__(self, markup: str | BeautifulSoup, clock: Callable[[], float] | None = None) -> None:
        if isinstance(markup, BeautifulSoup):
            self.soup = markup
        else:
            self.soup = BeautifulSoup(markup, "html.parser")
        self._clock = clock or time.time
        self._insertion_listeners: list[InsertionListener] = []
        self._removal_listeners: list[RemovalListener] = []

    @classmethod
    def from_file(cls, path: str, clock: Callable[[], float] | None = None) -> SoupTree:
        with open(path, encoding="utf-8") as handle:
            return cls(handle.read(), clock=clock)

    def select(self, selector: str) -> list[Tag]:
        try:
            return list(self.soup.select(selector))
        except (SelectorSyntaxError, NotImplementedError, ValueError):
            logger.debug("Selector rejected by parser: %s", selector)
            return []

    def select_one(self, selector: str) -> Tag | None:
        matches = self.select(selector)
        return matches[0] if matches else None

    def elements(self) -> list[Tag]:
        return list(self.soup.find_all(True))

    def matches_uniquely(self, selector: str, node: Tag) -> bool:
        try:
            matches = self.soup.select(selector, limit=2)
        except (SelectorSyntaxError, NotImplementedError, ValueError) as exc:
            logger.debug("Uniqueness check rejected malformed selector %r: %s", selector, exc)
            return False
        unique = len(matches) == 1 and matches[0] is node
        logger.debug("Uniqueness check for %r: %s", selector, unique)
        return unique

    def tag_name(self, node: Tag) -> str:
        return (node.name or "").lower()

    def element_id(self, node: Tag) -> str:
        return self.get_attribute(node, "id") or ""

    def class_names(self, node: Tag) -> list[str]:
        raw = node.get("class")
        if not raw:
            return []
        if isinstance(raw, str):
            return [item for item in raw.split() if item]
        return [str(item) for item in raw if item]

    def class_string(self, node: Tag) -> str:
        return " ".join(self.class_names(node))

    def get_attribute(self, node: Tag, name: str) -> str | None:
        raw = node.get(name)
        if raw is None:
            return None
        if isinstance(raw, list):
            return " ".join(str(item) for item in raw)
        return str(raw)

    def has_attribute(self, node: Tag, name: str) -> bool:
        return node.has_attr(name)

    def parent(self, node: Tag) -> Tag | None:
        parent = node.parent
        if parent is None or isinstance(parent, BeautifulSoup):
            return None
        return parent

    def previous_sibling(self, node: Tag) -> Tag | None:
        for sibling in node.previous_siblings:
            if isinstance(sibling, Tag):
                return sibling
        return None

    def child_elements(self, node: Tag) -> list[Tag]:
        return [child for child in node.children if isinstance(child, Tag)]

    def child_element_count(self, node: Tag) -> int:
        return len(self.child_elements(node))

    def visible_text(self, node: Tag) -> str:
        chunks: list[str] = []
        for text in node.find_all(string=True):
            parent = text.parent
            if parent is not None and parent.name in _SKIPPED_TEXT_TAGS:
                continue
            stripped = str(text).strip()
            if stripped:
                chunks.append(" ".join(stripped.split()))
        return "\n".join(chunks)

    def outer_html(self, node: Tag) -> str:
        return str(node)

    def ancestors(self, node: Tag, limit: int | None = None) -> list[Tag]:
        found: list[Tag] = []
        current = self.parent(node)
        while current is not None:
            if limit is not None and len(found) >= limit:
                break
            found.append(current)
            current = self.parent(current)
        return found

    def node_key(self, node: Tag) -> NodeKey:
        return id(node)

    def add_insertion_listener(self, listener: InsertionListener) -> None:
        if listener not in self._insertion_listeners:
            self._insertion_listeners.append(listener)

    def remove_insertion_listener(self, listener: InsertionListener) -> None:
        if listener in self._insertion_listeners:
            self._insertion_listeners.remove(listener)

    def add_removal_listener(self, listener: RemovalListener) -> None:
        if listener not in self._removal_listeners:
            self._removal_listeners.append(listener)

    def remove_removal_listener(self, listener: RemovalListener) -> None:
        if listener in self._removal_listeners:
            self._removal_listeners.remove(listener)

    def insert_html(self, parent: Tag, markup: str) -> list[Tag]:
        fragment = BeautifulSoup(markup, "html.parser")
        inserted: list[Tag] = []
        for child in list(fragment.contents):
            moved = child.extract()
            parent.append(moved)
            if isinstance(moved, Tag):
                inserted.append(moved)

        # Only the top-level inserted elements are reported, like a childList observer.
        timestamp = self._clock()
        for node in inserted:
            key = self.node_key(node)
            for listener in list(self._insertion_listeners):
                listener(key, timestamp)
        return inserted

    def remove(self, node: Tag) -> None:
        keys = [self.node_key(node)] + [self.node_key(item) for item in node.find_all(True)]
        node.extract()
        for key in keys:
            for listener in list(self._removal_listeners):
                listener(key)
