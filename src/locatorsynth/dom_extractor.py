from __future__ import annotations

import logging
from typing import Any

from .selector_rules import RECORD_ATTRIBUTES
from .tree import DocumentTree

logger = logging.getLogger("locatorsynth.extractor")

NAME_ATTRIBUTES = ("name", "aria-label", "data-testid")


def extract_attributes(tree: DocumentTree, node: Any) -> dict[str, str]:
    attrs: dict[str, str] = {}
    for attr in RECORD_ATTRIBUTES:
        if not tree.has_attribute(node, attr):
            continue
        attrs[attr] = tree.get_attribute(node, attr) or ""
    return attrs


def extract_display_name(tree: DocumentTree, node: Any, limit: int = 50) -> str:
    for attr in NAME_ATTRIBUTES:
        value = tree.get_attribute(node, attr)
        if value:
            return value

    text = tree.visible_text(node).strip()
    if text:
        return text[:limit] + ("..." if len(text) > limit else "")

    title = tree.get_attribute(node, "title")
    if title:
        return title
    return tree.tag_name(node)


def extract_html_snapshot(tree: DocumentTree, node: Any) -> str:
    return tree.outer_html(node)
