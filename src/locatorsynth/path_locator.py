from __future__ import annotations

import logging
from typing import Any

from .selector_synthesizer import nth_of_type_index
from .tree import DocumentTree

logger = logging.getLogger("locatorsynth.selector")


def synthesize_path(tree: DocumentTree, node: Any) -> str:
    element_id = tree.element_id(node)
    if element_id:
        xpath = f"//*[@id={_xpath_literal(element_id)}]"
        logger.debug("Generated XPath (id): %s", xpath)
        return xpath

    segments: list[str] = []
    current = node
    while current is not None:
        index = nth_of_type_index(tree, current)
        tag = tree.tag_name(current) or "*"
        segments.insert(0, f"{tag}[{index}]" if index > 1 else tag)
        current = tree.parent(current)

    xpath = "/" + "/".join(segments)
    logger.debug("Generated XPath: %s", xpath)
    return xpath


def _xpath_literal(value: str) -> str:
    if '"' not in value:
        return f'"{value}"'
    if "'" not in value:
        return f"'{value}'"
    pieces = value.split('"')
    quoted = [f'"{piece}"' for piece in pieces]
    return "concat(" + ", '\"', ".join(quoted) + ")"
