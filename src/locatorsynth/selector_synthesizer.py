from __future__ import annotations

import logging
from typing import Any

from .models import SelectorOutcome
from .selector_rules import SELECTOR_ATTRIBUTE_ALLOWLIST, escape_css_identifier, escape_css_string
from .tree import DocumentTree

logger = logging.getLogger("locatorsynth.selector")

DEFAULT_MAX_DEPTH = 5


def synthesize_selector(tree: DocumentTree, node: Any, max_depth: int = DEFAULT_MAX_DEPTH) -> str:
    return build_selector(tree, node, max_depth=max_depth).selector


def build_selector(tree: DocumentTree, node: Any, max_depth: int = DEFAULT_MAX_DEPTH) -> SelectorOutcome:
    tag = tree.tag_name(node) or "*"
    logger.debug("Generating selector for element: %s", tag)

    element_id = tree.element_id(node).strip()
    if element_id:
        selector = f"#{escape_css_identifier(element_id)}"
        if tree.matches_uniquely(selector, node):
            return _found(selector, "id")

    classes = tree.class_names(node)
    for class_name in classes:
        selector = f".{escape_css_identifier(class_name)}"
        if tree.matches_uniquely(selector, node):
            return _found(selector, "class")
    if classes:
        selector = "." + ".".join(escape_css_identifier(item) for item in classes)
        if tree.matches_uniquely(selector, node):
            return _found(selector, "class_combined")

    for attr in SELECTOR_ATTRIBUTE_ALLOWLIST:
        value = tree.get_attribute(node, attr)
        if not value:
            continue
        selector = f'{tag}[{attr}="{escape_css_string(value)}"]'
        if tree.matches_uniquely(selector, node):
            return _found(selector, f"attribute:{attr}")

    return _ancestry_path(tree, node, max(1, int(max_depth)))


def nth_of_type_index(tree: DocumentTree, node: Any) -> int:
    tag = tree.tag_name(node)
    index = 1
    sibling = tree.previous_sibling(node)
    while sibling is not None:
        if tree.tag_name(sibling) == tag:
            index += 1
        sibling = tree.previous_sibling(sibling)
    return index


def _path_segment(tree: DocumentTree, node: Any) -> str:
    tag = tree.tag_name(node) or "*"
    index = nth_of_type_index(tree, node)
    if index > 1 or not tree.matches_uniquely(tag, node):
        return f"{tag}:nth-of-type({index})"
    return tag


def _ancestry_path(tree: DocumentTree, node: Any, max_depth: int) -> SelectorOutcome:
    path = [_path_segment(tree, node)]
    if tree.matches_uniquely(path[0], node):
        return _found(path[0], "ancestry_path")

    current = node
    while len(path) < max_depth:
        current = tree.parent(current)
        if current is None:
            break
        path.insert(0, _path_segment(tree, current))
        candidate = " > ".join(path)
        if tree.matches_uniquely(candidate, node):
            return _found(candidate, "ancestry_path")

    selector = " > ".join(path)
    logger.warning("Selector is not unique within depth %s, using best effort: %s", max_depth, selector)
    return SelectorOutcome(selector=selector, strategy="ancestry_path", unique=False)


def _found(selector: str, strategy: str) -> SelectorOutcome:
    logger.debug("Generated selector (%s): %s", strategy, selector)
    return SelectorOutcome(selector=selector, strategy=strategy, unique=True)
