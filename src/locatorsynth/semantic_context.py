from __future__ import annotations

import logging
from typing import Any

from .models import SemanticContext
from .selector_rules import LABELABLE_TAGS, LANDMARK_TAGS, escape_single_quoted, normalize_space
from .tree import DocumentTree

logger = logging.getLogger("locatorsynth.context")

DEFAULT_ANCESTOR_DEPTH = 4


def resolve_context(
    tree: DocumentTree,
    node: Any,
    ancestor_depth: int = DEFAULT_ANCESTOR_DEPTH,
) -> SemanticContext | None:
    ancestor = ancestor_qualifier(tree, node, ancestor_depth)
    label = relative_label_qualifier(tree, node)
    if ancestor is None and label is None:
        logger.debug("No semantic context for <%s>", tree.tag_name(node))
        return None
    context = SemanticContext(ancestor=ancestor, label=label)
    logger.debug("Semantic context resolved: ancestor=%s label=%s", ancestor, label)
    return context


def ancestor_qualifier(tree: DocumentTree, node: Any, depth: int = DEFAULT_ANCESTOR_DEPTH) -> str | None:
    for ancestor in tree.ancestors(node, limit=depth):
        tag = tree.tag_name(ancestor)
        test_id = tree.get_attribute(ancestor, "data-testid")
        aria_label = tree.get_attribute(ancestor, "aria-label")
        if tag not in LANDMARK_TAGS and not test_id and not aria_label:
            continue
        if test_id:
            return f"getByTestId('{escape_single_quoted(test_id)}')"
        if aria_label:
            return f"getByRole('region', {{ name: '{escape_single_quoted(aria_label)}' }})"
        return f"locator('{tag}')"
    return None


def relative_label_qualifier(tree: DocumentTree, node: Any) -> str | None:
    if tree.tag_name(node) not in LABELABLE_TAGS:
        return None
    previous = tree.previous_sibling(node)
    if previous is None or tree.tag_name(previous) != "label":
        return None
    text = normalize_space(tree.visible_text(previous))
    if not text:
        return None
    return f"getByLabel('{escape_single_quoted(text)}')"
