from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Mapping

from playwright.sync_api import Error as PlaywrightError

from .tree import InsertionListener, NodeKey, RemovalListener

if TYPE_CHECKING:
    from playwright.sync_api import ElementHandle, Page

logger = logging.getLogger("locatorsynth.tree")

BINDING_NAME = "__locatorsynthMutation"

BOOTSTRAP_SCRIPT = r"""
() => {
  if (window.__locatorsynth) {
    return;
  }
  const ids = new WeakMap();
  let nextId = 1;
  window.__locatorsynth = {
    observer: null,
    has(node) {
      return ids.has(node);
    },
    keyOf(node) {
      if (!ids.has(node)) {
        ids.set(node, nextId);
        nextId += 1;
      }
      return ids.get(node);
    },
  };
}
"""

START_OBSERVER_SCRIPT = r"""
(bindingName) => {
  const state = window.__locatorsynth;
  if (!state || state.observer) {
    return;
  }
  state.observer = new MutationObserver((mutations) => {
    const now = Date.now();
    for (const mutation of mutations) {
      if (mutation.type !== 'childList') {
        continue;
      }
      mutation.addedNodes.forEach((node) => {
        if (node.nodeType === Node.ELEMENT_NODE) {
          window[bindingName]({ event: 'inserted', key: state.keyOf(node), timestamp: now });
        }
      });
      mutation.removedNodes.forEach((node) => {
        if (node.nodeType === Node.ELEMENT_NODE && state.has(node)) {
          window[bindingName]({ event: 'removed', key: state.keyOf(node), timestamp: now });
        }
      });
    }
  });
  state.observer.observe(document.body || document.documentElement, { childList: true, subtree: true });
}
"""

STOP_OBSERVER_SCRIPT = r"""
() => {
  const state = window.__locatorsynth;
  if (state && state.observer) {
    state.observer.disconnect();
    state.observer = null;
  }
}
"""

UNIQUE_SCRIPT = r"""
([selector, target]) => {
  try {
    const matches = document.querySelectorAll(selector);
    return matches.length === 1 && matches[0] === target;
  } catch (_) {
    return false;
  }
}
"""


class PlaywrightTree:
    """Live page host. Nodes are Playwright ``ElementHandle`` objects."""

    def __init__(self, page: Page) -> None:
        self.page = page
        self._insertion_listeners: list[InsertionListener] = []
        self._removal_listeners: list[RemovalListener] = []
        self._binding_exposed = False
        self._observing = False

    def query(self, selector: str) -> list[ElementHandle]:
        try:
            return list(self.page.query_selector_all(selector))
        except PlaywrightError as exc:
            logger.debug("Selector rejected by page %r: %s", selector, exc)
            return []

    def matches_uniquely(self, selector: str, node: ElementHandle) -> bool:
        try:
            unique = bool(self.page.evaluate(UNIQUE_SCRIPT, [selector, node]))
        except PlaywrightError as exc:
            logger.debug("Uniqueness check failed for %r: %s", selector, exc)
            return False
        logger.debug("Uniqueness check for %r: %s", selector, unique)
        return unique

    def tag_name(self, node: ElementHandle) -> str:
        return str(self._evaluate(node, "(el) => (el.tagName || '').toLowerCase()", "") or "")

    def element_id(self, node: ElementHandle) -> str:
        return str(self._evaluate(node, "(el) => el.id || ''", "") or "")

    def class_names(self, node: ElementHandle) -> list[str]:
        raw = self._evaluate(node, "(el) => Array.from(el.classList || [])", []) or []
        return [str(item) for item in raw if item]

    def class_string(self, node: ElementHandle) -> str:
        return " ".join(self.class_names(node))

    def get_attribute(self, node: ElementHandle, name: str) -> str | None:
        try:
            return node.get_attribute(name)
        except PlaywrightError as exc:
            logger.debug("Reading attribute %r failed: %s", name, exc)
            return None

    def has_attribute(self, node: ElementHandle, name: str) -> bool:
        return bool(self._evaluate(node, "(el, name) => el.hasAttribute(name)", False, name))

    def parent(self, node: ElementHandle) -> ElementHandle | None:
        return self._related(node, "(el) => el.parentElement")

    def previous_sibling(self, node: ElementHandle) -> ElementHandle | None:
        return self._related(node, "(el) => el.previousElementSibling")

    def child_element_count(self, node: ElementHandle) -> int:
        return int(self._evaluate(node, "(el) => el.childElementCount", 0) or 0)

    def visible_text(self, node: ElementHandle) -> str:
        return str(self._evaluate(node, "(el) => el.innerText || el.textContent || ''", "") or "")

    def outer_html(self, node: ElementHandle) -> str:
        return str(self._evaluate(node, "(el) => el.outerHTML", "") or "")

    def ancestors(self, node: ElementHandle, limit: int | None = None) -> list[ElementHandle]:
        found: list[ElementHandle] = []
        current = self.parent(node)
        while current is not None:
            if limit is not None and len(found) >= limit:
                break
            found.append(current)
            current = self.parent(current)
        return found

    def node_key(self, node: ElementHandle) -> NodeKey | None:
        try:
            self.page.evaluate(BOOTSTRAP_SCRIPT)
            return int(node.evaluate("(el) => window.__locatorsynth.keyOf(el)"))
        except PlaywrightError as exc:
            logger.debug("Node key unavailable: %s", exc)
            return None

    def _evaluate(self, node: ElementHandle, expression: str, default: Any, *args: Any) -> Any:
        # Stale or detached handles read as empty nodes.
        try:
            return node.evaluate(expression, *args)
        except PlaywrightError as exc:
            logger.debug("Element evaluation failed for %s: %s", expression, exc)
            return default

    def _related(self, node: ElementHandle, expression: str) -> ElementHandle | None:
        try:
            return node.evaluate_handle(expression).as_element()
        except PlaywrightError as exc:
            logger.debug("Element navigation failed for %s: %s", expression, exc)
            return None

    def add_insertion_listener(self, listener: InsertionListener) -> None:
        if listener not in self._insertion_listeners:
            self._insertion_listeners.append(listener)
        self._sync_observer()

    def remove_insertion_listener(self, listener: InsertionListener) -> None:
        if listener in self._insertion_listeners:
            self._insertion_listeners.remove(listener)
        self._sync_observer()

    def add_removal_listener(self, listener: RemovalListener) -> None:
        if listener not in self._removal_listeners:
            self._removal_listeners.append(listener)

    def remove_removal_listener(self, listener: RemovalListener) -> None:
        if listener in self._removal_listeners:
            self._removal_listeners.remove(listener)

    def dispatch_mutation(self, payload: Mapping[str, Any]) -> None:
        event = str(payload.get("event") or "")
        try:
            key = int(payload.get("key"))  # type: ignore[arg-type]
        except (TypeError, ValueError):
            logger.debug("Ignoring mutation payload without node key: %s", payload)
            return

        if event == "inserted":
            timestamp = float(payload.get("timestamp") or 0.0) / 1000.0
            for listener in list(self._insertion_listeners):
                listener(key, timestamp)
        elif event == "removed":
            for listener in list(self._removal_listeners):
                listener(key)

    def _on_binding(self, _source: Any, payload: Mapping[str, Any]) -> None:
        self.dispatch_mutation(payload)

    def _sync_observer(self) -> None:
        wanted = bool(self._insertion_listeners)
        if wanted == self._observing:
            return
        try:
            if wanted:
                if not self._binding_exposed:
                    self.page.expose_binding(BINDING_NAME, self._on_binding)
                    self._binding_exposed = True
                self.page.evaluate(BOOTSTRAP_SCRIPT)
                self.page.evaluate(START_OBSERVER_SCRIPT, BINDING_NAME)
                logger.info("Page mutation observer attached.")
            else:
                self.page.evaluate(STOP_OBSERVER_SCRIPT)
                logger.info("Page mutation observer disconnected.")
        except PlaywrightError as exc:
            logger.warning("Could not toggle page mutation observer: %s", exc)
            return
        self._observing = wanted
