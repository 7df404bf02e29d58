from __future__ import annotations

from collections import OrderedDict
import logging
import time
from typing import Any, Callable

from .selector_rules import looks_generated
from .settings import EngineSettings
from .tree import DocumentTree, NodeKey

logger = logging.getLogger("locatorsynth.tracker")


class MutationTracker:
    """Timestamps elements inserted while inspection is active.

    Entries are keyed by the host's stable node key. They leave the table when
    the host reports the node removed, when they outlive the TTL, or when the
    table grows past its bound (oldest first).
    """

    def __init__(
        self,
        tree: DocumentTree,
        settings: EngineSettings | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self.tree = tree
        self.settings = settings or EngineSettings()
        self._clock = clock or time.time
        self._created_at: OrderedDict[NodeKey, float] = OrderedDict()
        self._observing = False

    @property
    def observing(self) -> bool:
        return self._observing

    def __len__(self) -> int:
        return len(self._created_at)

    def start(self) -> None:
        if self._observing:
            return
        self.tree.add_insertion_listener(self.record_insertion)
        self.tree.add_removal_listener(self.forget)
        self._observing = True
        logger.info("Mutation observer started for dynamic element tracking.")

    def stop(self) -> None:
        if not self._observing:
            return
        self.tree.remove_insertion_listener(self.record_insertion)
        self.tree.remove_removal_listener(self.forget)
        self._observing = False
        logger.info("Mutation observer stopped.")

    def record_insertion(self, key: NodeKey, timestamp: float) -> None:
        self._created_at[key] = float(timestamp)
        self._created_at.move_to_end(key)
        self._prune()

    def forget(self, key: NodeKey) -> None:
        self._created_at.pop(key, None)

    def inserted_at(self, node: Any) -> float | None:
        return self._created_at.get(self.tree.node_key(node))

    def is_recent(self, node: Any) -> bool:
        created = self.inserted_at(node)
        if created is None:
            return False
        window = self.settings.dynamic_window_ms / 1000.0
        return self._clock() - created < window

    def is_dynamic(self, node: Any) -> bool:
        if self.is_recent(node):
            return True
        # Digit-heavy ids and classes are usually minted by a framework.
        return looks_generated(self.tree.element_id(node), self.tree.class_string(node))

    def _prune(self) -> None:
        cutoff = self._clock() - self.settings.tracker_ttl_seconds
        while self._created_at:
            oldest_key = next(iter(self._created_at))
            if self._created_at[oldest_key] >= cutoff:
                break
            self._created_at.popitem(last=False)
        while len(self._created_at) > self.settings.tracker_max_entries:
            self._created_at.popitem(last=False)
