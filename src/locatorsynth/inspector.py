from __future__ import annotations

import logging
from typing import Any, Callable, Mapping

from .dom_extractor import extract_attributes, extract_display_name, extract_html_snapshot
from .locator_composer import LocatorComposer
from .models import InspectionState, SelectionRecord, SelectorOutcome
from .mutation_tracker import MutationTracker
from .path_locator import synthesize_path
from .selector_synthesizer import build_selector
from .semantic_context import resolve_context
from .settings import EngineSettings
from .tree import DocumentTree

RecordsCallback = Callable[[list[SelectionRecord]], None]
ClearedCallback = Callable[[], None]
StatusCallback = Callable[[str], None]

# (current state, transition) -> next state
TRANSITIONS: dict[tuple[InspectionState, str], InspectionState] = {
    ("idle", "start"): "inspecting",
    ("inspecting", "start"): "inspecting",
    ("idle", "stop"): "idle",
    ("inspecting", "stop"): "idle",
    ("idle", "reset"): "idle",
    ("inspecting", "reset"): "inspecting",
    ("idle", "clear_all"): "idle",
    ("inspecting", "clear_all"): "idle",
}


class ElementInspector:
    def __init__(
        self,
        tree: DocumentTree,
        on_update: RecordsCallback | None = None,
        on_cleared: ClearedCallback | None = None,
        on_status: StatusCallback | None = None,
        settings: EngineSettings | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        self.tree = tree
        self.settings = settings or EngineSettings()
        self.tracker = MutationTracker(tree, self.settings, clock=clock)
        self.composer = LocatorComposer(tree, self.settings)
        self.logger = logging.getLogger("locatorsynth.inspector")

        self._on_update = on_update or (lambda _records: None)
        self._on_cleared = on_cleared or (lambda: None)
        self._on_status = on_status or (lambda _message: None)
        self._state: InspectionState = "idle"
        self._records: dict[str, SelectionRecord] = {}

    @property
    def state(self) -> InspectionState:
        return self._state

    @property
    def is_active(self) -> bool:
        return self._state == "inspecting"

    @property
    def records(self) -> list[SelectionRecord]:
        return list(self._records.values())

    def start(self) -> None:
        if self.is_active:
            self.logger.info("Inspection already active, skipping start request.")
            return
        self._transition("start")
        self.tracker.start()
        self._on_status("Inspection started.")

    def stop(self) -> None:
        if not self.is_active:
            self.logger.info("Inspection not active, skipping stop request.")
            return
        self._transition("stop")
        self.tracker.stop()
        self._on_status("Inspection stopped.")

    def reset(self) -> None:
        cleared = len(self._records)
        self._transition("reset")
        self._records.clear()
        self.logger.info("Reset complete: cleared %s selected elements.", cleared)
        self._on_cleared()

    def clear_all(self) -> None:
        cleared = len(self._records)
        self._transition("clear_all")
        self.tracker.stop()
        self._records.clear()
        self.logger.info("All inspector state cleared (%s selected elements dropped).", cleared)

    def select(self, node: Any) -> SelectionRecord | None:
        if not self.is_active:
            self.logger.info("Selection ignored: inspection is inactive.")
            return None
        try:
            return self._toggle(node)
        except Exception as exc:
            self.logger.exception("Selection failed unexpectedly", exc_info=exc)
            self._on_status(f"Selection failed unexpectedly: {exc}")
            return None

    def remove(self, selector: str) -> bool:
        if self._records.pop(selector, None) is None:
            self.logger.info("No selected element for selector '%s'.", selector)
            return False
        self.logger.info("Element '%s' removed from selection.", selector)
        self._on_update(self.records)
        return True

    def build_record(self, node: Any, outcome: SelectorOutcome | None = None) -> SelectionRecord:
        outcome = outcome or build_selector(self.tree, node, self.settings.max_selector_depth)
        if outcome.degraded:
            self._on_status(f"Selector may match more than one element: {outcome.selector}")
        is_dynamic = self.tracker.is_dynamic(node)
        context = resolve_context(self.tree, node, self.settings.ancestor_depth)
        composed = self.composer.compose(node, context, is_dynamic, selector=outcome.selector)
        return SelectionRecord(
            structural_selector=outcome.selector,
            path_locator=synthesize_path(self.tree, node),
            display_name=extract_display_name(self.tree, node, self.settings.text_limit),
            html_snapshot=extract_html_snapshot(self.tree, node),
            attributes=extract_attributes(self.tree, node),
            is_dynamic=is_dynamic,
            primary_locator_a=composed.grammar_a,
            primary_locator_b=composed.grammar_b,
        )

    def handle_command(self, action: str, payload: Mapping[str, Any] | None = None) -> dict[str, str]:
        data = dict(payload or {})
        self.logger.info("Received command: %s", action)
        try:
            if action == "startInspect":
                self.start()
                return {"status": "started"}
            if action == "stopInspect":
                self.stop()
                return {"status": "stopped"}
            if action == "resetInspect":
                self.reset()
                return {"status": "reset"}
            if action == "removeHighlight":
                self.remove(str(data.get("selector") or ""))
                return {"status": "removed"}
            if action == "clearAll":
                self.clear_all()
                return {"status": "cleared"}
        except Exception as exc:
            self.logger.exception("Command %s failed", action, exc_info=exc)
            return {"status": "error", "message": str(exc), "action": action}
        self.logger.warning("Unknown command received: %s", action)
        return {"status": "unknown action"}

    def _toggle(self, node: Any) -> SelectionRecord | None:
        outcome = build_selector(self.tree, node, self.settings.max_selector_depth)
        selector = outcome.selector
        if selector in self._records:
            del self._records[selector]
            self.logger.info("Element '%s' unselected.", selector)
            self._on_update(self.records)
            return None

        record = self.build_record(node, outcome)
        self._records[selector] = record
        self.logger.info("New element selected: %s (dynamic=%s).", selector, record.is_dynamic)
        self._on_update(self.records)
        return record

    def _transition(self, event: str) -> None:
        previous = self._state
        self._state = TRANSITIONS[(previous, event)]
        self.logger.info("Inspector transition %s: %s -> %s", event, previous, self._state)


class InspectorRegistry:
    """Hands out one inspector per tree; the owner decides the tree's lifetime."""

    def __init__(self) -> None:
        self._inspectors: dict[int, tuple[DocumentTree, ElementInspector]] = {}

    def attach(self, tree: DocumentTree, **kwargs: Any) -> ElementInspector:
        existing = self._inspectors.get(id(tree))
        if existing is not None and existing[0] is tree:
            existing[1].logger.info("Inspector already attached to this document, reusing it.")
            return existing[1]
        inspector = ElementInspector(tree, **kwargs)
        self._inspectors[id(tree)] = (tree, inspector)
        return inspector

    def detach(self, tree: DocumentTree) -> None:
        entry = self._inspectors.pop(id(tree), None)
        if entry is not None:
            entry[1].clear_all()

    def __len__(self) -> int:
        return len(self._inspectors)
