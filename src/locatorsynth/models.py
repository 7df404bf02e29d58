from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

StrategyKind = Literal["testid", "role", "label", "placeholder", "text", "id", "name", "class", "css", "xpath"]
InspectionState = Literal["idle", "inspecting"]


@dataclass(slots=True)
class Candidate:
    kind: StrategyKind
    text: str
    score: int = 0


@dataclass(frozen=True, slots=True)
class SemanticContext:
    ancestor: str | None = None
    label: str | None = None

    @property
    def expression(self) -> str | None:
        # An associated label outranks a structural landmark.
        return self.label or self.ancestor

    @property
    def prefix(self) -> str:
        return f"{self.ancestor}." if self.ancestor else ""


@dataclass(frozen=True, slots=True)
class SelectorOutcome:
    selector: str
    strategy: str
    unique: bool

    @property
    def degraded(self) -> bool:
        return not self.unique


@dataclass(slots=True)
class ComposedLocators:
    grammar_a: str
    grammar_b: str
    candidates_a: list[Candidate] = field(default_factory=list)
    candidates_b: list[Candidate] = field(default_factory=list)


@dataclass(slots=True)
class SelectionRecord:
    structural_selector: str
    path_locator: str
    display_name: str
    html_snapshot: str
    attributes: dict[str, str]
    is_dynamic: bool
    primary_locator_a: str
    primary_locator_b: str

    def to_payload(self) -> dict[str, Any]:
        return {
            "selector": self.structural_selector,
            "xpath": self.path_locator,
            "name": self.display_name,
            "html": self.html_snapshot,
            "attributes": dict(self.attributes),
            "playwrightLocator": self.primary_locator_a,
            "seleniumLocator": self.primary_locator_b,
            "isDynamic": self.is_dynamic,
        }
