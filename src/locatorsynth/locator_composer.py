from __future__ import annotations

import logging
from typing import Any

from .models import Candidate, ComposedLocators, SemanticContext
from .scoring import score_candidate, top_distinct
from .selector_rules import (
    escape_css_identifier,
    escape_css_string,
    escape_java_string,
    escape_single_quoted,
    first_line,
    infer_role,
)
from .selector_synthesizer import synthesize_selector
from .settings import EngineSettings
from .tree import DocumentTree

logger = logging.getLogger("locatorsynth.composer")

DYNAMIC_WAITER_COMMENT = "// DYNAMIC ELEMENT WAITER"


class LocatorComposer:
    def __init__(self, tree: DocumentTree, settings: EngineSettings | None = None) -> None:
        self.tree = tree
        self.settings = settings or EngineSettings()

    def compose(
        self,
        node: Any,
        context: SemanticContext | None,
        is_dynamic: bool,
        selector: str | None = None,
    ) -> ComposedLocators:
        css = selector or synthesize_selector(self.tree, node, self.settings.max_selector_depth)
        candidates_a = self.playwright_candidates(node, context, css)
        candidates_b = self.selenium_candidates(node, css)
        return ComposedLocators(
            grammar_a=self.render_playwright(candidates_a, css, is_dynamic),
            grammar_b=self.render_selenium(candidates_b, is_dynamic),
            candidates_a=candidates_a,
            candidates_b=candidates_b,
        )

    def playwright_candidates(self, node: Any, context: SemanticContext | None, css: str) -> list[Candidate]:
        tree = self.tree
        prefix = context.prefix if context else ""
        candidates: list[Candidate] = []

        test_id = tree.get_attribute(node, "data-testid")
        if test_id:
            candidates.append(
                score_candidate("testid", f"{prefix}getByTestId('{escape_single_quoted(test_id)}')", test_id)
            )

        label = context.label if context else None
        placeholder = tree.get_attribute(node, "placeholder")
        if label:
            candidates.append(score_candidate("label", f"{prefix}{label}", label))
        elif placeholder:
            candidates.append(
                score_candidate(
                    "placeholder",
                    f"{prefix}getByPlaceholder('{escape_single_quoted(placeholder)}')",
                    placeholder,
                )
            )

        role = self.resolve_role(node)
        if role:
            name = self.accessible_name(node)
            if name:
                text = f"{prefix}getByRole('{escape_single_quoted(role)}', {{ name: '{escape_single_quoted(name)}' }})"
                candidates.append(score_candidate("role", text, role))

        if tree.child_element_count(node) == 0:
            visible = first_line(tree.visible_text(node), self.settings.text_limit)
            if visible:
                candidates.append(score_candidate("text", f"{prefix}getByText('{escape_single_quoted(visible)}')", visible))

        candidates.append(score_candidate("css", f"{prefix}locator('{escape_single_quoted(css)}')", css))
        return candidates

    def selenium_candidates(self, node: Any, css: str) -> list[Candidate]:
        tree = self.tree
        candidates: list[Candidate] = []

        element_id = tree.element_id(node)
        if element_id and tree.matches_uniquely(f"#{escape_css_identifier(element_id)}", node):
            candidates.append(score_candidate("id", f'By.id("{escape_java_string(element_id)}")', element_id))

        name = tree.get_attribute(node, "name")
        if name:
            selector = f'{tree.tag_name(node)}[name="{escape_css_string(name)}"]'
            if tree.matches_uniquely(selector, node):
                candidates.append(score_candidate("name", f'By.name("{escape_java_string(name)}")', name))

        candidates.append(score_candidate("css", f'By.cssSelector("{escape_java_string(css)}")', css))
        return candidates

    def render_playwright(self, candidates: list[Candidate], css: str, is_dynamic: bool) -> str:
        top = [item.text for item in top_distinct(candidates, self.settings.grammar_a_limit)]
        chain = top[0] + "".join(f".or(page.{item})" for item in top[1:])
        if is_dynamic:
            return (
                f"{DYNAMIC_WAITER_COMMENT}\n"
                f"await page.waitForSelector('{escape_single_quoted(css)}', "
                f"{{ state: 'visible', timeout: {self.settings.wait_timeout_ms} }});\n"
                f"await page.{chain}"
            )
        return f"page.{chain}"

    def render_selenium(self, candidates: list[Candidate], is_dynamic: bool) -> str:
        top = [item.text for item in top_distinct(candidates, self.settings.grammar_b_limit)]
        wait = ""
        if is_dynamic:
            seconds = max(1, round(self.settings.wait_timeout_ms / 1000))
            wait = (
                f"WebDriverWait wait = new WebDriverWait(driver, Duration.ofSeconds({seconds}));\n"
                f"wait.until(ExpectedConditions.visibilityOfElementLocated({top[0]}));\n"
            )
        if len(top) == 1:
            return f"{wait}driver.findElement({top[0]})"
        return (
            f"{wait}WebElement element;\n"
            "try {\n"
            f"    element = driver.findElement({top[0]});\n"
            "} catch (NoSuchElementException e) {\n"
            f"    element = driver.findElement({top[1]});\n"
            "}"
        )

    def resolve_role(self, node: Any) -> str | None:
        explicit = (self.tree.get_attribute(node, "role") or "").strip()
        if explicit:
            return explicit
        return infer_role(
            self.tree.tag_name(node),
            self.tree.get_attribute(node, "type"),
            self.tree.has_attribute(node, "href"),
        )

    def accessible_name(self, node: Any) -> str:
        for attr in ("aria-label", "title", "alt"):
            value = (self.tree.get_attribute(node, attr) or "").strip()
            if value:
                return value
        return first_line(self.tree.visible_text(node), self.settings.text_limit)
