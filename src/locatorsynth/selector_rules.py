from __future__ import annotations

import re
from dataclasses import dataclass

SELECTOR_ATTRIBUTE_ALLOWLIST = (
    "name",
    "data-testid",
    "role",
    "type",
    "aria-label",
    "value",
    "placeholder",
)

RECORD_ATTRIBUTES = (
    "id",
    "class",
    "name",
    "data-testid",
    "aria-label",
    "role",
    "type",
    "value",
    "placeholder",
    "alt",
    "src",
    "href",
)

LANDMARK_TAGS = frozenset({"form", "main", "section", "article", "tr"})
LABELABLE_TAGS = frozenset({"input", "textarea", "select"})
HEADING_TAGS = ("h1", "h2", "h3", "h4", "h5", "h6")

_DIGIT_RUN_PATTERN = re.compile(r"\d{4,}")
_CSS_IDENTIFIER_PATTERN = re.compile(r"^-?[A-Za-z_][A-Za-z0-9_-]*$")
_INDEXED_XPATH_PATTERN = re.compile(r"\[\d+\]")


@dataclass(frozen=True, slots=True)
class RoleRule:
    tags: tuple[str, ...]
    role: str
    types: tuple[str, ...] | None = None
    requires_href: bool = False

    def matches(self, tag: str, input_type: str | None, has_href: bool) -> bool:
        if tag not in self.tags:
            return False
        if self.requires_href and not has_href:
            return False
        if self.types is None:
            return True
        return (input_type or "") in self.types


# Evaluated top to bottom, first match wins.
ROLE_RULES: tuple[RoleRule, ...] = (
    RoleRule(tags=("button",), role="button"),
    RoleRule(tags=("input",), role="button", types=("button", "submit", "reset")),
    RoleRule(tags=("a",), role="link", requires_href=True),
    RoleRule(tags=("input",), role="checkbox", types=("checkbox",)),
    RoleRule(tags=("input",), role="radio", types=("radio",)),
    RoleRule(tags=("select",), role="combobox"),
    RoleRule(tags=("input",), role="textbox"),
    RoleRule(tags=HEADING_TAGS, role="heading"),
)


def infer_role(tag: str, input_type: str | None, has_href: bool) -> str | None:
    normalized_tag = tag.strip().lower()
    normalized_type = input_type.strip().lower() if input_type else None
    for rule in ROLE_RULES:
        if rule.matches(normalized_tag, normalized_type, has_href):
            return rule.role
    return None


def normalize_space(value: str | None, limit: int = 200) -> str:
    if not value:
        return ""
    compact = re.sub(r"\s+", " ", str(value)).strip()
    return compact[:limit] if compact else ""


def first_line(value: str | None, limit: int = 50) -> str:
    if not value:
        return ""
    for line in str(value).strip().split("\n"):
        text = line.strip()
        if text:
            return text[:limit]
    return ""


def has_digit_run(value: str | None) -> bool:
    if not value:
        return False
    return _DIGIT_RUN_PATTERN.search(value) is not None


def looks_generated(element_id: str | None, class_string: str | None) -> bool:
    return has_digit_run(element_id) or has_digit_run(class_string)


def is_css_identifier(value: str) -> bool:
    return _CSS_IDENTIFIER_PATTERN.fullmatch(value) is not None


def escape_css_identifier(value: str) -> str:
    if is_css_identifier(value):
        return value
    escaped: list[str] = []
    # A digit may not open an identifier, even behind a single leading hyphen.
    leading = 2 if value.startswith("-") else 1
    for index, char in enumerate(value):
        if char.isascii() and (char.isalpha() or char in ("-", "_")):
            escaped.append(char)
        elif char.isascii() and char.isdigit() and index >= leading:
            escaped.append(char)
        elif not char.isascii() and char.isprintable() and not char.isspace():
            escaped.append(char)
        else:
            escaped.append(f"\\{ord(char):x} ")
    return "".join(escaped)


def escape_css_string(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')


_CONTROL_ESCAPES = (("\n", "\\n"), ("\r", "\\r"), ("\t", "\\t"))


def _escape_controls(value: str) -> str:
    for raw, escaped in _CONTROL_ESCAPES:
        value = value.replace(raw, escaped)
    return value


def escape_single_quoted(value: str) -> str:
    return _escape_controls(value.replace("\\", "\\\\").replace("'", "\\'"))


def escape_java_string(value: str) -> str:
    return _escape_controls(value.replace("\\", "\\\\").replace('"', '\\"').replace("'", "\\'"))


def css_path_segment_count(selector: str) -> int:
    return len(selector.split(">"))


def is_fragile_css(selector: str) -> bool:
    return "nth-of-type" in selector or css_path_segment_count(selector) > 3


def is_fragile_xpath(locator: str) -> bool:
    lowered = locator.strip().lower()
    return lowered.startswith("/html") or _INDEXED_XPATH_PATTERN.search(lowered) is not None
