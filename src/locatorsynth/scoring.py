from __future__ import annotations

from typing import Iterable

from .models import Candidate, StrategyKind
from .selector_rules import has_digit_run, is_fragile_css, is_fragile_xpath

BASE_KIND_SCORES: dict[str, int] = {
    "testid": 100,
    "role": 90,
    "label": 85,
    "placeholder": 80,
    "id": 70,
    "name": 65,
    "text": 60,
    "class": 40,
    "xpath": 35,
    "css": 30,
}

GENERATED_VALUE_SCORE = 10
FRAGILE_CSS_SCORE = 15
FRAGILE_XPATH_SCORE = 20


def score(kind: StrategyKind | str, value: str) -> int:
    normalized = str(kind or "").strip().lower()
    text = value or ""

    if normalized in {"id", "class"} and has_digit_run(text):
        raw = GENERATED_VALUE_SCORE
    elif normalized == "css" and is_fragile_css(text):
        raw = FRAGILE_CSS_SCORE
    elif normalized == "xpath" and is_fragile_xpath(text):
        raw = FRAGILE_XPATH_SCORE
    else:
        raw = BASE_KIND_SCORES.get(normalized, 0)
    return max(0, min(100, int(raw)))


def score_candidate(kind: StrategyKind, text: str, value: str) -> Candidate:
    return Candidate(kind=kind, text=text, score=score(kind, value))


def rank_candidates(candidates: Iterable[Candidate]) -> list[Candidate]:
    # sorted() is stable, so equal scores keep discovery order.
    return sorted(candidates, key=lambda item: -item.score)


def top_distinct(candidates: Iterable[Candidate], limit: int) -> list[Candidate]:
    if limit <= 0:
        return []
    picked: list[Candidate] = []
    seen: set[str] = set()
    for candidate in rank_candidates(candidates):
        if candidate.text in seen:
            continue
        seen.add(candidate.text)
        picked.append(candidate)
        if len(picked) >= limit:
            break
    return picked
