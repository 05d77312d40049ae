"""Text matching helpers for search: normalization, fuzzy matching, scoring."""

import re
from dataclasses import dataclass
from typing import Iterable, Optional

_NON_WORD = re.compile(r"[^\w\s]")
_WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True)
class SearchMatch:
    start: int
    end: int
    match: str


def normalize_search_term(term: str) -> str:
    """Lower-case, drop punctuation and collapse whitespace."""
    term = _NON_WORD.sub("", term.strip().lower())
    return _WHITESPACE.sub(" ", term)


def extract_search_keywords(term: str) -> list[str]:
    return [keyword for keyword in normalize_search_term(term).split(" ") if keyword]


def levenshtein_distance(a: str, b: str) -> int:
    if len(a) < len(b):
        a, b = b, a
    previous = list(range(len(b) + 1))
    for i, char_a in enumerate(a, start=1):
        current = [i]
        for j, char_b in enumerate(b, start=1):
            current.append(
                min(
                    previous[j] + 1,
                    current[j - 1] + 1,
                    previous[j - 1] + (char_a != char_b),
                )
            )
        previous = current
    return previous[-1]


def matches_search(
    text: Optional[str],
    term: Optional[str],
    *,
    case_sensitive: bool = False,
    fuzzy: bool = False,
    max_distance: int = 2,
) -> bool:
    """Substring match, falling back to per-word edit distance when fuzzy."""
    if not text or not term:
        return False
    if not case_sensitive:
        text, term = text.lower(), term.lower()
    if term in text:
        return True
    if fuzzy:
        return any(
            levenshtein_distance(word, term) <= max_distance for word in text.split()
        )
    return False


def get_search_matches(
    text: Optional[str],
    term: Optional[str],
    *,
    case_sensitive: bool = False,
    fuzzy: bool = False,
    max_distance: int = 2,
) -> list[SearchMatch]:
    """Match positions in `text` for highlighting."""
    if not text or not term:
        return []

    haystack = text if case_sensitive else text.lower()
    needle = term if case_sensitive else term.lower()

    matches: list[SearchMatch] = []
    index = haystack.find(needle)
    while index != -1:
        end = index + len(needle)
        matches.append(SearchMatch(start=index, end=end, match=text[index:end]))
        index = haystack.find(needle, end)

    if fuzzy and not matches:
        for word in re.finditer(r"\S+", text):
            candidate = word.group() if case_sensitive else word.group().lower()
            if levenshtein_distance(candidate, needle) <= max_distance:
                matches.append(
                    SearchMatch(start=word.start(), end=word.end(), match=word.group())
                )

    return matches


def score_search_result(
    text: Optional[str], term: Optional[str], field_weight: float = 1.0
) -> float:
    if not text or not term:
        return 0.0

    haystack = text.lower()
    needle = term.lower().strip()
    score = 0.0

    if haystack == needle:
        score += 100 * field_weight
    elif haystack.startswith(needle):
        score += 80 * field_weight
    elif needle in haystack:
        score += 60 * field_weight

    if re.search(rf"\b{re.escape(needle)}\b", haystack):
        score += 40 * field_weight

    keywords = extract_search_keywords(term)
    if keywords:
        matched = sum(1 for keyword in keywords if keyword in haystack)
        score += (matched / len(keywords)) * 20 * field_weight

    return score


def rank_by_relevance(items: Iterable, term: str, fields: dict[str, float]) -> list:
    """Sort `items` by summed field scores, best first. Stable for ties."""
    scored = []
    for item in items:
        total = sum(
            score_search_result(getattr(item, field, None), term, weight)
            for field, weight in fields.items()
        )
        scored.append((total, item))
    scored.sort(key=lambda pair: pair[0], reverse=True)
    return [item for _, item in scored]
