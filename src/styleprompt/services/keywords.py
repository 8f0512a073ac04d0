"""Whole-word keyword matching and the keyword-driven extractors."""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Iterable, Mapping, Optional

from .vocabulary import HARMONIC_COMPLEXITY_KEYWORDS, MOOD_KEYWORDS, THEME_KEYWORDS

PATTERN_CACHE_SIZE = 200


@lru_cache(maxsize=PATTERN_CACHE_SIZE)
def _whole_word_pattern(keyword: str) -> re.Pattern[str]:
    # Boundaries are any non-alphanumeric character so "r&b" and "lo-fi" still match.
    return re.compile(rf"(?<![a-z0-9]){re.escape(keyword)}(?![a-z0-9])", re.IGNORECASE)


def clear_pattern_cache() -> None:
    _whole_word_pattern.cache_clear()


def matches_whole_word(text: str, keyword: str) -> bool:
    folded = keyword.strip().lower()
    if not folded or not text:
        return False
    return _whole_word_pattern(folded).search(text) is not None


def whole_word_spans(text: str, keyword: str) -> list[tuple[int, int]]:
    folded = keyword.strip().lower()
    if not folded or not text:
        return []
    return [match.span() for match in _whole_word_pattern(folded).finditer(text)]


def find_keywords(text: str, keywords: Iterable[str], limit: Optional[int] = None) -> list[str]:
    found: list[str] = []
    for keyword in keywords:
        if limit is not None and len(found) >= limit:
            break
        if keyword not in found and matches_whole_word(text, keyword):
            found.append(keyword)
    return found


def match_mapping(text: str, mapping: Mapping[str, str], limit: Optional[int] = None) -> list[str]:
    """Return the distinct mapped values whose keys occur in ``text``, in mapping order."""
    values: list[str] = []
    for keyword, value in mapping.items():
        if limit is not None and len(values) >= limit:
            break
        if value not in values and matches_whole_word(text, keyword):
            values.append(value)
    return values


def extract_priority_moods(text: str, limit: int) -> list[str]:
    return find_keywords(text, MOOD_KEYWORDS, limit=limit)


def extract_themes(text: str, limit: int = 2) -> list[str]:
    return match_mapping(text, THEME_KEYWORDS, limit=limit)


def harmonic_complexity_score(text: str) -> int:
    return len(find_keywords(text, HARMONIC_COMPLEXITY_KEYWORDS))


def classify_mood_phrase(text: str, mood_genres: Mapping[str, str]) -> Optional[str]:
    hits = match_mapping(text, mood_genres, limit=1)
    return hits[0] if hits else None
