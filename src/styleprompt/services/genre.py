"""Genre resolution from free text or an explicit override."""

from __future__ import annotations

import math
import re
from typing import Optional

from loguru import logger

from ..app.models import ResolvedGenre
from .catalog import CATALOG, Catalog
from .keywords import classify_mood_phrase, matches_whole_word, whole_word_spans
from .random_stream import Rng
from .trace import TraceCollector, trace_decision

MAX_GENRE_COMPONENTS = 4

_TRACE_DOMAIN = "genre"
_TRACE_KEY = "genre.resolve"
_TOKEN_PATTERN = re.compile(r"[^\s,/&\-]+")


def _compound_phrases(catalog: Catalog) -> list[str]:
    phrases = set(catalog.aliases) | set(catalog.names)
    compound = [phrase for phrase in phrases if _TOKEN_PATTERN.fullmatch(phrase) is None]
    return sorted(compound, key=lambda phrase: (-len(phrase), phrase))


_COMPOUND_PHRASES = _compound_phrases(CATALOG)
_ALIASES_LONGEST_FIRST = sorted(CATALOG.aliases, key=lambda alias: (-len(alias), alias))


def parse_genre_components(text: str, limit: int = MAX_GENRE_COMPONENTS) -> list[str]:
    """Map a genre string such as ``"jazz, hip hop"`` onto canonical identifiers.

    Multi-word names and aliases are claimed first so their pieces are not
    looked up again as separate tokens. Unknown tokens are ignored.
    """
    if not text or not text.strip():
        return []
    remainder = text.lower()
    hits: list[tuple[int, str]] = []
    for phrase in _COMPOUND_PHRASES:
        for start, end in whole_word_spans(remainder, phrase):
            genre_id = CATALOG.lookup(phrase)
            if genre_id is not None:
                hits.append((start, genre_id))
            remainder = remainder[:start] + " " * (end - start) + remainder[end:]
    for match in _TOKEN_PATTERN.finditer(remainder):
        genre_id = CATALOG.lookup(match.group(0))
        if genre_id is not None:
            hits.append((match.start(), genre_id))

    components: list[str] = []
    for _, genre_id in sorted(hits, key=lambda hit: hit[0]):
        if genre_id not in components:
            components.append(genre_id)
        if len(components) >= limit:
            break
    return components


def find_alias(text: str) -> Optional[str]:
    """Longest-alias-first lookup; returns the canonical identifier or None."""
    for alias in _ALIASES_LONGEST_FIRST:
        if matches_whole_word(text, alias):
            return CATALOG.aliases[alias]
    return None


def detect_genres(description: str, limit: int = MAX_GENRE_COMPONENTS) -> list[str]:
    detected: list[str] = []
    for genre_id in CATALOG.scan_order():
        if len(detected) >= limit:
            break
        genre = CATALOG.genres[genre_id]
        if any(matches_whole_word(description, keyword) for keyword in genre.keywords):
            detected.append(genre_id)
    return detected


def resolve_genre(
    description: str,
    override: Optional[str],
    rng: Rng,
    trace: Optional[TraceCollector] = None,
) -> ResolvedGenre:
    if override and override.strip():
        components = parse_genre_components(override)
        if components:
            display = override.strip().lower()
            trace_decision(
                trace,
                domain=_TRACE_DOMAIN,
                key=_TRACE_KEY,
                branch_taken="override",
                why=f"explicit override '{display}' mapped to {components}",
            )
            logger.debug("Genre resolved from override: {}", components)
            return ResolvedGenre(
                detected=None,
                display=display,
                primary=components[0],
                components=components,
            )
        logger.warning("Ignoring invalid genre override {!r}", override)

    text = description or ""
    components = detect_genres(text)
    if components:
        trace_decision(
            trace,
            domain=_TRACE_DOMAIN,
            key=_TRACE_KEY,
            branch_taken="keyword",
            why=f"whole-word keyword matches for {components}",
        )
        return _detected(components)

    alias_target = find_alias(text)
    if alias_target is not None:
        trace_decision(
            trace,
            domain=_TRACE_DOMAIN,
            key=_TRACE_KEY,
            branch_taken="alias",
            why=f"alias lookup matched '{alias_target}'",
        )
        return _detected([alias_target])

    mood_genre = classify_mood_phrase(text, CATALOG.mood_genres)
    if mood_genre is not None:
        trace_decision(
            trace,
            domain=_TRACE_DOMAIN,
            key=_TRACE_KEY,
            branch_taken="mood",
            why=f"mood phrase classified as '{mood_genre}'",
        )
        return _detected([mood_genre])

    candidates = CATALOG.genre_ids
    index = math.floor(rng() * len(candidates))
    chosen = candidates[index]
    trace_decision(
        trace,
        domain=_TRACE_DOMAIN,
        key=_TRACE_KEY,
        branch_taken="random",
        why="no override, keyword, alias or mood match; picked uniformly",
        method="uniform",
        chosen_index=index,
        candidates=candidates,
    )
    logger.debug("Genre fell back to random pick {}", chosen)
    return ResolvedGenre(detected=None, display=chosen, primary=chosen, components=[chosen])


def _detected(components: list[str]) -> ResolvedGenre:
    logger.debug("Genre detected from description: {}", components)
    return ResolvedGenre(
        detected=components[0],
        display=" ".join(components),
        primary=components[0],
        components=components,
    )
