"""Blending of per-genre BPM ranges into a single tempo range."""

from __future__ import annotations

import math
import re
from typing import Iterable, Optional, Union

from ..app.models import BpmRange
from .catalog import CATALOG, BpmSpan
from .random_stream import Rng, random_int_inclusive

DEFAULT_BPM_TEXT = "between 80 and 120"
NARROW_RANGE_SPREAD = 60

_SPLIT_PATTERN = re.compile(r"[,\s\-]+")


def _tokens(genres: Union[str, Iterable[str]]) -> list[str]:
    sources = [genres] if isinstance(genres, str) else list(genres)
    tokens: list[str] = []
    for source in sources:
        tokens.extend(token for token in _SPLIT_PATTERN.split(source.lower()) if token)
    return tokens


def _known_spans(genres: Union[str, Iterable[str]]) -> list[BpmSpan]:
    seen: list[str] = []
    for token in _tokens(genres):
        genre_id = CATALOG.lookup(token)
        if genre_id is not None and genre_id not in seen:
            seen.append(genre_id)
    return [CATALOG.genres[genre_id].bpm for genre_id in seen]


def blend_bpm_range(genres: Union[str, Iterable[str]]) -> Optional[BpmRange]:
    """Blend the ranges of every known genre token.

    Overlapping ranges intersect. Disjoint ranges are replaced by a span
    narrowed around the midpoint of their union, which never covers the
    whole union.
    """
    spans = _known_spans(genres)
    if not spans:
        return None
    if len(spans) == 1:
        return BpmRange(min=spans[0].min, max=spans[0].max, is_intersection=True)

    low = max(span.min for span in spans)
    high = min(span.max for span in spans)
    if low <= high:
        return BpmRange(min=low, max=high, is_intersection=True)

    union_min = min(span.min for span in spans)
    union_max = max(span.max for span in spans)
    midpoint = (union_min + union_max) / 2
    spread = min(NARROW_RANGE_SPREAD, (union_max - union_min) // 2)
    return BpmRange(
        min=max(union_min, math.floor(midpoint - spread / 2)),
        max=min(union_max, math.ceil(midpoint + spread / 2)),
        is_intersection=False,
    )


def format_bpm_range(bpm_range: BpmRange) -> str:
    return f"between {bpm_range.min} and {bpm_range.max}"


def bpm_text_for_genres(genres: Union[str, Iterable[str]]) -> str:
    blended = blend_bpm_range(genres)
    return format_bpm_range(blended) if blended is not None else DEFAULT_BPM_TEXT


def random_bpm(bpm_range: BpmRange, rng: Rng) -> int:
    return random_int_inclusive(bpm_range.min, bpm_range.max, rng)


def typical_bpm(genre_id: str) -> Optional[int]:
    genre = CATALOG.get(genre_id)
    return genre.bpm.typical if genre is not None else None
