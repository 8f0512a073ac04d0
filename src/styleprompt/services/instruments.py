"""Pool-based instrument, chord progression and vocal style selection."""

from __future__ import annotations

from typing import Optional, Sequence

from ..app.models import InstrumentSelection
from .catalog import CATALOG, ChordProgression, GenreDefinition, InstrumentRules, VocalProfile
from .random_stream import Rng, random_int_inclusive, roll_chance, select_random, shuffle
from .trace import TraceCollector, trace_decision
from .vocabulary import DEFAULT_PROGRESSIONS, DEFAULT_VOCALS

MULTI_GENRE_PER_GENRE = 2
MULTI_GENRE_TOTAL = 4

_FALLBACK_PROGRESSIONS = tuple(
    ChordProgression(name=item["name"], pattern=item["pattern"]) for item in DEFAULT_PROGRESSIONS
)
_FALLBACK_VOCALS = VocalProfile(
    ranges=tuple(DEFAULT_VOCALS["ranges"]),
    deliveries=tuple(DEFAULT_VOCALS["deliveries"]),
)


def _mentions(instrument: str, pattern: str) -> bool:
    left = instrument.lower()
    right = pattern.lower()
    return right in left or left in right


def _is_excluded(candidate: str, chosen: Sequence[str], rules: InstrumentRules) -> bool:
    for first, second in rules.exclusions:
        for picked in chosen:
            if _mentions(candidate, first) and _mentions(picked, second):
                return True
            if _mentions(candidate, second) and _mentions(picked, first):
                return True
    return False


def select_instruments(genre_id: str, rng: Rng) -> list[str]:
    genre = CATALOG.get(genre_id)
    if genre is None:
        return []
    rules = genre.instruments
    chosen: list[str] = []
    for pool_name in rules.order:
        if len(chosen) >= rules.max_tags:
            break
        pool = rules.pools[pool_name]
        if not roll_chance(pool.chance if pool.chance < 1.0 else None, rng):
            continue
        candidates = [
            item
            for item in pool.items
            if item not in chosen and not _is_excluded(item, chosen, rules)
        ]
        if not candidates:
            continue
        upper = min(pool.max_pick, len(candidates))
        count = random_int_inclusive(min(pool.min_pick, upper), upper, rng)
        picked = 0
        for item in shuffle(candidates, rng):
            if picked >= count or len(chosen) >= rules.max_tags:
                break
            if _is_excluded(item, chosen, rules):
                continue
            chosen.append(item)
            picked += 1
    return chosen


def select_multi_genre_instruments(components: Sequence[str], rng: Rng) -> list[str]:
    pooled: list[str] = []
    for genre_id in components:
        for item in select_instruments(genre_id, rng)[:MULTI_GENRE_PER_GENRE]:
            if item not in pooled:
                pooled.append(item)
    return shuffle(pooled, rng)[:MULTI_GENRE_TOTAL]


def _progressions(genre: Optional[GenreDefinition]) -> Sequence[ChordProgression]:
    return genre.progressions if genre is not None else _FALLBACK_PROGRESSIONS


def _vocals(genre: Optional[GenreDefinition]) -> VocalProfile:
    return genre.vocals if genre is not None else _FALLBACK_VOCALS


def select_chord_progression(genre_id: str, rng: Rng) -> str:
    progression = select_random(_progressions(CATALOG.get(genre_id)), rng)
    return f"{progression.name} ({progression.pattern}) harmony"


def select_vocal_style(genre_id: str, rng: Rng) -> str:
    profile = _vocals(CATALOG.get(genre_id))
    vocal_range = select_random(profile.ranges, rng)
    delivery = select_random(profile.deliveries, rng)
    return f"{delivery} {vocal_range} vocals"


def assemble_instruments(
    components: Sequence[str],
    rng: Rng,
    trace: Optional[TraceCollector] = None,
) -> InstrumentSelection:
    primary = components[0] if components else ""
    if len(components) > 1:
        instruments = select_multi_genre_instruments(components, rng)
        branch = "multi-genre"
    else:
        instruments = select_instruments(primary, rng)
        branch = "single-genre"
    trace_decision(
        trace,
        domain="instruments",
        key="instruments.select",
        branch_taken=branch,
        why=f"selected {len(instruments)} instruments for {list(components)}",
        method="pool",
        candidates=instruments,
    )
    progression = select_chord_progression(primary, rng)
    vocal_style = select_vocal_style(primary, rng)
    return InstrumentSelection(
        instruments=instruments,
        chord_progression=progression,
        vocal_style=vocal_style,
        formatted=", ".join([*instruments, progression, vocal_style]),
    )
