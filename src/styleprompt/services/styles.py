"""Priority-tiered style tag assembly.

Tags are collected in nine fixed tiers, earliest first:

1. production descriptors (reverb, texture, stereo, dynamic)
2. one recording context
3. mood tags, two per genre component
4. thematic enrichment (themes, scene, era, intent)
5. two texture tags
6-9. weighted categories (vocal, spatial, harmonic, dynamic, temporal)

The running list is de-duplicated case-insensitively and truncated to the tag
limit at the end, so later tiers are the first to be dropped. The first five
tags (tiers 1 and 2) always survive, since the limit never goes below them.
Each weighted category costs exactly one draw from the stream before its own
selection.
"""

from __future__ import annotations

import math
from typing import Iterable, Optional, Sequence

from loguru import logger

from ..app.models import AssembledStyleResult, TagCategoryWeights, ThematicContext
from .catalog import CATALOG, TAG_CATEGORIES, GenreDefinition
from .exceptions import InvariantViolation
from .keywords import extract_priority_moods, extract_themes, harmonic_complexity_score
from .random_stream import Rng, select_random, select_random_n
from .trace import TraceCollector, trace_decision
from .vocabulary import (
    DEFAULT_REVERBS,
    DEFAULT_TAG_WEIGHTS,
    DEFAULT_TEXTURES,
    DYNAMIC_DESCRIPTORS,
    DYNAMIC_TAGS,
    ENERGY_LEVEL_SCALES,
    ERA_TAGS,
    ERA_TEXTURES,
    GENERIC_RECORDING_CONTEXTS,
    HARMONIC_TAGS,
    INTENT_TAGS,
    SPATIAL_HINT_REVERBS,
    SPATIAL_TAGS,
    STEREO_IMAGING,
    TEMPORAL_TAGS,
    TEXTURE_TAGS,
    VOCAL_TAGS,
)

STYLE_TAG_LIMIT = 10
PROTECTED_TAG_COUNT = 5
MOODS_PER_GENRE = 2
TEXTURE_TAG_COUNT = 2
MAX_CONTEXT_THEMES = 2
MAX_ERA_TAGS = 2

_TRACE_DOMAIN = "styles"

_WEIGHTED_CATEGORIES: list[tuple[str, list[str], int]] = [
    ("vocal", VOCAL_TAGS, 2),
    ("spatial", SPATIAL_TAGS, 1),
    ("harmonic", HARMONIC_TAGS, 1),
    ("dynamic", DYNAMIC_TAGS, 1),
    ("temporal", TEMPORAL_TAGS, 1),
]


class _TagList:
    def __init__(self) -> None:
        self.tags: list[str] = []
        self._seen: set[str] = set()

    def add(self, tag: str) -> bool:
        normalized = " ".join(tag.split()).lower()
        if not normalized or normalized in self._seen:
            return False
        self._seen.add(normalized)
        self.tags.append(normalized)
        return True

    def extend(self, tags: Iterable[str]) -> list[str]:
        return [" ".join(tag.split()).lower() for tag in tags if self.add(tag)]

    def __contains__(self, tag: object) -> bool:
        return isinstance(tag, str) and " ".join(tag.split()).lower() in self._seen


def arc_multiplier(arc_length: int) -> float:
    if arc_length <= 2:
        return 1.0
    if arc_length <= 4:
        return 1.3
    return 1.6


def complexity_multiplier(score: int) -> float:
    if score <= 0:
        return 1.0
    if score == 1:
        return 1.4
    return 1.8


def resolve_tag_weights(
    genre_id: str,
    *,
    description: str = "",
    context: Optional[ThematicContext] = None,
) -> TagCategoryWeights:
    """Per-genre category weights with energy, arc and complexity scaling applied."""
    weights = dict(DEFAULT_TAG_WEIGHTS)
    genre = CATALOG.get(genre_id)
    if genre is not None and genre.tag_weights:
        weights.update(genre.tag_weights)

    if context is not None and context.energy_level is not None:
        scales = ENERGY_LEVEL_SCALES[context.energy_level.value]
        weights = {category: weights[category] * scales[category] for category in TAG_CATEGORIES}

    arc_length = len(context.narrative_arc) if context is not None else 0
    weights["dynamic"] *= arc_multiplier(arc_length)
    weights["harmonic"] *= complexity_multiplier(harmonic_complexity_score(description))

    return TagCategoryWeights(
        **{category: min(1.0, max(0.0, weights[category])) for category in TAG_CATEGORIES}
    )


def _match_hint(value: Optional[str], table: dict[str, list[str]]) -> list[str]:
    if not value:
        return []
    folded = value.lower()
    for key, entries in table.items():
        if key in folded:
            return entries
    return []


def _genre_pools(genre: Optional[GenreDefinition]) -> tuple[Sequence[str], Sequence[str]]:
    if genre is None:
        return DEFAULT_TEXTURES, DEFAULT_REVERBS
    return genre.textures, genre.reverbs


def blend_production_phrase(components: Sequence[str], rng: Rng) -> str:
    """One "texture, reverb, stereo, dynamic" phrase drawn from the union of genre pools."""
    textures: list[str] = []
    reverbs: list[str] = []
    for genre_id in components:
        genre_textures, genre_reverbs = _genre_pools(CATALOG.get(genre_id))
        textures.extend(item for item in genre_textures if item not in textures)
        reverbs.extend(item for item in genre_reverbs if item not in reverbs)
    return ", ".join(
        [
            select_random(textures, rng),
            select_random(reverbs, rng),
            select_random(STEREO_IMAGING, rng),
            select_random(DYNAMIC_DESCRIPTORS, rng),
        ]
    )


def production_descriptors(
    components: Sequence[str],
    rng: Rng,
    context: Optional[ThematicContext] = None,
) -> list[str]:
    if len(components) > 1:
        phrase = blend_production_phrase(components, rng)
        return [part.strip() for part in phrase.split(",") if part.strip()]

    textures, reverbs = _genre_pools(CATALOG.get(components[0]))
    spatial_hint = context.spatial_hint if context is not None else None
    era = context.era if context is not None else None
    reverb = select_random(_match_hint(spatial_hint, SPATIAL_HINT_REVERBS) or reverbs, rng)
    texture = select_random(_match_hint(era, ERA_TEXTURES) or textures, rng)
    stereo = select_random(STEREO_IMAGING, rng)
    dynamic = select_random(DYNAMIC_DESCRIPTORS, rng)
    return [reverb, texture, stereo, dynamic]


def recording_context(genre_id: str, rng: Rng) -> str:
    genre = CATALOG.get(genre_id)
    if genre is not None and genre.recording_contexts:
        return select_random(genre.recording_contexts, rng)
    return select_random(GENERIC_RECORDING_CONTEXTS, rng)


def _collect_moods(
    collected: _TagList,
    components: Sequence[str],
    rng: Rng,
    description: str,
    context: Optional[ThematicContext],
) -> list[str]:
    slots = MOODS_PER_GENRE * len(components)
    priority: list[str] = []
    if context is not None and context.mood:
        priority.append(context.mood)
    priority.extend(extract_priority_moods(description, slots))
    moods = collected.extend(priority[:slots])

    remaining = slots - len(moods)
    if remaining <= 0:
        return moods
    per_genre = math.ceil(remaining / len(components))
    for genre_id in components:
        if len(moods) >= slots:
            break
        genre = CATALOG.get(genre_id)
        if genre is None:
            continue
        pool = [mood.lower() for mood in genre.moods if mood not in collected]
        count = min(per_genre, len(pool), slots - len(moods))
        moods.extend(collected.extend(select_random_n(pool, count, rng)))
    return moods


def _collect_themes(
    collected: _TagList,
    description: str,
    context: Optional[ThematicContext],
) -> None:
    if context is not None and (context.themes or context.scene):
        collected.extend(context.themes[:MAX_CONTEXT_THEMES])
        if context.scene:
            collected.add(context.scene)
    else:
        collected.extend(extract_themes(description, MAX_CONTEXT_THEMES))

    if context is None:
        return
    collected.extend(_match_hint(context.era, ERA_TAGS)[:MAX_ERA_TAGS])
    if context.intent:
        intent_tag = INTENT_TAGS.get(context.intent.strip().lower())
        if intent_tag is not None:
            collected.add(intent_tag)


def _vocal_tags(context: Optional[ThematicContext], rng: Rng) -> list[str]:
    if context is not None and context.vocal_character:
        return [f"{context.vocal_character.strip()} vocals", *select_random_n(VOCAL_TAGS, 1, rng)]
    return select_random_n(VOCAL_TAGS, 2, rng)


def assemble_style_tags(
    components: Sequence[str],
    rng: Rng,
    *,
    context: Optional[ThematicContext] = None,
    description: str = "",
    trace: Optional[TraceCollector] = None,
    limit: int = STYLE_TAG_LIMIT,
) -> AssembledStyleResult:
    if not components:
        raise InvariantViolation("assemble_style_tags needs at least one genre component")
    limit = max(limit, PROTECTED_TAG_COUNT)

    collected = _TagList()
    collected.extend(production_descriptors(components, rng, context))
    collected.add(recording_context(components[0], rng))
    moods = _collect_moods(collected, components, rng, description, context)
    _collect_themes(collected, description, context)
    collected.extend(select_random_n(TEXTURE_TAGS, TEXTURE_TAG_COUNT, rng))

    weights = resolve_tag_weights(components[0], description=description, context=context)
    for category, pool, max_count in _WEIGHTED_CATEGORIES:
        probability = getattr(weights, category)
        draw = rng()
        if draw >= probability:
            trace_decision(
                trace,
                domain=_TRACE_DOMAIN,
                key=f"styles.{category}",
                branch_taken="skipped",
                why=f"draw {draw:.3f} >= weight {probability:.2f}",
            )
            continue
        if category == "vocal":
            picks = _vocal_tags(context, rng)
        else:
            picks = select_random_n(pool, max_count, rng)
        added = collected.extend(picks)
        trace_decision(
            trace,
            domain=_TRACE_DOMAIN,
            key=f"styles.{category}",
            branch_taken="included",
            why=f"draw {draw:.3f} < weight {probability:.2f}",
            method="weighted",
            candidates=added,
        )

    kept = collected.tags[:limit]
    dropped = collected.tags[limit:]
    if dropped:
        logger.debug("Style tags truncated to {}; dropped {}", limit, dropped)
        trace_decision(
            trace,
            domain=_TRACE_DOMAIN,
            key="styles.truncate",
            branch_taken="tags-truncated",
            why=f"kept {len(kept)} of {len(collected.tags)} tags",
            method="truncate",
            candidates=dropped,
        )
    return AssembledStyleResult(
        tags=kept,
        formatted=", ".join(kept),
        moods=[mood for mood in moods if mood in kept],
        dropped=dropped,
    )
