"""Field-by-field remixing of previously formatted prompts."""

from __future__ import annotations

from typing import Optional

from loguru import logger

from ..app.models import RemixField, RemixResult, TraceDecisionEvent
from .bpm import blend_bpm_range, format_bpm_range, random_bpm
from .catalog import CATALOG
from .fields import (
    DEFAULT_GENRE,
    extract_field,
    has_field,
    is_quoted_layout,
    replace_field_line,
)
from .formatter import genre_display_name
from .genre import MAX_GENRE_COMPONENTS, parse_genre_components
from .instruments import assemble_instruments
from .random_stream import Rng, select_random_n
from .styles import STYLE_TAG_LIMIT, assemble_style_tags
from .trace import TraceCollector, trace_decision
from .vocabulary import MOOD_POOL, RECORDING_DESCRIPTORS

RECORDING_DESCRIPTOR_COUNT = 3

_FIELD_NAMES = {
    RemixField.GENRE: "genre",
    RemixField.INSTRUMENTS: "instruments",
    RemixField.MOOD: "mood",
    RemixField.STYLE: "style tags",
    RemixField.RECORDING: "recording",
}


class RemixEngine:
    """Rewrites one field of a formatted prompt with freshly assembled values.

    The prompt text is the only state: current values are read back out of it
    and exactly one field line (plus BPM for genre changes) is rewritten. A
    prompt without the requested field comes back unchanged. The bracket
    layout header (``[Mood, Genre, Key: ...]``) is not a field and keeps the
    values it was generated with.
    """

    def __init__(
        self,
        *,
        default_genre: str = DEFAULT_GENRE,
        style_tag_limit: int = STYLE_TAG_LIMIT,
    ) -> None:
        self._default_genre = default_genre
        self._style_tag_limit = style_tag_limit

    def current_genres(self, text: str) -> list[str]:
        components = parse_genre_components(extract_field(text, "genre", self._default_genre))
        return components or parse_genre_components(self._default_genre) or [CATALOG.genre_ids[0]]

    def remix(
        self,
        text: str,
        field: RemixField,
        rng: Rng,
        *,
        target_count: Optional[int] = None,
        trace: Optional[TraceCollector] = None,
    ) -> RemixResult:
        if field == RemixField.GENRE:
            return self.remix_genre(text, rng, target_count=target_count, trace=trace)
        if field == RemixField.INSTRUMENTS:
            return self.remix_instruments(text, rng, trace=trace)
        if field == RemixField.MOOD:
            return self.remix_mood(text, rng, trace=trace)
        if field == RemixField.STYLE:
            return self.remix_style_tags(text, rng, trace=trace)
        return self.remix_recording(text, rng, trace=trace)

    def remix_genre(
        self,
        text: str,
        rng: Rng,
        *,
        target_count: Optional[int] = None,
        trace: Optional[TraceCollector] = None,
    ) -> RemixResult:
        if not has_field(text, "genre"):
            self._field_missing(RemixField.GENRE, trace)
            return RemixResult(prompt=text, field=RemixField.GENRE, value="", trace=_events(trace))

        current = parse_genre_components(extract_field(text, "genre", self._default_genre))
        count = target_count if target_count is not None else len(current)
        count = max(1, min(MAX_GENRE_COMPONENTS, count))
        candidates = [genre_id for genre_id in CATALOG.genre_ids if genre_id not in current]
        chosen = select_random_n(candidates, min(count, len(candidates)), rng)

        value = " ".join(chosen) if is_quoted_layout(text) else genre_display_name(chosen)
        updated = self._replace(text, RemixField.GENRE, value, trace)

        bpm_range = blend_bpm_range(chosen)
        if bpm_range is not None and has_field(updated, "bpm"):
            if extract_field(updated, "bpm").isdigit():
                bpm_value = str(random_bpm(bpm_range, rng))
            else:
                bpm_value = format_bpm_range(bpm_range)
            updated = replace_field_line(updated, "bpm", bpm_value)
        return RemixResult(prompt=updated, field=RemixField.GENRE, value=value, trace=_events(trace))

    def remix_instruments(
        self,
        text: str,
        rng: Rng,
        *,
        trace: Optional[TraceCollector] = None,
    ) -> RemixResult:
        selection = assemble_instruments(self.current_genres(text), rng, trace)
        updated = self._replace(text, RemixField.INSTRUMENTS, selection.formatted, trace)
        return RemixResult(
            prompt=updated,
            field=RemixField.INSTRUMENTS,
            value=selection.formatted,
            trace=_events(trace),
        )

    def remix_mood(
        self,
        text: str,
        rng: Rng,
        *,
        trace: Optional[TraceCollector] = None,
    ) -> RemixResult:
        pool: list[str] = []
        for genre_id in self.current_genres(text):
            genre = CATALOG.get(genre_id)
            if genre is not None:
                pool.extend(mood.lower() for mood in genre.moods if mood.lower() not in pool)
        if not pool:
            pool = list(MOOD_POOL)
        count = 2 if rng() < 0.5 else 3
        value = ", ".join(select_random_n(pool, min(count, len(pool)), rng))
        updated = self._replace(text, RemixField.MOOD, value, trace)
        return RemixResult(prompt=updated, field=RemixField.MOOD, value=value, trace=_events(trace))

    def remix_style_tags(
        self,
        text: str,
        rng: Rng,
        *,
        trace: Optional[TraceCollector] = None,
    ) -> RemixResult:
        style = assemble_style_tags(
            self.current_genres(text),
            rng,
            description=extract_field(text, "mood", ""),
            trace=trace,
            limit=self._style_tag_limit,
        )
        updated = self._replace(text, RemixField.STYLE, style.formatted, trace)
        return RemixResult(
            prompt=updated,
            field=RemixField.STYLE,
            value=style.formatted,
            trace=_events(trace),
        )

    def remix_recording(
        self,
        text: str,
        rng: Rng,
        *,
        trace: Optional[TraceCollector] = None,
    ) -> RemixResult:
        value = ", ".join(select_random_n(RECORDING_DESCRIPTORS, RECORDING_DESCRIPTOR_COUNT, rng))
        updated = self._replace(text, RemixField.RECORDING, value, trace)
        return RemixResult(
            prompt=updated,
            field=RemixField.RECORDING,
            value=value,
            trace=_events(trace),
        )

    @staticmethod
    def _field_missing(field: RemixField, trace: Optional[TraceCollector]) -> None:
        name = _FIELD_NAMES[field]
        logger.debug("No {} field found to remix; prompt left unchanged", name)
        trace_decision(
            trace,
            domain="remix",
            key=f"remix.{field.value}",
            branch_taken="field-missing",
            why=f"no '{name}' line in the prompt",
        )

    @staticmethod
    def _replace(
        text: str,
        field: RemixField,
        value: str,
        trace: Optional[TraceCollector],
    ) -> str:
        name = _FIELD_NAMES[field]
        if not has_field(text, name):
            RemixEngine._field_missing(field, trace)
            return text
        trace_decision(
            trace,
            domain="remix",
            key=f"remix.{field.value}",
            branch_taken="replaced",
            why=f"rewrote the '{name}' line",
        )
        return replace_field_line(text, name, value)


def _events(trace: Optional[TraceCollector]) -> list[TraceDecisionEvent]:
    return list(trace.events) if trace is not None else []
